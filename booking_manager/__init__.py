from .booking import BookingRecord, SpotRecord
from .conflicts import (
	ConflictReport,
	buffered_conflicts,
	detect_conflicts,
	enclosure_conflicts,
	point_conflicts,
)
from .errors import (
	BookingError,
	BookingNotFound,
	BookingStorageError,
	Forbidden,
	InProgressImmutable,
	InvalidDateShape,
	PastEndImmutable,
	ScheduleConflict,
)
from .gates import (
	MINIMUM_DURATION,
	authorize_cancel,
	authorize_modify,
	check_not_in_progress,
	check_not_past_end,
	parse_date_fields,
	validate_date_shape,
)
from .interval import PROXIMITY_BUFFER, PROXIMITY_BUFFER_MS, Interval
from .service import BookingPolicy, BookingService, BookingStore, CancelRequest, SpotStore, UpdateRequest
from .yaml_store import BookingYamlRepository, SpotYamlRepository

__all__ = [
	"BookingRecord",
	"SpotRecord",
	"ConflictReport",
	"buffered_conflicts",
	"detect_conflicts",
	"enclosure_conflicts",
	"point_conflicts",
	"BookingError",
	"BookingNotFound",
	"BookingStorageError",
	"Forbidden",
	"InProgressImmutable",
	"InvalidDateShape",
	"PastEndImmutable",
	"ScheduleConflict",
	"MINIMUM_DURATION",
	"authorize_cancel",
	"authorize_modify",
	"check_not_in_progress",
	"check_not_past_end",
	"parse_date_fields",
	"validate_date_shape",
	"PROXIMITY_BUFFER",
	"PROXIMITY_BUFFER_MS",
	"Interval",
	"BookingPolicy",
	"BookingService",
	"BookingStore",
	"CancelRequest",
	"SpotStore",
	"UpdateRequest",
	"BookingYamlRepository",
	"SpotYamlRepository",
]
