from .record import Record as Record, validate_record as validate_record
from .bulk_response import (
    BulkItemResult as BulkItemResult,
    BulkResponse as BulkResponse,
)
from .flush import FlushEvent as FlushEvent
