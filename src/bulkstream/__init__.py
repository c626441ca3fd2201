"""
bulkstream - Batching write sink for bulk indexing backends.

This module provides the main entry points:

- **BulkIndexWriter**: Queues index records and submits them in bulk slices.
- **Comm**: The `BulkClient` protocol and its Elasticsearch and thread-pool adapters.
- **Models**: `Record`, `BulkResponse` and the `FlushEvent` notification payload.

Example:
    >>> from bulkstream import BulkIndexWriter, ElasticsearchBulkClient
    >>> with BulkIndexWriter(ElasticsearchBulkClient(es), high_water_mark=500) as writer:
    ...     writer.write({"index": "logs", "type": "event", "body": {"msg": "hi"}})
"""

# --- Writer ---
from .handlers import (
    BulkIndexWriter as BulkIndexWriter,
    WriterConfig as WriterConfig,
    DEFAULT_HIGH_WATER_MARK as DEFAULT_HIGH_WATER_MARK,
)

# --- Backend clients ---
from .comm import (
    BulkClient as BulkClient,
    ElasticsearchBulkClient as ElasticsearchBulkClient,
    ExecutorBulkClient as ExecutorBulkClient,
)

# --- Models ---
from .models import (
    Record as Record,
    BulkItemResult as BulkItemResult,
    BulkResponse as BulkResponse,
    FlushEvent as FlushEvent,
    validate_record as validate_record,
)

# --- Enums ---
from .enum import StreamEvent as StreamEvent, WriterStatus as WriterStatus

# --- Errors ---
from .errors import (
    BulkStreamError as BulkStreamError,
    ConfigurationError as ConfigurationError,
    ValidationError as ValidationError,
    TransportError as TransportError,
    AggregateItemError as AggregateItemError,
    WriterClosedError as WriterClosedError,
)

from .logging_config import (
    get_logger as get_logger,
    setup_sdk_logging as setup_sdk_logging,
)

__version__ = "0.1.0"

__all__ = [
    # Writer
    "BulkIndexWriter",
    "WriterConfig",
    "DEFAULT_HIGH_WATER_MARK",
    # Backend clients
    "BulkClient",
    "ElasticsearchBulkClient",
    "ExecutorBulkClient",
    # Models
    "Record",
    "BulkItemResult",
    "BulkResponse",
    "FlushEvent",
    "validate_record",
    # Enums
    "StreamEvent",
    "WriterStatus",
    # Errors
    "BulkStreamError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "AggregateItemError",
    "WriterClosedError",
    # Logging
    "get_logger",
    "setup_sdk_logging",
]


# --- Set up the top-level logger for the package ---

from logging import NullHandler

get_logger().addHandler(NullHandler())
