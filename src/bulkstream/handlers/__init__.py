from .bulk_index_writer import BulkIndexWriter as BulkIndexWriter
from .config import (
    WriterConfig as WriterConfig,
    DEFAULT_HIGH_WATER_MARK as DEFAULT_HIGH_WATER_MARK,
    DEFAULT_TIMEOUT as DEFAULT_TIMEOUT,
)
