"""
Configuration Module.

This module defines the configuration structure controlling when a
[`BulkIndexWriter`][bulkstream.handlers.BulkIndexWriter] flushes its queue.
"""

from dataclasses import dataclass
from typing import Optional

from ..errors import ConfigurationError

DEFAULT_HIGH_WATER_MARK = 16
"""Default capacity threshold, in records."""

DEFAULT_TIMEOUT: Optional[float] = None
"""Idle flushing is disabled by default."""


@dataclass(frozen=True)
class WriterConfig:
    """
    Configuration settings for a `BulkIndexWriter`.

    The two fields define the dual flush trigger: a flush starts as soon as the
    queue holds `high_water_mark` records, and, when `timeout` is set, a
    recurring idle timer flushes whatever is queued every `timeout` seconds.
    """

    high_water_mark: int = DEFAULT_HIGH_WATER_MARK
    """
    The capacity threshold (in records) that triggers an automatic flush.

    A flush never submits more than this number of records. Larger values
    reduce the number of backend calls but delay the acknowledgment of the
    record that crosses the threshold for longer.
    """

    timeout: Optional[float] = DEFAULT_TIMEOUT
    """
    The idle flush interval in seconds.

    When set, records that never reach the threshold are still submitted
    within one interval of their arrival (plus any in-flight flush).
    `None` disables idle flushing.
    """

    def __post_init__(self):
        if (
            isinstance(self.high_water_mark, bool)
            or not isinstance(self.high_water_mark, int)
            or self.high_water_mark <= 0
        ):
            raise ConfigurationError(
                f"high_water_mark must be a positive integer, got '{self.high_water_mark}'"
            )
        if self.timeout is not None and (
            isinstance(self.timeout, bool)
            or not isinstance(self.timeout, (int, float))
            or self.timeout <= 0
        ):
            raise ConfigurationError(
                f"timeout must be a positive number of seconds, got '{self.timeout}'"
            )
