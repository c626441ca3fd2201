"""
Error Taxonomy.

Every error raised or emitted by the package derives from `BulkStreamError`.
Only `ConfigurationError` is raised synchronously (at construction); the others
reach the producer through the writer's `error` notification and through the
acknowledgment futures returned by `write()` and `close()`.
"""

from typing import List, Optional, Sequence


class BulkStreamError(Exception):
    """Base class for all the package errors."""


class ConfigurationError(BulkStreamError):
    """A required dependency is missing or an option has an invalid value."""


class ValidationError(BulkStreamError):
    """A record is structurally malformed (a required field is missing or invalid)."""

    def __init__(self, field_name: str, message: Optional[str] = None):
        super().__init__(message or f"{field_name} is required")
        self.field_name = field_name


class TransportError(BulkStreamError):
    """The bulk call itself failed, or returned a payload that cannot be read."""


class AggregateItemError(BulkStreamError):
    """
    The bulk call succeeded but one or more items were rejected.

    The message is the comma-joined list of distinct item error identifiers,
    in the order they were first seen in the response.
    """

    def __init__(self, identifiers: Sequence[str]):
        self.identifiers: List[str] = list(identifiers)
        super().__init__(",".join(self.identifiers))


class WriterClosedError(BulkStreamError):
    """A record was written after the writer was closed or terminated."""
