from enum import StrEnum


class StreamEvent(StrEnum):
    """
    Names of the notifications emitted by a
    [`BulkIndexWriter`][bulkstream.handlers.BulkIndexWriter].

    Handlers can be registered with either the enum member or its string value,
    e.g. `writer.on(StreamEvent.FLUSH, handler)` or `writer.on("flush", handler)`.
    """

    FLUSH = "flush"
    """A slice was accepted by the backend. Payload: a `FlushEvent`."""

    ERROR = "error"
    """A write or flush failed. Payload: the exception."""

    FINISH = "finish"
    """The writer was closed and fully drained. No payload."""

    CLOSE = "close"
    """Emitted right after `finish`, once all resources are released. No payload."""
