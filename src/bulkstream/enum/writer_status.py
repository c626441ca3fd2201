from enum import Enum


class WriterStatus(Enum):
    """
    Represents the lifecycle state of a `BulkIndexWriter`.
    """

    Open = "open"  # Accepting writes.
    Closing = "closing"  # close() was called; draining the queue.
    Finished = "finished"  # Queue drained, no flush outstanding.
    Error = "error"  # A write or flush failed; the writer is terminated.
