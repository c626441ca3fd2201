from dataclasses import dataclass


@dataclass(frozen=True)
class FlushEvent:
    """
    Payload of the `flush` notification.

    Attributes:
        records: Number of records included in the flushed slice.
        written_records: Cumulative number of records confirmed by the backend,
            this slice included.
    """

    records: int
    written_records: int
