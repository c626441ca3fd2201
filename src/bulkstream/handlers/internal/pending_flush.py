from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import List, Tuple

from ...models import Record


@dataclass
class _PendingFlush:
    """
    One in-flight submission: the slice handed to the backend and the
    acknowledgments that complete when the backend answers.

    The slice is a tuple so the backend client cannot alter the queued records.
    """

    records: Tuple[Record, ...]
    waiters: List[Future] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def resolve(self) -> None:
        for waiter in self.waiters:
            if not waiter.done():
                waiter.set_result(None)

    def reject(self, error: BaseException) -> None:
        for waiter in self.waiters:
            if not waiter.done():
                waiter.set_exception(error)
