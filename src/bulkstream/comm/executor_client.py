from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Sequence

from ..models import Record
from .protocols import BulkClient, BulkResult


class ExecutorBulkClient:
    """
    [`BulkClient`][bulkstream.comm.BulkClient] running another client on a thread pool.

    `bulk()` returns immediately with a `Future`, so the writer's producer is
    not blocked by network I/O. The writer never has more than one call in
    flight, so a single worker is enough.
    """

    def __init__(
        self,
        client: BulkClient,
        executor: Optional[ThreadPoolExecutor] = None,
        max_workers: int = 1,
    ):
        """
        Args:
            client: The blocking client that performs the actual call.
            executor: A shared executor. When omitted, a private one is created
                and released by `shutdown()`.
            max_workers: Size of the private executor.
        """
        self._client = client
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="bulkstream"
        )

    def bulk(self, batch: Sequence[Record]) -> "Future[BulkResult]":
        return self._executor.submit(self._client.bulk, batch)

    def shutdown(self, wait: bool = True) -> None:
        """Releases the private executor. A shared executor is left untouched."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
