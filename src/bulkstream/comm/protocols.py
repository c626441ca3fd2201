from concurrent.futures import Future
from typing import Any, Mapping, Protocol, Sequence, Union

from ..models import BulkResponse, Record

BulkResult = Union[BulkResponse, Mapping[str, Any]]


class BulkClient(Protocol):
    """
    Structural protocol for the backend used by a
    [`BulkIndexWriter`][bulkstream.handlers.BulkIndexWriter].

    A class implicitly satisfies this protocol if it provides a `bulk()` method
    accepting a slice of records. The writer only inspects the result to decide
    whether the whole call failed and which items were rejected.

    ### Reference Implementations
    * [`ElasticsearchBulkClient`][bulkstream.comm.ElasticsearchBulkClient]: Blocking
        call to an Elasticsearch cluster.
    * [`ExecutorBulkClient`][bulkstream.comm.ExecutorBulkClient]: Runs another
        client on a thread pool and answers with futures.
    """

    def bulk(self, batch: Sequence[Record]) -> Union[BulkResult, "Future[BulkResult]"]:
        """
        Submits a slice of records in a single call.

        The slice must not be mutated. Return the structured outcome directly,
        or a `Future` completing with it. Raising (or completing the future
        with an exception) signals a transport-level failure.

        Args:
            batch: The records to submit, in queue order.
        """
        ...
