"""
Elasticsearch Adapter Module.

Turns slices of [`Record`][bulkstream.models.Record] into the operations body
of the Elasticsearch `_bulk` API and submits them through an
`elasticsearch.Elasticsearch` client.
"""

from typing import Any, Dict, List, Optional, Sequence

from elasticsearch import ApiError, Elasticsearch
from elasticsearch import TransportError as EsTransportError

from ..errors import TransportError
from ..logging_config import get_logger
from ..models import Record

# Set the hierarchical logger
logger = get_logger(__name__)


class ElasticsearchBulkClient:
    """
    Blocking [`BulkClient`][bulkstream.comm.BulkClient] backed by Elasticsearch.

    Each record becomes an `index` action followed by its body. The record
    `doc_type` is only sent as `_type` when `include_type` is set, since
    mapping types were removed in Elasticsearch 8.

    Example:
        ```python
        from elasticsearch import Elasticsearch
        from bulkstream import BulkIndexWriter, ElasticsearchBulkClient

        es = Elasticsearch("http://localhost:9200")
        with BulkIndexWriter(ElasticsearchBulkClient(es), high_water_mark=500) as writer:
            writer.write({"index": "logs", "type": "event", "body": {"msg": "hi"}})
        ```
    """

    def __init__(
        self,
        client: Elasticsearch,
        *,
        include_type: bool = False,
        refresh: Optional[str] = None,
    ):
        """
        Args:
            client: A configured `elasticsearch.Elasticsearch` instance.
            include_type: Send the record `doc_type` as the `_type` action field
                (clusters older than 7.x only).
            refresh: Forwarded to the `_bulk` call (`"true"`, `"false"` or
                `"wait_for"`).
        """
        self._client = client
        self._include_type = include_type
        self._refresh = refresh

    def operations(self, batch: Sequence[Record]) -> List[Dict[str, Any]]:
        """Builds the `_bulk` operations body: one action line then one source line per record."""
        operations: List[Dict[str, Any]] = []
        for record in batch:
            meta: Dict[str, Any] = {"_index": record.index}
            if record.id is not None:
                meta["_id"] = record.id
            if self._include_type:
                meta["_type"] = record.doc_type
            operations.append({"index": meta})
            operations.append(dict(record.body))
        return operations

    def bulk(self, batch: Sequence[Record]) -> Dict[str, Any]:
        """
        Submits the slice and returns the raw response body.

        Raises:
            TransportError: If Elasticsearch rejects the whole request or cannot
                be reached.
        """
        kwargs: Dict[str, Any] = {"operations": self.operations(batch)}
        if self._refresh is not None:
            kwargs["refresh"] = self._refresh

        logger.debug(f"Sending {len(batch)} records to Elasticsearch")
        try:
            response = self._client.bulk(**kwargs)
        except (ApiError, EsTransportError) as e:
            raise TransportError(
                f"Bulk request failed: {type(e).__name__}: {getattr(e, 'message', e)}"
            ) from e

        return getattr(response, "body", response)
