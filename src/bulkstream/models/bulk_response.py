"""
Bulk Response Module.

Typed, read-only view of the payload returned by a bulk backend. Only the parts
needed to decide the outcome of a flush are modeled: the per-item status and
error descriptor. Any other field sent by the backend is ignored.
"""

from typing import Any, Dict, Iterator, List, Optional, Union

import pydantic
from pydantic import ConfigDict, Field


class BulkItemResult(pydantic.BaseModel):
    """
    Outcome of a single action inside a bulk request.

    Attributes:
        index: The index the item was routed to.
        id: The document identifier assigned or confirmed by the backend.
        status: The HTTP-like status code of the item.
        error: `None` on success; otherwise either a plain error label
            (e.g. `"Forbidden"`) or a structured descriptor with `type`
            and `reason` keys.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    index: Optional[str] = Field(default=None, alias="_index")
    id: Optional[Union[str, int]] = Field(default=None, alias="_id")
    status: Optional[int] = None
    error: Optional[Union[str, Dict[str, Any]]] = None

    def failed(self) -> bool:
        """Returns `True` if the backend rejected this item."""
        return self.error is not None

    def error_identifier(self) -> Optional[str]:
        """
        Returns a short label identifying the item error, or `None` on success.

        A plain string error is returned as is. For a structured error the
        `type` is preferred, then the `reason`, then the item status.
        """
        if self.error is None:
            return None
        if isinstance(self.error, str):
            return self.error
        for key in ("type", "reason"):
            value = self.error.get(key)
            if value:
                return str(value)
        if self.status is not None:
            return str(self.status)
        return str(self.error)


class BulkResponse(pydantic.BaseModel):
    """
    The structured outcome of one bulk call.

    Attributes:
        took: Server-side processing time, when reported.
        errors: The backend's own summary flag. Informational only: the outcome
            of a flush is decided by scanning the items.
        items: One entry per submitted record, in submission order. Each entry
            maps the action name (`index`, `create`, ...) to its result.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    took: Optional[int] = None
    errors: bool = False
    items: List[Dict[str, BulkItemResult]] = Field(default_factory=list)

    def results(self) -> Iterator[BulkItemResult]:
        """Iterates over the item results, whatever their action name."""
        for item in self.items:
            yield from item.values()

    def failed_items(self) -> List[BulkItemResult]:
        """Returns the items rejected by the backend, in response order."""
        return [result for result in self.results() if result.failed()]
