"""
Helper Utilities.

Provides the response/error aggregator applied to every bulk result, and
exception chaining helpers.
"""

from typing import Any, Optional

import pydantic

from ..errors import AggregateItemError, TransportError
from ..models import BulkResponse


def _make_exception(msg: str, exc_msg: Optional[BaseException] = None) -> TransportError:
    """
    Creates a `TransportError` that chains an inner exception's message.

    Args:
        msg (str): The high-level error message.
        exc_msg (Optional[Exception]): The original exception.

    Returns:
        TransportError: A new exception combining both messages.
    """
    if exc_msg is None:
        return TransportError(msg)
    return TransportError(f"{msg}\nInner err: {exc_msg}")


def _parse_bulk_response(response: Any) -> BulkResponse:
    """
    Converts a raw backend payload into a `BulkResponse`.

    Raises:
        TransportError: If the payload does not look like a bulk response.
    """
    if isinstance(response, BulkResponse):
        return response
    # elasticsearch-py wraps the payload in an ObjectApiResponse
    body = getattr(response, "body", response)
    try:
        return BulkResponse.model_validate(body)
    except pydantic.ValidationError as e:
        raise _make_exception("Malformed bulk response", e) from e


def _aggregate_item_errors(response: BulkResponse) -> Optional[AggregateItemError]:
    """
    Builds the composite error of a bulk response.

    Collects the error identifier of every rejected item, drops duplicates while
    keeping the first-seen order, and wraps them into one `AggregateItemError`.

    Returns:
        The aggregate error, or `None` if every item succeeded.
    """
    identifiers = []
    for item in response.failed_items():
        identifier = item.error_identifier()
        if identifier not in identifiers:
            identifiers.append(identifier)

    if not identifiers:
        return None
    return AggregateItemError(identifiers)
