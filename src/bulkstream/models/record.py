"""
Index Record Module.

This module defines the `Record` class, the unit of work accepted by the
[`BulkIndexWriter`][bulkstream.handlers.BulkIndexWriter], and the structural
validator applied to every candidate record before it is queued.
"""

from typing import Any, Dict, Mapping, Optional, Union

import pydantic
from pydantic import ConfigDict, Field

from ..errors import ValidationError

# Required fields, checked in this order. The first missing one is reported.
_REQUIRED_FIELDS = ("index", "type", "body")


class Record(pydantic.BaseModel):
    """
    A single document to be indexed.

    Records are immutable: once queued by a writer, neither the writer nor the
    backend client may alter them.

    Attributes:
        index: The destination index name.
        doc_type: The document category (`type` when building from a mapping).
        body: The document payload.
        id: Optional document identifier. When omitted the backend assigns one.

    Example:
        ```python
        record = Record.model_validate(
            {"index": "logs", "type": "event", "id": "1", "body": {"msg": "hi"}}
        )
        ```
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    index: str = Field(min_length=1)
    """The destination index name."""

    doc_type: str = Field(alias="type", min_length=1)
    """The document category."""

    body: Dict[str, Any] = Field(min_length=1)
    """The document payload."""

    id: Optional[Union[str, int]] = None
    """Optional document identifier."""


def validate_record(candidate: Union[Record, Mapping[str, Any]]) -> Record:
    """
    Checks that a candidate record carries every required field.

    The fields `index`, `type` and `body` are checked in this order; a field is
    missing when it is absent, `None` or empty.

    Args:
        candidate: A `Record` or a mapping with the `index`, `type`, `body`
            and (optionally) `id` keys.

    Returns:
        Record: The validated, immutable record.

    Raises:
        ValidationError: On the first missing field, with the message
            `"<field> is required"`, when a present field has an invalid value,
            or when the candidate is neither a `Record` nor a mapping.
    """
    if isinstance(candidate, Record):
        return candidate
    if not isinstance(candidate, Mapping):
        raise ValidationError(
            "record",
            f"record must be a 'Record' or a mapping, got '{type(candidate).__name__}'"
        )

    for name in _REQUIRED_FIELDS:
        if not candidate.get(name):
            raise ValidationError(name)

    try:
        return Record.model_validate(candidate)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field_name = str(first["loc"][0]) if first["loc"] else "record"
        raise ValidationError(
            field_name, f"{field_name} is invalid: {first['msg']}"
        ) from e
