"""Shared pydantic configuration for league documents."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class DocumentModel(BaseModel):
    """Immutable model that reads and writes camelCase document keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _coerce_id(value: Any) -> Any:
    # Stored documents mix numeric and string identifiers.
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return value


Identifier = Annotated[str, BeforeValidator(_coerce_id)]
