from __future__ import annotations

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


# Optional free text where an empty form field means "no value".
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def reject_explicit_null(value: Any) -> Any:
    """Field validator for partial updates: a non-nullable column cannot be cleared."""
    if value is None:
        raise ValueError("This field cannot be null.")
    return value


class APIMessage(CamelModel):
    message: str = Field(..., description="Human-readable message.")


class DeletedOut(CamelModel):
    message: str = Field(..., description="Human-readable message.")
    id: UUID = Field(..., description="Identifier of the removed record.")
