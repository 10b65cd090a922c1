"""
Shared I/O building blocks.

Every HTTP response uses the ``ApiResponse`` envelope. Profile payloads travel
in camelCase (``CamelModel``); input models turn blank strings into ``None``
so an emptied form field clears the stored value.
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Standard ``{success, message, data}`` envelope."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class CamelModel(BaseModel):
    """Model serialized with camelCase keys, accepting either casing on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def blank_strings_to_none(data: Any) -> Any:
    if isinstance(data, dict):
        return {key: (None if isinstance(value, str) and not value.strip() else value) for key, value in data.items()}
    return data


class CamelInput(CamelModel):
    """camelCase request body where ``""`` means "no value"."""

    @model_validator(mode="before")
    @classmethod
    def _blank_to_none(cls, data: Any) -> Any:
        return blank_strings_to_none(data)


def split_csv(value: Any) -> Optional[list[str]]:
    """Turn ``"Soccer, Track ,"`` or a list into a clean list; empty becomes None."""
    if value is None:
        return None
    items = value.split(",") if isinstance(value, str) else value
    cleaned = [str(item).strip() for item in items if str(item).strip()]
    return cleaned or None
