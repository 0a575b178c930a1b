"""Shared schema building blocks."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class PatchModel(BaseModel):
    """
    Base for partial-update payloads.

    A field absent from the payload is left out of ``model_fields_set``;
    a field sent as ``""`` or ``null`` is present and means "clear it".
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def blank_strings_to_none(cls, data: Any) -> Any:
        """Normalize empty strings to explicit nulls."""
        if isinstance(data, dict):
            return {key: (None if value == "" else value) for key, value in data.items()}
        return data

    def provided(self) -> dict[str, Any]:
        """Fields explicitly present in the payload, including cleared ones."""
        return self.model_dump(exclude_unset=True)

    def has(self, field: str) -> bool:
        """Whether ``field`` was present in the payload."""
        return field in self.model_fields_set


def decimal_to_float(value: Decimal | None) -> float | None:
    """Serialize Decimal to float for JSON."""
    return float(value) if value is not None else None
