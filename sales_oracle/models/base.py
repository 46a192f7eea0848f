"""
Shared model configuration for every Sales Oracle data structure.

Host applications exchange JSON with camelCase keys (``healthIndex``,
``businessDaysTotal``, ``mvpJustification``); Python code uses snake_case
attribute names. ``OracleModel`` accepts both and serialises back to the
camelCase form with ``model_dump(by_alias=True)``.

Numeric fields use the ``Number`` annotated type: absent values default to 0
and an explicit ``null`` is coerced to 0, so half-filled forms saved by older
host versions never break arithmetic downstream.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def _none_to_zero(value: Any) -> Any:
    if value is None or value == "":
        return 0.0
    return value


Number = Annotated[float, BeforeValidator(_none_to_zero)]


class OracleModel(BaseModel):
    """Frozen, camelCase-aliased base for all engine models."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_null_members(cls, data: Any) -> Any:
        """Treat explicit ``null`` members as absent so field defaults apply."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def to_json_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict using the host's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
