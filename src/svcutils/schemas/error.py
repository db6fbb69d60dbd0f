"""Error message schema.

Error responses carry a list of these under the ``"errors"`` key:
{"errors": [{"message": "...", "code": 404, "itemId": "...", "fieldName": "..."}]}.
Every field is optional on the wire so that bodies produced by other services
can still be read.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorMessage(BaseModel):
    """One discrete error: a human-readable message and an optional code."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    message: str | None = None
    code: int | str | None = None
    item_id: str | None = Field(default=None, alias="itemId")
    field_name: str | None = Field(default=None, alias="fieldName")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ErrorMessage":
        """Build an error message from a generic mapping, e.g. a decoded JSON object.

        Missing keys default to ``None`` and unknown keys are ignored. Both the
        camelCase wire names and the snake_case attribute names are accepted,
        as is ``msg`` in place of ``message``.

        Raises:
            pydantic.ValidationError: a known key holds a value of the wrong type.
        """
        return cls.model_validate(
            {
                "message": _first_present(data, "message", "msg"),
                "code": data.get("code"),
                "itemId": _first_present(data, "itemId", "item_id"),
                "fieldName": _first_present(data, "fieldName", "field_name"),
            }
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict using wire names, without unset (``None``) fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None
