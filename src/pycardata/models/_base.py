"""Base model for persisted pycardata entities.

Every entity inherits from :class:`CarDataBaseModel` which provides:

* ``alias_generator=to_camel`` so the persisted JSON keeps the
  camelCase keys (``fuelLevel``, ``sharingActive``) while Python code
  uses snake_case fields.
* Frozen instances; updates go through ``model_copy(update=...)``.
* :meth:`CarDataBaseModel.to_json_dict` producing the wire shape with
  absent optionals omitted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CarDataBaseModel(BaseModel):
    """Base for values copied in and out of the persistent store."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Return the camelCase JSON-compatible dict, dropping ``None`` fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
