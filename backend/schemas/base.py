"""
Helios Intel - Schema Base Model

Python attributes are snake_case; persisted JSON uses camelCase field names.
"""

from typing import Any, Dict

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every persisted entity."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_store(self) -> Dict[str, Any]:
        """Serialize for storage: camelCase keys, None fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
