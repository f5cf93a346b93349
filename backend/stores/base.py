"""
Helios Intel - Local Object Store

Generic persisted collection. Each store owns exactly one storage key
holding a JSON array of entities, newest first.

Every read re-deserializes from storage; every mutation writes the entire
collection back and then emits the store's broadcast event. There is no
in-memory cache and no delta write.

Failure handling:
- Corrupt blob (bad JSON or failed validation): logged, evicted, empty list
- Unknown id on update/remove: logged, returns None
- Storage write rejected (quota): logged, raised as StorageError
"""

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from errors import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def generate_id() -> str:
    """Opaque id: epoch milliseconds plus 9 random hex chars."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class CollectionStore(Generic[T]):
    """
    Base class for the Local Object Stores.

    Subclasses set storage_key, event_name and model, and may override
    id_field / timestamp_field (snake_case attribute names) and _sort().
    """

    storage_key: str = ""
    event_name: str = ""
    model: Type[T] = None
    id_field: str = "id"
    timestamp_field: str = "created_at"

    def __init__(self, storage, bus):
        self.storage = storage
        self.bus = bus

    # =========================================================================
    # Key handling
    # =========================================================================

    def _alias(self, field_name: str) -> str:
        field = self.model.model_fields[field_name]
        return field.alias or field_name

    def _to_stored_keys(self, partial: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
        """Accept a model or a dict with snake_case or camelCase keys."""
        if isinstance(partial, BaseModel):
            return partial.model_dump(by_alias=True, exclude_none=True, mode="json")

        fields = self.model.model_fields
        converted = {}
        for key, value in (partial or {}).items():
            if key in fields:
                key = fields[key].alias or key
            if isinstance(value, BaseModel):
                value = value.model_dump(by_alias=True, exclude_none=True, mode="json")
            elif isinstance(value, list):
                value = [
                    v.model_dump(by_alias=True, exclude_none=True, mode="json")
                    if isinstance(v, BaseModel) else v
                    for v in value
                ]
            converted[key] = value
        return converted

    def _serialize(self, entity: T) -> Dict[str, Any]:
        return entity.model_dump(by_alias=True, exclude_none=True, mode="json")

    # =========================================================================
    # Storage round-trip
    # =========================================================================

    def _evict(self, reason: Exception):
        logger.error(f"Corrupt data in {self.storage_key}, discarding: {reason}")
        self.storage.delete(self.storage_key)

    def _decode(self, data: Any) -> List[T]:
        if not isinstance(data, list):
            raise ValueError(f"expected JSON array, got {type(data).__name__}")
        return [self.model.model_validate(item) for item in data]

    def _encode(self, items: List[T]) -> Any:
        return [self._serialize(item) for item in items]

    def _load(self) -> List[T]:
        raw = self.storage.get(self.storage_key)
        if raw is None:
            return []
        try:
            return self._decode(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, ValueError, TypeError) as e:
            self._evict(e)
            return []

    def _persist(self, items: List[T]):
        """Write the whole collection, then broadcast."""
        payload = json.dumps(self._encode(items))
        try:
            self.storage.set(self.storage_key, payload)
        except StorageError as e:
            logger.error(f"Failed to save {self.storage_key}: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to save {self.storage_key}: {e}")
            raise StorageError(f"Failed to save {self.storage_key}: {e}") from e
        self.bus.emit(self.event_name)

    def _sort(self, items: List[T]) -> List[T]:
        return items

    def _id_of(self, entity: T) -> str:
        return getattr(entity, self.id_field)

    # =========================================================================
    # Public API
    # =========================================================================

    def list(self) -> List[T]:
        """All entities, re-read from storage."""
        return self._sort(self._load())

    def get(self, entity_id: str) -> Optional[T]:
        for item in self._load():
            if self._id_of(item) == entity_id:
                return item
        return None

    def add(self, partial: Union[BaseModel, Dict[str, Any]]) -> T:
        """Assign id and creation timestamp, prepend, persist and emit."""
        data = self._to_stored_keys(partial)
        data[self._alias(self.id_field)] = generate_id()
        data[self._alias(self.timestamp_field)] = utc_now_iso()
        entity = self.model.model_validate(data)

        items = self._load()
        self._persist([entity] + items)
        logger.debug(f"Added {self.model.__name__} {self._id_of(entity)} to {self.storage_key}")
        return entity

    def update(self, entity_id: str, partial: Union[BaseModel, Dict[str, Any]]) -> Optional[List[T]]:
        """
        Merge partial into the entity with entity_id.

        id and creation timestamp never change. Returns the new list, or
        None when no entity has that id.
        """
        items = self._load()
        changes = self._to_stored_keys(partial)
        changes.pop(self._alias(self.id_field), None)
        changes.pop(self._alias(self.timestamp_field), None)

        for index, item in enumerate(items):
            if self._id_of(item) == entity_id:
                merged = {**self._serialize(item), **changes}
                items[index] = self.model.model_validate(merged)
                self._persist(items)
                return self._sort(items)

        logger.warning(f"Update skipped: {entity_id} not found in {self.storage_key}")
        return None

    def remove(self, entity_id: str) -> Optional[List[T]]:
        """Delete by id. Returns the new list, or None when not found."""
        items = self._load()
        remaining = [item for item in items if self._id_of(item) != entity_id]
        if len(remaining) == len(items):
            logger.warning(f"Remove skipped: {entity_id} not found in {self.storage_key}")
            return None
        self._persist(remaining)
        return self._sort(remaining)

    def count(self) -> int:
        return len(self._load())
