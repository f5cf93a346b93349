"""
Helios Intel - Prospect Book Store

Unlike the other stores, books are persisted as a JSON object keyed by the
lower-cased prospect name, and the name is the identity. created_at is
fixed at first creation; updated_at is refreshed on every mutation.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from constants import PROSPECT_BOOK_STORE_KEY, PROSPECT_BOOKS_UPDATED_EVENT
from schemas.collaboration import ProspectBook
from stores.base import CollectionStore, utc_now_iso

logger = logging.getLogger(__name__)


def book_key(prospect_name: str) -> str:
    return prospect_name.strip().lower()


class ProspectBookStore(CollectionStore[ProspectBook]):
    storage_key = PROSPECT_BOOK_STORE_KEY
    event_name = PROSPECT_BOOKS_UPDATED_EVENT
    model = ProspectBook
    id_field = "prospect_name"
    timestamp_field = "created_at"

    def _decode(self, data: Any) -> List[ProspectBook]:
        if not isinstance(data, dict):
            raise ValueError(f"expected JSON object, got {type(data).__name__}")
        return [self.model.model_validate(book) for book in data.values()]

    def _encode(self, items: List[ProspectBook]) -> Any:
        return {book_key(book.prospect_name): self._serialize(book) for book in items}

    def _id_of(self, entity: ProspectBook) -> str:
        return book_key(entity.prospect_name)

    def _sort(self, items: List[ProspectBook]) -> List[ProspectBook]:
        return sorted(items, key=lambda b: b.updated_at, reverse=True)

    def get(self, prospect_name: str) -> Optional[ProspectBook]:
        return super().get(book_key(prospect_name))

    def get_by_name(self, prospect_name: str) -> Optional[ProspectBook]:
        return self.get(prospect_name)

    def create_or_update(self, prospect_name: str,
                         book_data: Union[BaseModel, Dict[str, Any]] = None) -> ProspectBook:
        """
        Create the book for prospect_name, or refresh an existing one.

        An existing book keeps its created_at, notes, comments and sharing
        unless book_data supplies new values for them.
        """
        data = self._to_stored_keys(book_data or {})
        key = book_key(prospect_name)
        now = utc_now_iso()

        books = self._load()
        existing = next((b for b in books if self._id_of(b) == key), None)

        if existing is not None:
            merged = {**self._serialize(existing), **data}
            merged["createdAt"] = existing.created_at
        else:
            merged = dict(data)
            merged["createdAt"] = now
            merged.setdefault("notes", "")
        merged["prospectName"] = prospect_name
        merged["updatedAt"] = now
        book = self.model.model_validate(merged)

        others = [b for b in books if self._id_of(b) != key]
        self._persist([book] + others)
        logger.info(f"Prospect book {'refreshed' if existing else 'created'}: {prospect_name}")
        return book

    def add(self, partial: Union[BaseModel, Dict[str, Any]]) -> ProspectBook:
        data = self._to_stored_keys(partial)
        return self.create_or_update(data["prospectName"], data)

    def update(self, prospect_name: str,
               partial: Union[BaseModel, Dict[str, Any]]) -> Optional[List[ProspectBook]]:
        changes = self._to_stored_keys(partial)
        changes["updatedAt"] = utc_now_iso()
        return super().update(book_key(prospect_name), changes)

    def remove(self, prospect_name: str) -> Optional[List[ProspectBook]]:
        return super().remove(book_key(prospect_name))

    def delete(self, prospect_name: str) -> Optional[List[ProspectBook]]:
        return self.remove(prospect_name)
