"""
Helios Intel - Collaboration Service

Comments, sharing and notes on prospect books, with the notification side
effects they trigger.

- A comment that @mentions teammates notifies each of them (never the author)
- Sharing a book notifies each newly added teammate (never the actor)

Every operation re-reads the book from the store before writing, so a
comment always lands on the latest persisted copy.

Usage:
    from services.collaboration import CollaborationService
    service = CollaborationService(workspace.prospect_books, workspace.notifications)
    service.add_comment("Acme Health", current_user, "Looping in @Alicia Chen", DEFAULT_TEAM)
"""
import logging
from typing import Any, Dict, List, Optional

from errors import StorageError
from mentions import resolve_mentions
from schemas.collaboration import (
    Comment,
    NotificationType,
    ProspectBook,
    SharedUser,
    User,
)
from schemas.reports import ModuleType
from stores.base import generate_id, utc_now_iso

logger = logging.getLogger(__name__)

# Built-in team roster used when no directory is wired in
DEFAULT_TEAM: List[User] = [
    User(id="user-1", name="Alex Miller"),
    User(id="user-2", name="David Evans"),
    User(id="user-3", name="Alicia Chen"),
]

# Long-form book fields editable through update_notes()
EDITABLE_FIELDS = {"notes", "executive_summary", "content", "title"}


class CollaborationService:
    """Collaboration side effects on prospect books."""

    def __init__(self, prospect_books, notifications):
        self.prospect_books = prospect_books
        self.notifications = notifications

    def _require_book(self, book_name: str) -> Optional[ProspectBook]:
        book = self.prospect_books.get_by_name(book_name)
        if book is None:
            logger.warning(f"Prospect book not found: {book_name}")
        return book

    def _notify(self, notification_type: NotificationType, actor: User,
                message: str, prospect_name: str):
        try:
            return self.notifications.add({
                "type": notification_type,
                "actor": actor,
                "message": message,
                "link_to": {
                    "module": ModuleType.PROSPECT_BOOK.value,
                    "prospectName": prospect_name,
                },
            })
        except StorageError as e:
            logger.error(f"Could not save {notification_type.value} notification for {prospect_name}: {e}")
            return None

    def _save(self, book: ProspectBook, changes: Dict[str, Any]) -> bool:
        try:
            self.prospect_books.update(book.prospect_name, changes)
        except StorageError as e:
            logger.error(f"Could not save prospect book {book.prospect_name}: {e}")
            return False
        return True

    def add_comment(self, book_name: str, author: User, text: str,
                    roster: Optional[List[User]] = None) -> Optional[Comment]:
        """
        Append a comment and notify mentioned teammates.

        Returns the new Comment, or None when the text is blank, the book
        does not exist or the comment could not be saved.
        """
        if not text or not text.strip():
            return None
        book = self._require_book(book_name)
        if book is None:
            return None

        comment = Comment(id=generate_id(), author=author, content=text.strip(), created_at=utc_now_iso())
        if not self._save(book, {"comments": book.comments + [comment]}):
            return None

        mentioned = resolve_mentions(text, roster if roster is not None else DEFAULT_TEAM)
        for user in mentioned:
            if user.id == author.id:
                continue
            self._notify(
                NotificationType.MENTION,
                author,
                f'mentioned you in "{book.prospect_name}".',
                book.prospect_name,
            )
            logger.info(f"{author.name} mentioned {user.name} on {book.prospect_name}")

        return comment

    def update_sharing(self, book_name: str, shared_with: List[SharedUser],
                       actor: User) -> Optional[ProspectBook]:
        """
        Replace the book's sharing list.

        Users who were not on the previous list (other than the actor) get a
        SHARE notification. Role changes and removals notify nobody.
        """
        book = self._require_book(book_name)
        if book is None:
            return None

        previous_ids = {shared.user.id for shared in book.shared_with}
        if not self._save(book, {"shared_with": shared_with}):
            return None

        for shared in shared_with:
            if shared.user.id in previous_ids or shared.user.id == actor.id:
                continue
            self._notify(
                NotificationType.SHARE,
                actor,
                f'shared "{book.prospect_name}" with you as {shared.role}.',
                book.prospect_name,
            )

        return self.prospect_books.get_by_name(book.prospect_name)

    def update_notes(self, book_name: str, **fields: Any) -> Optional[ProspectBook]:
        """Edit long-form fields (notes, executive_summary, content, title)."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(sorted(unknown))}")

        book = self._require_book(book_name)
        if book is None:
            return None

        changes: Dict[str, Any] = {k: v for k, v in fields.items()}
        if not self._save(book, changes):
            return None
        return self.prospect_books.get_by_name(book.prospect_name)
