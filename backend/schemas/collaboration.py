"""
Helios Intel - Collaboration Pydantic Schemas

Users, prospect books, comments, notifications and activity events.
"""

from enum import Enum
from typing import List, Optional

from schemas.base import CamelModel
from schemas.reports import Citation


class User(CamelModel):
    id: str
    name: str
    avatar_url: Optional[str] = None


class SharedUser(CamelModel):
    user: User
    role: str = "viewer"  # "viewer" | "editor"


class Comment(CamelModel):
    id: str
    author: User
    content: str
    created_at: str


class ProspectBook(CamelModel):
    """Per-prospect workspace, keyed by lower-cased prospect_name."""
    prospect_name: str
    notes: str = ""
    executive_summary: Optional[str] = None
    content: str = ""
    title: str = ""
    citations: List[Citation] = []
    comments: List[Comment] = []
    shared_with: List[SharedUser] = []
    created_at: str
    updated_at: str


class NotificationType(str, Enum):
    SHARE = "SHARE"
    MENTION = "MENTION"


class NotificationLink(CamelModel):
    module: str
    prospect_name: Optional[str] = None


class Notification(CamelModel):
    id: str
    type: NotificationType
    actor: User
    message: str
    link_to: NotificationLink
    is_read: bool = False
    created_at: str


class ActivityType(str, Enum):
    GENERATION = "GENERATION"
    OUTREACH = "OUTREACH"


class ActivityDetails(CamelModel):
    primary: str
    secondary: Optional[str] = None


class ActivityEvent(CamelModel):
    id: str
    timestamp: str
    type: ActivityType
    module: str
    details: ActivityDetails
