from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GlobalRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    VOLUNTEER = "volunteer"
    USER = "user"


class MembershipRole(str, Enum):
    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"


class Permission(str, Enum):
    CREATE_EVENTS = "create_events"
    EDIT_EVENTS = "edit_events"
    DELETE_EVENTS = "delete_events"
    MANAGE_MEMBERS = "manage_members"
    VIEW_ANALYTICS = "view_analytics"
    MANAGE_SETTINGS = "manage_settings"
    CREATE_ANNOUNCEMENTS = "create_announcements"
    MANAGE_ROLES = "manage_roles"
    VIEW_FINANCIALS = "view_financials"
    EXPORT_DATA = "export_data"
    MANAGE_RESOURCES = "manage_resources"
    VIEW_VOLUNTEER_HOURS = "view_volunteer_hours"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"


class Page(BaseModel):
    """One page of a cursor-paginated list endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[dict] = Field(default_factory=list)
    next_cursor: Optional[str] = Field(default=None, alias="nextCursor")
