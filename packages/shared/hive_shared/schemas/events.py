"""Event schemas: full event records and the lighter list rows."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .common import EventStatus


class Event(BaseModel):
    """A single event, as returned by ``/events/detail``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    organization_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("organization_id", "org")
    )
    title: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("title", "name")
    )
    description: Optional[str] = None

    # Schedule
    date: Optional[str] = None
    time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None

    capacity: int = Field(default=0, ge=0)
    signup_count: int = Field(default=0, ge=0)
    # Unknown statuses from newer backends are kept as plain strings
    status: Union[EventStatus, str] = Field(
        default=EventStatus.UPCOMING, union_mode="left_to_right"
    )
    created_at: Optional[datetime] = None

    @property
    def spots_left(self) -> int:
        return max(self.capacity - self.signup_count, 0)

    @property
    def is_full(self) -> bool:
        return self.capacity > 0 and self.signup_count >= self.capacity


class EventItem(BaseModel):
    """Row of the ``/events`` list. Only ``id`` is guaranteed."""

    model_config = ConfigDict(extra="allow")

    id: str
    ts: Optional[str] = None
    org: Optional[str] = None
    name: Optional[str] = None
    actor: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class CheckIn(BaseModel):
    """Self check-in at an event, with the volunteer's position."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
