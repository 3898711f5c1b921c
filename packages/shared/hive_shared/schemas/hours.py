"""Volunteer hours: recorded entries and the payloads that create or edit them."""

from __future__ import annotations

from datetime import date as Date
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_HOURS_PER_ENTRY = 24


class VolunteerHours(BaseModel):
    """One recorded block of volunteer time."""

    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str
    event_id: Optional[str] = None
    organization_id: Optional[str] = None
    date: Date
    hours: float = Field(ge=0)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HoursCreate(BaseModel):
    user_id: str
    date: Date
    hours: float = Field(gt=0, le=MAX_HOURS_PER_ENTRY)
    event_id: Optional[str] = None
    organization_id: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _needs_event_or_org(self) -> "HoursCreate":
        if not self.event_id and not self.organization_id:
            raise ValueError("Hours must belong to an event or an organization")
        return self


class HoursUpdate(BaseModel):
    date: Optional[Date] = None
    hours: Optional[float] = Field(default=None, gt=0, le=MAX_HOURS_PER_ENTRY)
    notes: Optional[str] = Field(default=None, max_length=1000)
