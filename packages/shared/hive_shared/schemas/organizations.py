"""
Organization-related Pydantic schemas.

Covers: organization records and their stats, per-organization memberships,
and organization-scoped role definitions (named tags such as "Driver").
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .common import MembershipRole


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------

class OrgStats(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    total_hours: float = Field(
        default=0, validation_alias=AliasChoices("total_hours", "totalHours")
    )
    completed_events: int = Field(
        default=0, validation_alias=AliasChoices("completed_events", "completedEvents")
    )
    upcoming_events: int = Field(
        default=0, validation_alias=AliasChoices("upcoming_events", "upcomingEvents")
    )


class Organization(BaseModel):
    """
    An organization as returned by ``/organizations/detail``.

    The backend is not consistent about key casing, so both snake_case and
    camelCase are accepted for the derived counters and timestamps. Keys this
    model does not know about are preserved.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    name: Optional[str] = None
    description: Optional[str] = None

    # Contact
    website: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None

    join_code: Optional[str] = None
    is_active: bool = True
    member_count: int = Field(
        default=0, validation_alias=AliasChoices("member_count", "membersCount", "members")
    )
    event_count: int = Field(
        default=0, validation_alias=AliasChoices("event_count", "eventsCount")
    )
    stats: OrgStats = Field(default_factory=OrgStats)
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    updated_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("updated_at", "updatedAt")
    )


# ---------------------------------------------------------------------------
# Memberships
# ---------------------------------------------------------------------------

class Membership(BaseModel):
    """A user's role inside one organization."""

    user_id: str
    organization_id: str
    role: MembershipRole = MembershipRole.MEMBER
    is_active: bool = True
    joined_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Role definitions
# ---------------------------------------------------------------------------

class RoleDefinition(BaseModel):
    id: str
    organization_id: str
    role_name: str = Field(..., min_length=1, max_length=100)
    is_public: bool = True
    options: list[str] = Field(default_factory=list)
