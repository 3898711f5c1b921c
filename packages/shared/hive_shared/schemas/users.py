"""User schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .common import GlobalRole


class User(BaseModel):
    """An authenticated user with their global (not per-organization) role."""

    model_config = ConfigDict(extra="allow")

    id: str
    email: str
    name: str = ""
    role: GlobalRole = GlobalRole.USER
    is_verified: bool = False
    job_title: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
