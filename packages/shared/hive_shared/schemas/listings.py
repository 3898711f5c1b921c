"""Rows of the member, resource, and audit-log list endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MemberItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    org: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None


class ResourceItem(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    org: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    uploaded_by: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("uploaded_by", "uploadedBy")
    )
    uploaded_at: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("uploaded_at", "uploadedAt")
    )
    size: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class AuditLogItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    ts: str
    actor: Optional[str] = None
    action: Optional[str] = None
    resource: Optional[str] = None
    metadata: Any = None
