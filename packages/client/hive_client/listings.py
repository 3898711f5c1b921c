"""
Backend endpoints and the query objects bound to them.

GET /events                events of an org, filtered by event id / status
GET /members               members of an org, filtered by role / search term
GET /resources             shared resources, filtered by type / category
GET <audit base>           audit log entries (separate service)
GET /events/detail         one event
GET /organizations/detail  one organization
"""

from __future__ import annotations

from typing import Optional

from hive_shared.schemas.events import Event, EventItem
from hive_shared.schemas.listings import AuditLogItem, MemberItem, ResourceItem
from hive_shared.schemas.organizations import Organization

from .config import AuditConfig
from .http import ConfigurationError, HttpClient
from .pagination import DetailQuery, PaginatedQuery

EVENTS_PATH = "/events"
EVENT_DETAIL_PATH = "/events/detail"
MEMBERS_PATH = "/members"
RESOURCES_PATH = "/resources"
ORGANIZATION_DETAIL_PATH = "/organizations/detail"


def events_query(
    client: HttpClient,
    org: str,
    *,
    event: Optional[str] = None,
    status: Optional[str] = None,
) -> PaginatedQuery:
    return PaginatedQuery(
        client,
        EVENTS_PATH,
        "events",
        filters={"org": org, "event": event, "status": status},
        model=EventItem,
    )


def members_query(
    client: HttpClient,
    org: str,
    *,
    role: Optional[str] = None,
    search: Optional[str] = None,
) -> PaginatedQuery:
    return PaginatedQuery(
        client,
        MEMBERS_PATH,
        "members",
        filters={"org": org, "role": role, "search": search},
        model=MemberItem,
    )


def resources_query(
    client: HttpClient,
    org: str,
    *,
    type: Optional[str] = None,
    category: Optional[str] = None,
) -> PaginatedQuery:
    return PaginatedQuery(
        client,
        RESOURCES_PATH,
        "resources",
        filters={"org": org, "type": type, "category": category},
        model=ResourceItem,
    )


def audit_log_query(
    client: HttpClient,
    audit: AuditConfig,
    org: str,
    *,
    limit: Optional[int] = None,
    from_: Optional[str] = None,
    to: Optional[str] = None,
    action: Optional[str] = None,
    actor: Optional[str] = None,
) -> PaginatedQuery:
    """Audit entries live on their own service; ``client`` must point at it.

    ``audit.base_url`` is the full endpoint URL; filters become its query.
    """
    if not audit.configured:
        raise ConfigurationError(
            "Audit API base URL is not configured (set audit.base_url / HIVE_AUDIT__BASE_URL)"
        )
    return PaginatedQuery(
        client,
        "",
        "audit logs",
        filters={
            "org": org,
            "limit": limit if limit is not None else audit.default_limit,
            "from": from_,
            "to": to,
            "action": action,
            "actor": actor,
        },
        model=AuditLogItem,
        base_url=audit.base_url,
    )


def event_detail_query(client: HttpClient, org: str, event_id: str) -> DetailQuery[Event]:
    return DetailQuery(
        client,
        EVENT_DETAIL_PATH,
        "event",
        Event,
        params={"org": org, "event": event_id},
    )


def organization_detail_query(client: HttpClient, org: str) -> DetailQuery[Organization]:
    return DetailQuery(
        client,
        ORGANIZATION_DETAIL_PATH,
        "organization",
        Organization,
        params={"org": org},
    )
