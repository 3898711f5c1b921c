"""
Volunteer hours: listing a volunteer's or an organization's recorded time,
and recording, correcting or removing entries.

GET    /volunteer-hours?user=<id>   one volunteer's entries, newest first
GET    /volunteer-hours?org=<id>    every entry recorded against an org
POST   /volunteer-hours             record an entry
PATCH  /volunteer-hours/<id>        correct an entry
DELETE /volunteer-hours/<id>        remove an entry

Listing goes through ``PaginatedQuery`` and so only ever reports the generic
"Failed to load volunteer hours." state. Writes raise ``ApiError`` or
``MalformedResponseError`` so the caller can tell the user the change did not
stick.
"""

from __future__ import annotations

from typing import Iterable
from urllib.parse import quote

import structlog

from hive_shared.schemas.hours import HoursCreate, HoursUpdate, VolunteerHours

from .http import HttpClient
from .pagination import PaginatedQuery, parse_object

log = structlog.get_logger()

HOURS_PATH = "/volunteer-hours"


def _entry_path(hours_id: str) -> str:
    if not hours_id:
        raise ValueError("hours_id is required")
    return f"{HOURS_PATH}/{quote(hours_id, safe='')}"


def user_hours_query(client: HttpClient, user_id: str) -> PaginatedQuery:
    return PaginatedQuery(
        client,
        HOURS_PATH,
        "volunteer hours",
        filters={"user": user_id},
        required=("user",),
        model=VolunteerHours,
    )


def organization_hours_query(client: HttpClient, org: str) -> PaginatedQuery:
    return PaginatedQuery(
        client,
        HOURS_PATH,
        "volunteer hours",
        filters={"org": org},
        model=VolunteerHours,
    )


def total_hours(entries: Iterable[VolunteerHours]) -> float:
    return sum(entry.hours for entry in entries)


async def add_hours(client: HttpClient, entry: HoursCreate) -> VolunteerHours:
    """Record an entry and return it as stored by the backend."""
    payload = await client.post_json(HOURS_PATH, entry.model_dump(mode="json"))
    stored = parse_object(payload, VolunteerHours)
    log.info(
        "hours.recorded",
        hours_id=stored.id,
        user_id=stored.user_id,
        event_id=stored.event_id,
        hours=stored.hours,
    )
    return stored


async def update_hours(
    client: HttpClient, hours_id: str, changes: HoursUpdate
) -> VolunteerHours:
    """Apply only the fields set on ``changes``."""
    body = changes.model_dump(mode="json", exclude_unset=True)
    if not body:
        raise ValueError("No changes to apply")
    payload = await client.patch_json(_entry_path(hours_id), body)
    stored = parse_object(payload, VolunteerHours)
    log.info("hours.updated", hours_id=stored.id, fields=sorted(body))
    return stored


async def delete_hours(client: HttpClient, hours_id: str) -> None:
    await client.delete(_entry_path(hours_id))
    log.info("hours.deleted", hours_id=hours_id)
