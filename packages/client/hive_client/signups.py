"""
Event signup and attendance.

POST   /events/signup          join an event
DELETE /events/signup          leave it again
POST   /events/checkin         self check-in with the volunteer's position
POST   /events/admin-checkin   an organizer starts a volunteer's session
POST   /events/admin-checkout  an organizer ends it

Joining twice is not an error: the backend answers 409 and ``join_event``
reports that nothing changed.
"""

from __future__ import annotations

import structlog

from hive_shared.schemas.events import CheckIn

from .http import ApiError, HttpClient

log = structlog.get_logger()

SIGNUP_PATH = "/events/signup"
CHECKIN_PATH = "/events/checkin"
ADMIN_CHECKIN_PATH = "/events/admin-checkin"
ADMIN_CHECKOUT_PATH = "/events/admin-checkout"


def _require(**values: str) -> dict[str, str]:
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValueError(f"Missing required value(s): {', '.join(missing)}")
    return values


async def join_event(client: HttpClient, org: str, event_id: str) -> bool:
    """Sign the current user up. Returns ``False`` if already signed up."""
    body = _require(org=org, event=event_id)
    try:
        await client.post_json(SIGNUP_PATH, body)
    except ApiError as exc:
        if exc.status != 409:
            raise
        log.info("signup.already_registered", org=org, event_id=event_id)
        return False
    log.info("signup.joined", org=org, event_id=event_id)
    return True


async def leave_event(client: HttpClient, org: str, event_id: str) -> None:
    query = _require(org=org, event=event_id)
    await client.delete(SIGNUP_PATH, query)
    log.info("signup.left", org=org, event_id=event_id)


async def check_in(
    client: HttpClient,
    org: str,
    event_id: str,
    latitude: float,
    longitude: float,
) -> None:
    body = _require(org=org, event=event_id)
    position = CheckIn(latitude=latitude, longitude=longitude)
    await client.post_json(CHECKIN_PATH, {**body, **position.model_dump()})
    log.info("signup.checked_in", org=org, event_id=event_id)


async def admin_check_in(
    client: HttpClient, org: str, event_id: str, user_id: str
) -> None:
    """Start a volunteer session on someone else's behalf."""
    body = _require(org=org, event=event_id, user=user_id)
    await client.post_json(ADMIN_CHECKIN_PATH, body)
    log.info("signup.admin_checked_in", org=org, event_id=event_id, user_id=user_id)


async def admin_check_out(
    client: HttpClient, org: str, event_id: str, user_id: str
) -> None:
    """End the volunteer's active session. 404 when there is none."""
    body = _require(org=org, event=event_id, user=user_id)
    await client.post_json(ADMIN_CHECKOUT_PATH, body)
    log.info("signup.admin_checked_out", org=org, event_id=event_id, user_id=user_id)
