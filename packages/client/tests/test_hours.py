"""
Tests for volunteer-hours listing and recording.
"""

from __future__ import annotations

from datetime import date

import httpx
import pytest

from hive_client.hours import (
    add_hours,
    delete_hours,
    organization_hours_query,
    total_hours,
    update_hours,
    user_hours_query,
)
from hive_client.http import ApiError, HttpClient, MalformedResponseError
from hive_shared.schemas.hours import HoursCreate, HoursUpdate, VolunteerHours


class TestListing:
    async def test_user_hours_newest_first(self, client):
        q = user_hours_query(client, "u1")
        entries = await q.load_all()
        assert [h.id for h in entries] == ["h2", "h1"]
        assert all(isinstance(h, VolunteerHours) for h in entries)
        assert entries[0].date == date(2026, 10, 5)
        assert total_hours(entries) == 5.5

    async def test_organization_hours_page(self, client):
        q = organization_hours_query(client, "acme")
        await q.load()
        assert len(q.items) == 2
        assert q.has_more
        await q.load_more()
        assert total_hours(q.items) == 9.5

    async def test_missing_user_skips_request(self, client, api_app):
        q = user_hours_query(client, "")
        assert await q.load() == []
        assert api_app.state.requests == []

    async def test_failure_is_generic(self, client):
        q = organization_hours_query(client, "fail")
        await q.load()
        assert q.error == "Failed to load volunteer hours."


class TestRecording:
    async def test_add_then_list(self, client):
        entry = HoursCreate(
            user_id="u1", date="2026-10-10", hours=1.5, organization_id="acme", notes="Setup crew"
        )
        stored = await add_hours(client, entry)
        assert stored.id == "h4"
        assert stored.hours == 1.5
        assert stored.created_at is not None

        entries = await user_hours_query(client, "u1").load_all()
        assert [h.id for h in entries] == ["h4", "h2", "h1"]

    async def test_update_sends_only_changed_fields(self, client, api_app):
        stored = await update_hours(client, "h1", HoursUpdate(hours=3.5))
        assert stored.hours == 3.5
        assert stored.notes is None
        assert stored.date == date(2026, 10, 1)
        assert api_app.state.requests[-1].method == "PATCH"

    async def test_update_without_changes_is_rejected(self, client, api_app):
        with pytest.raises(ValueError):
            await update_hours(client, "h1", HoursUpdate())
        assert api_app.state.requests == []

    async def test_delete(self, client, api_app):
        await delete_hours(client, "h3")
        assert [h["id"] for h in api_app.state.hours] == ["h1", "h2"]

    async def test_delete_unknown_entry_raises(self, client):
        with pytest.raises(ApiError) as exc_info:
            await delete_hours(client, "h99")
        assert exc_info.value.status == 404

    async def test_ids_are_escaped_in_the_path(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.raw_path.decode()
            return httpx.Response(204)

        async with HttpClient("http://hive.test", transport=httpx.MockTransport(handler)) as c:
            await delete_hours(c, "a/b")
        assert seen["path"] == "/volunteer-hours/a%2Fb"

    async def test_stored_entry_must_validate(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json={"id": "h9"})

        entry = HoursCreate(user_id="u1", date="2026-10-10", hours=1, event_id="ev1")
        async with HttpClient("http://hive.test", transport=httpx.MockTransport(handler)) as c:
            with pytest.raises(MalformedResponseError):
                await add_hours(c, entry)
