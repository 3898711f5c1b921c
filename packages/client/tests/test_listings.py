"""
Tests for the endpoint-bound queries: members, resources, audit log, and the
event / organization detail fetches.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from hive_client.config import AuditConfig
from hive_client.http import ConfigurationError
from hive_client.listings import (
    audit_log_query,
    event_detail_query,
    members_query,
    organization_detail_query,
    resources_query,
)
from hive_shared.schemas.common import EventStatus
from hive_shared.schemas.listings import AuditLogItem, ResourceItem


class TestMembers:
    async def test_search_filter_is_sent_to_backend(self, client, api_app):
        q = members_query(client, "acme", search="ada")
        await q.load()
        assert [m.name for m in q.items] == ["Ada Lovelace"]
        assert api_app.state.requests[-1].query_params["search"] == "ada"

    async def test_role_filter(self, client):
        q = members_query(client, "acme", role="moderator")
        await q.load()
        assert [m.id for m in q.items] == ["m2"]

    async def test_switching_role_restarts_listing(self, client):
        q = members_query(client, "acme")
        await q.load()
        assert q.has_more
        q.set_filters(role="member")
        await q.load()
        assert [m.id for m in q.items] == ["m3"]
        assert not q.has_more

    async def test_error_message_names_members(self, client):
        q = members_query(client, "broken")
        await q.load()
        assert q.error == "Failed to load members."


class TestResources:
    async def test_category_filter_and_aliases(self, client):
        q = resources_query(client, "acme", type="document")
        await q.load()
        assert [r.id for r in q.items] == ["r1", "r3"]
        assert isinstance(q.items[0], ResourceItem)
        assert q.items[0].uploaded_by == "m1"

    async def test_url_contains_filters(self, client):
        q = resources_query(client, "acme", type="video", category="training")
        assert q.url == "http://hive.test/resources?org=acme&type=video&category=training"


class TestAuditLog:
    async def test_requires_configured_endpoint(self, client):
        with pytest.raises(ConfigurationError):
            audit_log_query(client, AuditConfig(), "acme")

    async def test_pages_with_default_limit(self, audit_client, audit_config):
        q = audit_log_query(audit_client, audit_config, "acme")
        assert q.url == "http://hive.test/audit?org=acme&limit=2"
        await q.load_all()
        assert [a.id for a in q.items] == ["a1", "a2", "a3", "a4", "a5"]
        assert all(isinstance(a, AuditLogItem) for a in q.items)

    async def test_explicit_limit_and_filters(self, audit_client, audit_config):
        q = audit_log_query(
            audit_client, audit_config, "acme", limit=10, from_="2026-10-01", action="EVENT_UPDATED"
        )
        assert q.filters == {"org": "acme", "limit": 10, "from": "2026-10-01", "action": "EVENT_UPDATED"}
        await q.load()
        assert len(q.items) == 5
        assert not q.has_more

    async def test_wrong_token_is_generic_error(self, client, audit_config):
        # main API client carries the wrong bearer for the audit service
        q = audit_log_query(client, audit_config, "acme")
        await q.load()
        assert q.error == "Failed to load audit logs."
        assert q.items == []


class TestEventDetail:
    async def test_loads_event(self, client):
        q = event_detail_query(client, "acme", "ev1")
        event = await q.load()
        assert event is not None
        assert event.title == "Beach cleanup"
        assert event.status == EventStatus.UPCOMING
        assert event.is_full
        assert event.spots_left == 0
        assert q.error is None

    async def test_unrecognised_status_still_loads(self, client):
        event = await event_detail_query(client, "acme", "ev6").load()
        assert event is not None
        assert event.status == "postponed"

    async def test_not_found_is_generic_error(self, client):
        q = event_detail_query(client, "acme", "nope")
        assert await q.load() is None
        assert q.error == "Failed to load event."

    async def test_malformed_body_is_generic_error(self, client):
        q = event_detail_query(client, "acme", "bad")
        assert await q.load() is None
        assert q.error == "Failed to load event."

    async def test_missing_event_id_skips_request(self, client, api_app):
        q = event_detail_query(client, "acme", "")
        assert q.url is None
        assert await q.load() is None
        assert q.error is None
        assert api_app.state.requests == []


class TestOrganizationDetail:
    async def test_camel_case_counters(self, client):
        q = organization_detail_query(client, "acme")
        org = await q.load()
        assert org is not None
        assert org.name == "Acme Volunteers"
        assert org.join_code == "ACME42"
        assert org.member_count == 3
        assert org.event_count == 5
        assert org.stats.total_hours == 120.5
        assert org.stats.upcoming_events == 3
        assert isinstance(org.created_at, datetime)

    async def test_failure(self, client):
        q = organization_detail_query(client, "fail")
        assert await q.load() is None
        assert q.error == "Failed to load organization."
