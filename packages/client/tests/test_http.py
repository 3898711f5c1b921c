"""Tests for URL building and the JSON HTTP client."""

import json

import httpx
import pytest

from hive_client.http import (
    ApiError,
    ConfigurationError,
    HttpClient,
    MalformedResponseError,
    build_url,
)


class TestBuildUrl:
    def test_joins_base_and_path(self):
        assert build_url("https://api.example.org/", "/events") == "https://api.example.org/events"

    def test_skips_none_and_empty_values(self):
        url = build_url("https://api.example.org", "events", {"org": "acme", "status": "", "cursor": None})
        assert url == "https://api.example.org/events?org=acme"

    def test_list_values_repeat_the_key(self):
        url = build_url("https://x.test", "members", {"role": ["admin", None, "moderator"]})
        assert url == "https://x.test/members?role=admin&role=moderator"

    def test_absolute_path_ignores_base(self):
        url = build_url("https://x.test", "https://audit.test/logs", {"org": "acme"})
        assert url == "https://audit.test/logs?org=acme"

    def test_empty_path_uses_base_itself(self):
        assert build_url("https://audit.test/logs", "", {"limit": 25}) == "https://audit.test/logs?limit=25"

    def test_values_are_encoded(self):
        url = build_url("https://x.test", "members", {"search": "ada lovelace&co"})
        assert url == "https://x.test/members?search=ada+lovelace%26co"


def test_missing_base_url_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        HttpClient("")


async def test_sends_bearer_and_accept_headers(client, api_app):
    await client.get_json("/events", {"org": "acme"})
    request = api_app.state.requests[-1]
    assert request.headers["Authorization"] == "Bearer test-token"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["Cache-Control"] == "no-store"


async def test_no_authorization_header_without_token(transport, api_app):
    async with HttpClient("http://hive.test", transport=transport) as anonymous:
        await anonymous.get_json("/events", {"org": "acme"})
    assert "Authorization" not in api_app.state.requests[-1].headers


async def test_error_status_uses_body_as_message(client):
    with pytest.raises(ApiError) as exc_info:
        await client.get_json("/events", {"org": "fail"})
    assert exc_info.value.status == 500
    assert exc_info.value.message == "database offline"


async def test_error_status_without_body_reports_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    async with HttpClient("http://hive.test", transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(ApiError) as exc_info:
            await c.get_json("/events")
    assert exc_info.value.status == 503
    assert "503" in str(exc_info.value)


async def test_transport_failure_becomes_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with HttpClient("http://hive.test", transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(ApiError) as exc_info:
            await c.get_json("/events")
    assert exc_info.value.status is None


async def test_invalid_json_is_malformed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    async with HttpClient("http://hive.test", transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(MalformedResponseError):
            await c.get_json("/events")


async def test_post_no_content_returns_empty_dict():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = request.content
        seen["content_type"] = request.headers.get("Content-Type")
        return httpx.Response(204)

    async with HttpClient("http://hive.test", transport=httpx.MockTransport(handler)) as c:
        assert await c.post_json("/events/signup", {"event": "ev1"}) == {}
    assert json.loads(seen["body"]) == {"event": "ev1"}
    assert seen["content_type"] == "application/json"


async def test_patch_and_delete():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.content))
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, json={"id": "h1", "hours": 2})

    async with HttpClient("http://hive.test", transport=httpx.MockTransport(handler)) as c:
        assert await c.patch_json("/volunteer-hours/h1", {"hours": 2}) == {"id": "h1", "hours": 2}
        assert await c.delete("/volunteer-hours/h1") is None

    assert [(method, path) for method, path, _ in seen] == [
        ("PATCH", "/volunteer-hours/h1"),
        ("DELETE", "/volunteer-hours/h1"),
    ]
    assert json.loads(seen[0][2]) == {"hours": 2}


async def test_delete_error_status_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="Hours entry not found")

    async with HttpClient("http://hive.test", transport=httpx.MockTransport(handler)) as c:
        with pytest.raises(ApiError) as exc_info:
            await c.delete("/volunteer-hours/nope")
    assert exc_info.value.status == 404
