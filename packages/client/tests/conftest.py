"""
Shared fixtures: an in-process mock backend reached through httpx's ASGI
transport, so no sockets are opened.
"""

import sys

import httpx
import pytest
import structlog

from hive_client.config import AuditConfig, LoggingConfig
from hive_client.http import HttpClient
from hive_client.main import configure_logging
from mock_api import create_api_app

BASE_URL = "http://hive.test"


@pytest.fixture(autouse=True)
def stderr_logging():
    """Send every log line to stderr so stdout only carries command output."""
    configure_logging(LoggingConfig(level="debug", format="json"), stream=sys.stderr)
    yield
    structlog.reset_defaults()


@pytest.fixture
def api_app():
    return create_api_app()


@pytest.fixture
def transport(api_app):
    return httpx.ASGITransport(app=api_app)


@pytest.fixture
async def client(transport):
    async with HttpClient(BASE_URL, bearer_token="test-token", transport=transport) as c:
        yield c


@pytest.fixture
def audit_config():
    return AuditConfig(base_url=f"{BASE_URL}/audit", default_limit=2)


@pytest.fixture
async def audit_client(transport, audit_config):
    async with HttpClient(
        audit_config.base_url, bearer_token="audit-token", transport=transport
    ) as c:
        yield c
