"""Shared fixtures: settings factories and a fake Leaf upstream."""

import logging
from typing import Optional

import httpx
import pytest
import structlog

from shared.config import LeafSettings, MCPServerSettings, Settings

API_KEY = "process-token"
SESSION_TOKEN = "session-token"
LEAF_USER_ID = "0b5a0a1e-6c0e-4a7c-9a55-2f1d1c3d4e5f"


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Keep structlog off stdout; the CLI tests parse stdout."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
    )
    yield
    structlog.reset_defaults()


def make_settings(
    transport: str = "stdio",
    api_key: Optional[str] = API_KEY,
    **server
) -> Settings:
    return Settings(
        leaf=LeafSettings(api_key=api_key),
        mcp_server=MCPServerSettings(transport=transport, **server),
    )


class FakeUpstream:
    """Records every request and answers with a canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = '{"content":[]}'
        self.error: Optional[Exception] = None

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def application(upstream):
    """Single-tenant application wired to the fake upstream."""
    from mcp_server.main import bootstrap

    return bootstrap(make_settings(), transport=upstream.transport)


@pytest.fixture
def multi_tenant_application(upstream):
    """HTTP-mode application without a process-wide token."""
    from mcp_server.main import bootstrap

    return bootstrap(make_settings(transport="http", api_key=None), transport=upstream.transport)
