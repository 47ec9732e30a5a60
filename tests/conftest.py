"""Pytest configuration and fixtures."""

import json

import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport

from toolrpc.main import app
from toolrpc.mcp.context import McpContext
from toolrpc.mcp.registry import ToolRegistry, get_registry, reset_registry
from toolrpc.config.loader import get_settings


class TestTools:
    """Provider used by the dispatcher tests."""

    __test__ = False

    def GetTime(self) -> str:
        """Returns the current time."""
        return "2025-01-01 00:00:00"

    def Add(self, a: int, b: int) -> int:
        """Adds two numbers."""
        return a + b

    def Concat(self, text1: str, text2: str = "World") -> str:
        """Joins two strings."""
        return f"{text1} {text2}"

    def ThrowError(self) -> None:
        """Always fails."""
        raise RuntimeError("test error")


@pytest.fixture
def client():
    """Synchronous test client for FastAPI app."""
    return TestClient(app)


@pytest.fixture
async def async_client():
    """Async test client for FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture(autouse=True)
def reset_global_registry():
    """Reset the global tool registry before each test and reload example tools."""
    reset_registry()
    registry = get_registry()
    registry.load_provider("example")
    yield
    reset_registry()


@pytest.fixture
def registry():
    """A fresh, unshared tool registry."""
    return ToolRegistry()


@pytest.fixture
def test_registry():
    """A registry holding the TestTools provider."""
    registry = ToolRegistry()
    registry.register(TestTools)
    return registry


@pytest.fixture
def settings():
    """Get application settings."""
    return get_settings()


@pytest.fixture
def make_context():
    """Context factory returning (context, response_headers)."""
    def _make_context(headers: dict | None = None, services=None):
        response_headers: dict[str, str] = {}
        context = McpContext.from_headers(headers or {}, response_headers, services=services)
        return context, response_headers
    return _make_context


@pytest.fixture
def sample_jsonrpc_request():
    """Sample JSON-RPC request factory."""
    def _make_request(method: str, params=None, id: int | None = 1):
        request = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
        }
        if id is not None:
            request["id"] = id
        return request
    return _make_request


def parse_sse(text: str) -> dict:
    """Decode the JSON payload of a single `event: message` SSE frame."""
    lines = text.split("\n")
    assert lines[0] == "event: message"
    assert lines[1].startswith("data: ")
    return json.loads(lines[1][len("data: "):])
