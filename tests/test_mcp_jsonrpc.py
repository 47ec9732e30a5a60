"""Tests for the MCP HTTP endpoint and its SSE framing."""

import pytest
from fastapi.testclient import TestClient

from toolrpc.mcp.errors import (
    PARSE_ERROR,
    INVALID_REQUEST,
    BAD_REQUEST,
    NOT_FOUND,
    INTERNAL_SERVER_ERROR,
)
from conftest import parse_sse


class TestMessageDecoding:
    """Tests for bodies that are not JSON-RPC requests."""

    def test_invalid_json_returns_parse_error(self, client: TestClient):
        """Test that invalid JSON returns parse error."""
        response = client.post(
            "/mcp",
            content="not valid json{",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

        data = response.json()
        assert data["jsonrpc"] == "2.0"
        assert data["id"] is None
        assert data["error"]["code"] == PARSE_ERROR
        assert "invalid json" in data["error"]["message"].lower()

    def test_null_body_returns_bad_request(self, client: TestClient):
        """Test that a JSON null body is rejected."""
        response = client.post("/mcp", content="null")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == INVALID_REQUEST

    def test_wrong_jsonrpc_version_returns_invalid_request(self, client: TestClient):
        """Test that wrong jsonrpc version returns invalid request."""
        response = client.post(
            "/mcp",
            json={"jsonrpc": "1.0", "id": 1, "method": "tools/list"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == INVALID_REQUEST


class TestSseFraming:
    """Tests for the single-frame SSE reply."""

    def test_response_is_single_message_frame(
        self, client: TestClient, sample_jsonrpc_request
    ):
        response = client.post("/mcp", json=sample_jsonrpc_request("tools/list"))
        assert response.status_code == 200
        assert response.text.startswith("event: message\ndata: ")
        assert response.text.endswith("\n\n")
        assert response.text.count("data: ") == 1

    def test_sse_headers_are_set(self, client: TestClient, sample_jsonrpc_request):
        response = client.post("/mcp", json=sample_jsonrpc_request("initialize"))
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache,no-store"
        assert response.headers["content-encoding"] == "identity"
        assert response.headers["keep-alive"] == "true"

    def test_session_id_is_echoed(self, client: TestClient, sample_jsonrpc_request):
        response = client.post(
            "/mcp",
            json=sample_jsonrpc_request("tools/list"),
            headers={"Mcp-Session-Id": "session-42"},
        )
        assert response.headers["Mcp-Session-Id"] == "session-42"

    def test_no_session_id_without_request_header(
        self, client: TestClient, sample_jsonrpc_request
    ):
        response = client.post("/mcp", json=sample_jsonrpc_request("tools/list"))
        assert "Mcp-Session-Id" not in response.headers


class TestMcpMethods:
    """Tests for MCP protocol methods."""

    def test_unknown_method_returns_not_found(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that unknown method returns method not found."""
        response = client.post("/mcp", json=sample_jsonrpc_request("unknown/method"))
        assert response.status_code == 200

        data = parse_sse(response.text)
        assert data["error"]["code"] == NOT_FOUND
        assert "'unknown/method'" in data["error"]["message"]

    def test_initialize_returns_capabilities(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that initialize returns server capabilities."""
        response = client.post(
            "/mcp",
            json=sample_jsonrpc_request(
                "initialize",
                {
                    "protocolVersion": "2025-06-18",
                    "capabilities": {},
                    "clientInfo": {"name": "test", "version": "1.0"},
                },
            ),
        )
        data = parse_sse(response.text)
        assert data["result"]["protocolVersion"] == "2025-06-18"
        assert data["result"]["capabilities"] == {"tools": {"listChanged": True}}
        assert "serverInfo" in data["result"]

    def test_initialized_notification_gets_a_response(self, client: TestClient):
        """Test that notifications/initialized is answered like initialize."""
        response = client.post(
            "/mcp",
            json={"jsonrpc": "2.0", "method": "notifications/initialized"},
        )
        assert response.status_code == 200

        data = parse_sse(response.text)
        assert data["id"] is None
        assert data["result"]["protocolVersion"] == "2025-06-18"

    def test_tools_list_returns_tools(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that tools/list returns available tools."""
        data = parse_sse(
            client.post("/mcp", json=sample_jsonrpc_request("tools/list")).text
        )

        tool_names = [t["name"] for t in data["result"]["tools"]]
        assert tool_names == ["get_time", "add", "concat", "echo", "count_to"]

        for tool in data["result"]["tools"]:
            assert isinstance(tool["description"], str)
            assert tool["inputSchema"]["type"] == "object"

    def test_tools_call_add(self, client: TestClient, sample_jsonrpc_request):
        """Test calling the add tool."""
        response = client.post(
            "/mcp",
            json=sample_jsonrpc_request(
                "tools/call",
                {"name": "add", "arguments": {"a": 5, "b": 3}},
            ),
        )
        data = parse_sse(response.text)
        assert data["result"] == {
            "content": [{"type": "text", "text": "8"}],
            "isError": False,
        }

    def test_tools_call_null_params(self, client: TestClient, sample_jsonrpc_request):
        data = parse_sse(
            client.post("/mcp", json=sample_jsonrpc_request("tools/call")).text
        )
        assert data["error"]["code"] == BAD_REQUEST
        assert "cannot be null" in data["error"]["message"]

    def test_tools_call_string_params(self, client: TestClient, sample_jsonrpc_request):
        data = parse_sse(
            client.post(
                "/mcp", json=sample_jsonrpc_request("tools/call", "invalid-params")
            ).text
        )
        assert data["error"]["code"] == INTERNAL_SERVER_ERROR
        assert data["error"]["message"]

    def test_tools_call_unknown_tool(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test calling an unknown tool returns error."""
        data = parse_sse(
            client.post(
                "/mcp",
                json=sample_jsonrpc_request(
                    "tools/call", {"name": "unknown-tool", "arguments": {}}
                ),
            ).text
        )
        assert data["error"]["code"] == NOT_FOUND
        assert "unknown-tool" in data["error"]["message"]

    @pytest.mark.asyncio
    async def test_tools_call_concat_async_client(
        self, async_client, sample_jsonrpc_request
    ):
        """Test the endpoint through the ASGI transport."""
        response = await async_client.post(
            "/mcp",
            json=sample_jsonrpc_request(
                "tools/call", {"name": "concat", "arguments": {"text1": "Hello"}}
            ),
        )
        data = parse_sse(response.text)
        assert data["result"]["content"][0]["text"] == "Hello World"


class TestResponseFormat:
    """Tests for JSON-RPC response format compliance."""

    @pytest.mark.parametrize(
        "method", ["initialize", "notifications/initialized", "tools/list", "tools/call"]
    )
    def test_response_has_jsonrpc_field(
        self, client: TestClient, sample_jsonrpc_request, method
    ):
        """Test that responses include jsonrpc field."""
        data = parse_sse(client.post("/mcp", json=sample_jsonrpc_request(method)).text)
        assert data["jsonrpc"] == "2.0"

    def test_response_has_matching_id(
        self, client: TestClient, sample_jsonrpc_request
    ):
        """Test that response id matches request id."""
        data = parse_sse(
            client.post("/mcp", json=sample_jsonrpc_request("tools/list", id=42)).text
        )
        assert data["id"] == 42

    def test_error_response_keeps_id(
        self, client: TestClient, sample_jsonrpc_request
    ):
        data = parse_sse(
            client.post("/mcp", json=sample_jsonrpc_request("nope", id=7)).text
        )
        assert data["id"] == 7
        assert "result" not in data
