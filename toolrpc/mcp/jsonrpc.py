"""JSON-RPC 2.0 message processing."""

import json
import logging

from pydantic import ValidationError

from toolrpc.mcp.context import McpContext
from toolrpc.mcp.errors import INVALID_REQUEST, PARSE_ERROR, make_error_data
from toolrpc.mcp.handlers import McpServer
from toolrpc.mcp.models import JsonRpcError, JsonRpcRequest, JsonRpcResponse

logger = logging.getLogger(__name__)


class JsonRpcProcessor:
    """Decode, process and encode JSON-RPC 2.0 messages."""

    def __init__(self, server: McpServer):
        self.server = server

    def parse_request(self, raw_data: str | bytes) -> tuple[JsonRpcRequest | None, dict | None]:
        """
        Parse a JSON-RPC request from raw data.

        Returns (request, error) tuple. One will be None.
        """
        try:
            if isinstance(raw_data, bytes):
                raw_data = raw_data.decode("utf-8")
            data = json.loads(raw_data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            return None, make_error_data(PARSE_ERROR, f"Invalid JSON: {e}")

        if not isinstance(data, dict):
            return None, make_error_data(INVALID_REQUEST, "Malformed request")

        try:
            return JsonRpcRequest.model_validate(data), None
        except ValidationError as e:
            return None, make_error_data(
                INVALID_REQUEST, f"Invalid JSON-RPC request: {e}"
            )

    def handle_message(
        self, raw_data: str | bytes, context: McpContext
    ) -> tuple[JsonRpcResponse, bool]:
        """
        Handle a raw JSON-RPC message end-to-end.

        Returns the response and whether the message could be decoded.
        """
        request, parse_error = self.parse_request(raw_data)
        if parse_error is not None:
            logger.warning(f"Rejected message: {parse_error['message']}")
            return JsonRpcResponse(id=None, error=JsonRpcError(**parse_error)), False

        return self.server.process(request, context), True

    def serialize_response(self, response: JsonRpcResponse) -> str:
        """Serialize a JSON-RPC response to JSON string."""
        return json.dumps(response.model_dump(), ensure_ascii=False)
