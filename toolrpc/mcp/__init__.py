"""MCP (Model Context Protocol) tool server core over JSON-RPC 2.0."""

from toolrpc.mcp.models import (
    JsonRpcRequest,
    JsonRpcResponse,
    JsonRpcError,
    Tool,
    TextContent,
    ToolCallResult,
)
from toolrpc.mcp.context import McpContext, ServiceContainer, SESSION_HEADER
from toolrpc.mcp.registry import ToolRegistry, to_snake_case
from toolrpc.mcp.schema import infer_schema
from toolrpc.mcp.progress import ProgressReporter
from toolrpc.mcp.handlers import McpServer
from toolrpc.mcp.errors import (
    BAD_REQUEST,
    NOT_FOUND,
    INTERNAL_SERVER_ERROR,
    McpError,
    MalformedRequestError,
)

__all__ = [
    "JsonRpcRequest",
    "JsonRpcResponse",
    "JsonRpcError",
    "Tool",
    "TextContent",
    "ToolCallResult",
    "McpContext",
    "ServiceContainer",
    "SESSION_HEADER",
    "ToolRegistry",
    "to_snake_case",
    "infer_schema",
    "ProgressReporter",
    "McpServer",
    "BAD_REQUEST",
    "NOT_FOUND",
    "INTERNAL_SERVER_ERROR",
    "McpError",
    "MalformedRequestError",
]
