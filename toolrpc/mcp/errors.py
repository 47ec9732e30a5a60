"""Protocol error codes, exceptions and error response helpers."""

from typing import Any

# Standard JSON-RPC 2.0 error codes, used only when a body cannot be decoded
PARSE_ERROR = -32700  # Invalid JSON was received
INVALID_REQUEST = -32600  # The JSON sent is not a valid Request object

# Protocol error codes carried in MCP error envelopes
BAD_REQUEST = 400  # Malformed request or tool arguments
NOT_FOUND = 404  # Unknown method or tool
INTERNAL_SERVER_ERROR = 500  # Anything else, including tool failures


def error_message(code: int) -> str:
    """Get the standard message for an error code."""
    messages = {
        PARSE_ERROR: "Parse error",
        INVALID_REQUEST: "Invalid Request",
        BAD_REQUEST: "Bad request",
        NOT_FOUND: "Not found",
        INTERNAL_SERVER_ERROR: "Internal server error",
    }
    return messages.get(code, "Unknown error")


def make_error_data(code: int, message: str | None = None) -> dict[str, Any]:
    """Create an error object for JSON-RPC response."""
    return {
        "code": code,
        "message": message or error_message(code),
    }


class McpError(Exception):
    """An error carrying an explicit protocol error code."""

    code: int = INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None, code: int | None = None):
        if code is not None:
            self.code = code
        self.message = message or error_message(self.code)
        super().__init__(self.message)


class MalformedRequestError(McpError):
    """The request object itself is missing."""

    code = BAD_REQUEST

    def __init__(self, message: str = "Malformed request"):
        super().__init__(message)


class MethodNotFoundError(McpError):
    """The requested method is not a server capability."""

    code = NOT_FOUND

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Method '{method}' not found in MCP server capabilities.")


class ToolNotFoundError(McpError):
    """The requested tool is not registered."""

    code = NOT_FOUND

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool '{name}' not found in MCP server capabilities.")


class InvalidArgumentsError(McpError):
    """Tool arguments could not be bound to the tool's parameters."""

    code = BAD_REQUEST
