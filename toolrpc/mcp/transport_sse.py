"""SSE (Server-Sent Events) framing for MCP responses over HTTP."""

from typing import MutableMapping

from fastapi import Response
from sse_starlette import ServerSentEvent


# Applied to every SSE reply unless the handler already set them
SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache,no-store",
    "Content-Encoding": "identity",
    "Keep-Alive": "true",
}


def encode_sse_message(payload: str) -> bytes:
    """Encode one JSON payload as an `event: message` SSE frame."""
    return ServerSentEvent(data=payload, event="message", sep="\n").encode()


def apply_sse_headers(headers: MutableMapping[str, str]) -> None:
    """Add the SSE response headers that are not present yet."""
    present = {key.lower() for key in headers}
    for key, value in SSE_HEADERS.items():
        if key.lower() not in present:
            headers[key] = value


def create_sse_message_response(
    payload: str, headers: MutableMapping[str, str] | None = None
) -> Response:
    """
    Create a response carrying a single SSE frame.

    Args:
        payload: Serialized JSON-RPC response.
        headers: Response headers collected while handling the request,
            such as an echoed Mcp-Session-Id.
    """
    headers = dict(headers or {})
    apply_sse_headers(headers)
    return Response(content=encode_sse_message(payload), headers=headers)
