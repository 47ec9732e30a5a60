"""FastAPI MCP Server - Main application entrypoint."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from toolrpc.config.loader import get_settings, load_server_config, get_enabled_providers
from toolrpc.mcp.context import SESSION_HEADER, McpContext, ServiceContainer
from toolrpc.mcp.handlers import PROTOCOL_VERSION, McpServer
from toolrpc.mcp.jsonrpc import JsonRpcProcessor
from toolrpc.mcp.registry import get_registry
from toolrpc.mcp.transport_sse import create_sse_message_response
from toolrpc.utils.logging import setup_logging, set_request_id, set_session_id, get_logger

logger = logging.getLogger(__name__)

# Instances that tool providers are resolved from
services = ServiceContainer()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    setup_logging()
    log = get_logger("startup")

    settings = get_settings()
    log.info(
        "Starting MCP server",
        server_name=settings.server_name,
        version=settings.server_version,
        mcp_path=settings.mcp_path,
    )

    config = load_server_config(settings.config_path or None)
    enabled_providers = get_enabled_providers(config)
    log.info("Loading providers", providers=enabled_providers)

    registry = get_registry()
    results = registry.load_providers(enabled_providers)

    for provider, success in results.items():
        if success:
            log.info("Loaded provider", provider=provider)
        else:
            log.warning("Failed to load provider", provider=provider)

    log.info(
        "Tool registry ready",
        tool_count=registry.tool_count,
        provider_count=registry.provider_count,
    )

    yield

    log.info("Shutting down MCP server")


app = FastAPI(
    title="toolrpc MCP Server",
    description="JSON-RPC tool invocation server speaking the Model Context Protocol",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[SESSION_HEADER, "X-Request-ID"],
)


@app.middleware("http")
async def add_request_id_middleware(request: Request, call_next):
    """Add request ID to all requests and bind the session id for logging."""
    request_id = set_request_id(request.headers.get("X-Request-ID"))
    set_session_id(request.headers.get(SESSION_HEADER))
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# =============================================================================
# Health and Info Endpoints
# =============================================================================


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with server info."""
    settings = get_settings()
    registry = get_registry()

    return {
        "name": settings.server_name,
        "version": settings.server_version,
        "endpoints": {
            "health": "/health",
            "mcp": settings.mcp_path,
        },
        "tools_available": registry.tool_count,
        "mcp_protocol_version": PROTOCOL_VERSION,
    }


# =============================================================================
# MCP Endpoint
# =============================================================================


@app.post(get_settings().mcp_path)
async def mcp_endpoint(request: Request) -> Response:
    """
    Process one JSON-RPC request per POST body.

    The response is written back as a single SSE `message` frame. Bodies
    that are not a JSON-RPC request get a 400 with a JSON error envelope.
    """
    body = await request.body()

    response_headers: dict[str, str] = {}
    server = McpServer(get_registry(), services=services)
    context = McpContext.from_headers(
        request.headers, response_headers, services=server, host_context=request
    )
    processor = JsonRpcProcessor(server)

    response, decoded = await run_in_threadpool(processor.handle_message, body, context)

    if not decoded:
        return JSONResponse(status_code=400, content=response.model_dump())

    return create_sse_message_response(
        processor.serialize_response(response), response_headers
    )


# =============================================================================
# Main Entry Point
# =============================================================================


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "toolrpc.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
