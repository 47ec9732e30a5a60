"""MCP method handlers and the protocol dispatcher."""

import logging
import uuid
from typing import Any

from pydantic import ValidationError

from toolrpc.config.loader import Settings, get_settings
from toolrpc.mcp.context import SESSION_HEADER, McpContext, ServiceProvider
from toolrpc.mcp.errors import (
    BAD_REQUEST,
    INTERNAL_SERVER_ERROR,
    MalformedRequestError,
    McpError,
    MethodNotFoundError,
    ToolNotFoundError,
    make_error_data,
)
from toolrpc.mcp.invoker import DefaultInvoker, MethodInvoker, bind_arguments
from toolrpc.mcp.models import (
    Capabilities,
    InitializeParams,
    InitializeResult,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ServerInfo,
    TextContent,
    ToolCallParams,
    ToolCallResult,
    ToolsListResult,
)
from toolrpc.mcp.progress import ProgressReporter
from toolrpc.mcp.registry import ToolRegistry, get_registry

logger = logging.getLogger(__name__)

# MCP protocol version we support
PROTOCOL_VERSION = "2025-06-18"


class McpServer:
    """
    Routes JSON-RPC requests to MCP handlers.

    The server keeps no per-request state, so process() may be called from
    any number of threads once the registry is populated. It also acts as a
    service provider: asking it for McpServer returns itself, any other type
    is looked up in the optional parent provider.
    """

    def __init__(
        self,
        registry: ToolRegistry | None = None,
        invoker: MethodInvoker | None = None,
        services: ServiceProvider | None = None,
        settings: Settings | None = None,
    ):
        self.registry = registry if registry is not None else get_registry()
        self.invoker = invoker if invoker is not None else DefaultInvoker()
        self.services = services
        self.settings = settings if settings is not None else get_settings()

    def add_tool(self, provider_type: type, instance: Any = None) -> list[str]:
        """Register a provider class's methods as tools."""
        return self.registry.register(provider_type, instance=instance)

    def get_service(self, service_type: type) -> Any | None:
        if service_type is McpServer or service_type is type(self):
            return self
        if self.services is None:
            return None
        return self.services.get_service(service_type)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def process(
        self, request: JsonRpcRequest | None, context: McpContext
    ) -> JsonRpcResponse:
        """
        Handle one request and build its response envelope.

        Every failure is folded into the envelope's error, except a missing
        request, which raises MalformedRequestError.
        """
        if request is None:
            raise MalformedRequestError()

        result, error = self.dispatch(request, context)
        if error is not None:
            return JsonRpcResponse(id=request.id, error=JsonRpcError(**error))
        if isinstance(result, JsonRpcResponse):
            return result
        return JsonRpcResponse(id=request.id, result=result)

    def dispatch(
        self, request: JsonRpcRequest, context: McpContext
    ) -> tuple[Any | None, dict[str, Any] | None]:
        """
        Dispatch a request to the appropriate handler.

        Returns (result, error) tuple. One will be None.
        """
        handlers = {
            "initialize": self.handle_initialize,
            "notifications/initialized": self.handle_initialize,
            "tools/list": self.handle_tools_list,
            "tools/call": self.handle_tools_call,
        }

        try:
            handler = handlers.get(request.method)
            if handler is None:
                raise MethodNotFoundError(request.method)
            return handler(context, request), None
        except McpError as e:
            logger.warning(f"Error handling method {request.method}: {e.message}")
            return None, make_error_data(e.code, e.message)
        except Exception as e:
            logger.exception(f"Error handling method {request.method}")
            return None, make_error_data(INTERNAL_SERVER_ERROR, str(e))

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def handle_initialize(
        self, context: McpContext, request: JsonRpcRequest
    ) -> InitializeResult:
        """Handle initialize and notifications/initialized."""
        session_id = context.session_id
        if not session_id:
            session_id = uuid.uuid4().hex[:16]
        logger.debug(f"Initializing session {session_id}")

        if isinstance(request.params, dict):
            try:
                init_params = InitializeParams(**request.params)
                logger.info(
                    f"Client {init_params.clientInfo.name} {init_params.clientInfo.version} "
                    f"requested protocol {init_params.protocolVersion}"
                )
            except ValidationError as e:
                logger.debug(f"Ignoring invalid initialize params: {e}")

        return InitializeResult(
            protocolVersion=PROTOCOL_VERSION,
            capabilities=Capabilities(tools={"listChanged": True}),
            serverInfo=ServerInfo(
                name=self.settings.server_name,
                version=self.settings.server_version,
            ),
        )

    def handle_tools_list(
        self, context: McpContext, request: JsonRpcRequest
    ) -> ToolsListResult:
        """Handle the tools/list request."""
        self._echo_session_id(context)
        return ToolsListResult(tools=self.registry.list_tools())

    def handle_tools_call(
        self,
        context: McpContext,
        request: JsonRpcRequest,
        services: ServiceProvider | None = None,
    ) -> ToolCallResult:
        """Handle the tools/call request."""
        if request.params is None:
            raise McpError("Tool call parameters cannot be null.", code=BAD_REQUEST)

        self._echo_session_id(context)

        call_params = ToolCallParams.model_validate(request.params)
        descriptor = self.registry.get(call_params.name)
        if descriptor is None:
            raise ToolNotFoundError(call_params.name)

        if services is None:
            services = context.services if context.services is not None else self
        instance = descriptor.resolve_instance(services)

        progress = ProgressReporter(
            call_params.meta.progressToken if call_params.meta else None,
            sink=context.notify,
        )
        args, kwargs = bind_arguments(descriptor, call_params.arguments or {}, progress)

        logger.info(f"Calling tool: {descriptor.name}")
        value = self.invoker.invoke(descriptor.func, instance, args, kwargs)

        text = "" if value is None else str(value)
        return ToolCallResult(content=[TextContent(text=text)])

    @staticmethod
    def _echo_session_id(context: McpContext) -> None:
        session_id = context.session_id
        if session_id is not None:
            context.set_response(SESSION_HEADER, session_id)
