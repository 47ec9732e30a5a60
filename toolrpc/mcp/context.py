"""Transport-neutral request context and service lookup."""

from typing import Any, Callable, Mapping, MutableMapping, Protocol

# Header carrying the caller's session correlation token
SESSION_HEADER = "Mcp-Session-Id"


class ServiceProvider(Protocol):
    """Anything that can resolve an instance for a requested type."""

    def get_service(self, service_type: type) -> Any | None: ...


class ServiceContainer:
    """Type-keyed service locator, optionally chained to a parent provider."""

    def __init__(self, parent: ServiceProvider | None = None):
        self._services: dict[type, Any] = {}
        self.parent = parent

    def add_service(self, instance: Any, service_type: type | None = None) -> None:
        """Register an instance under its own type or an explicit one."""
        self._services[service_type or type(instance)] = instance

    def get_service(self, service_type: type) -> Any | None:
        service = self._services.get(service_type)
        if service is None and self.parent is not None:
            return self.parent.get_service(service_type)
        return service


class McpContext:
    """
    Per-request context handed to the dispatcher by a transport adapter.

    get_request reads a request header (None when absent), set_response writes
    a response header, and services resolves tool-owning instances.
    """

    def __init__(
        self,
        get_request: Callable[[str], str | None],
        set_response: Callable[[str, str], None],
        services: ServiceProvider | None = None,
        host_context: Any = None,
        notify: Callable[[Any], None] | None = None,
    ):
        self.get_request = get_request
        self.set_response = set_response
        self.services = services
        self.host_context = host_context
        self.notify = notify

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        response_headers: MutableMapping[str, str],
        services: ServiceProvider | None = None,
        host_context: Any = None,
    ) -> "McpContext":
        """Build a context reading from one mapping and writing to another."""

        def set_response(key: str, value: str) -> None:
            response_headers[key] = value

        return cls(
            get_request=headers.get,
            set_response=set_response,
            services=services,
            host_context=host_context,
        )

    @property
    def session_id(self) -> str | None:
        """The session id supplied by the caller, if any."""
        return self.get_request(SESSION_HEADER)
