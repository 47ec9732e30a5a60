"""Tool registry for managing MCP tools."""

import importlib
import inspect
import logging
import threading
from typing import Any, Callable

from toolrpc.mcp.context import ServiceProvider
from toolrpc.mcp.models import Tool
from toolrpc.mcp.schema import infer_schema
from toolrpc.tools.base import get_tool_metadata

logger = logging.getLogger(__name__)


def to_snake_case(name: str) -> str:
    """
    Convert a method name to its external tool name.

    An underscore goes before every uppercase letter except the first
    character and letters that directly follow another uppercase letter,
    so GetTime becomes get_time and IOError becomes ioerror.
    """
    if not name:
        return name

    chars: list[str] = []
    for i, c in enumerate(name):
        if c.isupper():
            if i > 0 and not name[i - 1].isupper():
                chars.append("_")
            chars.append(c.lower())
        else:
            chars.append(c)
    return "".join(chars)


def _summary(func: Callable) -> str:
    doc = inspect.getdoc(func)
    if not doc:
        return ""
    return doc.strip().splitlines()[0].strip()


class ToolDescriptor:
    """A registered tool with its metadata and invocation target."""

    def __init__(
        self,
        name: str,
        description: str,
        func: Callable,
        provider_type: type | None = None,
        instance: Any = None,
        bound: bool = False,
    ):
        self.name = name
        self.description = description
        self.func = func
        self.provider_type = provider_type
        self.instance = instance
        self.bound = bound
        self.input_schema = infer_schema(func, bound=bound)

    def to_mcp_tool(self) -> Tool:
        """Convert to MCP Tool model for protocol responses."""
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )

    def resolve_instance(self, services: ServiceProvider | None = None) -> Any:
        """
        Find the object the tool method runs on.

        Returns None for plain functions and static methods. An instance
        bound at registration wins, then the service locator, then a fresh
        no-argument instance of the provider type.
        """
        if not self.bound:
            return None
        if self.instance is not None:
            return self.instance
        if services is not None:
            instance = services.get_service(self.provider_type)
            if instance is not None:
                return instance
        return self.provider_type()


class ToolRegistry:
    """
    Registry for MCP tools with plugin-style provider loading.

    Writers take a lock and publish a fresh dict; readers use whatever
    dict is current without locking.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._providers: set[str] = set()
        self._lock = threading.Lock()

    def _add(self, descriptor: ToolDescriptor) -> None:
        with self._lock:
            tools = dict(self._tools)
            if descriptor.name in tools:
                logger.warning(
                    f"Tool '{descriptor.name}' already registered, overwriting"
                )
            tools[descriptor.name] = descriptor
            self._tools = tools
        logger.info(f"Registered tool: {descriptor.name}")

    def register(self, provider_type: type, instance: Any = None) -> list[str]:
        """
        Register every public method of a provider class as a tool.

        Args:
            provider_type: The class to scan.
            instance: Optional object to bind the tools to. Without it the
                owning instance is resolved per call.

        Returns:
            The registered tool names, in declaration order.
        """
        names = []
        for attr_name, (func, bound) in self._scan(provider_type).items():
            metadata = get_tool_metadata(func) or {}
            if metadata.get("ignore"):
                continue
            if inspect.iscoroutinefunction(func):
                logger.warning(
                    f"Skipping coroutine method {provider_type.__name__}.{attr_name}: "
                    "tools must be synchronous"
                )
                continue
            descriptor = ToolDescriptor(
                name=metadata.get("name") or to_snake_case(attr_name),
                description=metadata.get("description") or _summary(func),
                func=func,
                provider_type=provider_type,
                instance=instance,
                bound=bound,
            )
            self._add(descriptor)
            names.append(descriptor.name)
        return names

    def register_function(
        self,
        func: Callable,
        name: str | None = None,
        description: str | None = None,
    ) -> str:
        """
        Register a plain function as a tool.

        Raises:
            TypeError: If func is a coroutine function.
        """
        if inspect.iscoroutinefunction(func):
            raise TypeError(f"Tool function {func.__name__} must be synchronous")
        metadata = get_tool_metadata(func) or {}
        descriptor = ToolDescriptor(
            name=name or metadata.get("name") or to_snake_case(func.__name__),
            description=description or metadata.get("description") or _summary(func),
            func=func,
        )
        self._add(descriptor)
        return descriptor.name

    @staticmethod
    def _scan(provider_type: type) -> dict[str, tuple[Callable, bool]]:
        """Collect public functions declared on a class and its bases."""
        found: dict[str, tuple[Callable, bool]] = {}
        for klass in reversed(provider_type.__mro__):
            if klass is object:
                continue
            for attr_name, attr in vars(klass).items():
                if attr_name.startswith("_"):
                    continue
                if isinstance(attr, staticmethod):
                    found[attr_name] = (attr.__func__, False)
                elif inspect.isfunction(attr):
                    found[attr_name] = (attr, True)
                else:
                    found.pop(attr_name, None)
        return found

    def get(self, name: str) -> ToolDescriptor | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        """List all registered tools as MCP Tool models."""
        return [tool.to_mcp_tool() for tool in self._tools.values()]

    def load_provider(self, provider_name: str) -> bool:
        """
        Load a provider module and register its tools.

        Providers are expected to be in toolrpc/tools/<provider_name>/
        and have a register_tools(registry) function.
        """
        if provider_name in self._providers:
            logger.debug(f"Provider '{provider_name}' already loaded")
            return True

        module_path = f"toolrpc.tools.{provider_name}.tools"
        try:
            module = importlib.import_module(module_path)
            if hasattr(module, "register_tools"):
                module.register_tools(self)
                with self._lock:
                    self._providers.add(provider_name)
                logger.info(f"Loaded provider: {provider_name}")
                return True
            else:
                logger.warning(
                    f"Provider '{provider_name}' has no register_tools function"
                )
                return False
        except ImportError as e:
            logger.warning(f"Could not import provider '{provider_name}': {e}")
            return False
        except Exception as e:
            logger.error(f"Error loading provider '{provider_name}': {e}")
            return False

    def load_providers(self, provider_names: list[str]) -> dict[str, bool]:
        """Load multiple providers, returning success status for each."""
        results = {}
        for name in provider_names:
            results[name] = self.load_provider(name)
        return results

    @property
    def tool_count(self) -> int:
        """Return the number of registered tools."""
        return len(self._tools)

    @property
    def provider_count(self) -> int:
        """Return the number of loaded providers."""
        return len(self._providers)


# Global registry instance
_registry: ToolRegistry | None = None


def get_registry() -> ToolRegistry:
    """Get the global tool registry, creating it if necessary."""
    global _registry
    if _registry is None:
        _registry = ToolRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (useful for testing)."""
    global _registry
    _registry = None
