"""Decorators for customizing how provider methods are exposed as tools."""

from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


def tool(
    name: str | None = None,
    description: str | None = None,
) -> Callable[[F], F]:
    """
    Decorator to override the exposed name or description of a tool.

    Usage:
        class Clock:
            @tool(name="now", description="Returns the current time")
            def get_time(self) -> str:
                ...

    Undecorated public methods are still registered; their name is the
    snake_case form of the method name and their description is the first
    line of the docstring.
    """
    def decorator(func: F) -> F:
        func._tool_metadata = {  # type: ignore[attr-defined]
            "name": name,
            "description": description,
        }
        return func

    return decorator


def ignore_tool(func: F) -> F:
    """Keep a public method out of the tool registry."""
    func._tool_metadata = {"ignore": True}  # type: ignore[attr-defined]
    return func


def get_tool_metadata(func: Callable) -> dict[str, Any] | None:
    """Get tool metadata from a decorated function."""
    return getattr(func, "_tool_metadata", None)
