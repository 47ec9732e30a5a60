"""Argument binding and tool invocation."""

import inspect
import logging
from typing import Any, Callable, Protocol

from pydantic import ConfigDict, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from toolrpc.mcp.errors import InvalidArgumentsError
from toolrpc.mcp.progress import ProgressReporter
from toolrpc.mcp.registry import ToolDescriptor
from toolrpc.mcp.schema import is_progress_parameter, tool_parameters

logger = logging.getLogger(__name__)

# Numbers sent for text parameters are accepted in their string form
_TEXT_ADAPTER = TypeAdapter(str, config=ConfigDict(coerce_numbers_to_str=True))


class MethodInvoker(Protocol):
    """Executes a tool function with already bound arguments."""

    def invoke(
        self,
        func: Callable,
        instance: Any,
        args: list[Any],
        kwargs: dict[str, Any],
    ) -> Any: ...


class DefaultInvoker:
    """Calls the function directly on the calling thread."""

    def invoke(
        self,
        func: Callable,
        instance: Any,
        args: list[Any],
        kwargs: dict[str, Any],
    ) -> Any:
        if instance is not None:
            return func(instance, *args, **kwargs)
        return func(*args, **kwargs)


def _convert(tool_name: str, param_name: str, annotation: Any, value: Any) -> Any:
    if annotation is Any:
        return value
    try:
        adapter = _TEXT_ADAPTER if annotation is str else TypeAdapter(annotation)
    except PydanticSchemaGenerationError:
        # Arbitrary classes are passed through as received
        return value
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise InvalidArgumentsError(
            f"Invalid value for argument '{param_name}' of tool '{tool_name}': "
            f"{e.errors()[0]['msg']}"
        ) from e


def bind_arguments(
    descriptor: ToolDescriptor,
    arguments: dict[str, Any],
    progress: ProgressReporter | None = None,
) -> tuple[list[Any], dict[str, Any]]:
    """
    Match caller arguments to a tool's parameters by name.

    Progress parameters receive the given reporter (or a fresh one) and
    are never taken from arguments. Missing required arguments and values
    that cannot be converted to the annotated type raise
    InvalidArgumentsError. Unknown argument names are ignored.

    Returns:
        Positional and keyword arguments for the invoker.
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    known: set[str] = set()

    for param, annotation in tool_parameters(descriptor.func, bound=descriptor.bound):
        known.add(param.name)
        if is_progress_parameter(annotation):
            value = progress or ProgressReporter()
        elif param.name in arguments:
            value = _convert(descriptor.name, param.name, annotation, arguments[param.name])
        elif param.default is inspect.Parameter.empty:
            raise InvalidArgumentsError(
                f"Missing required argument '{param.name}' for tool '{descriptor.name}'."
            )
        elif param.kind is inspect.Parameter.POSITIONAL_ONLY:
            value = param.default
        else:
            continue

        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            args.append(value)
        else:
            kwargs[param.name] = value

    unknown = [key for key in arguments if key not in known]
    if unknown:
        logger.debug(f"Ignoring unknown arguments for tool {descriptor.name}: {unknown}")

    return args, kwargs
