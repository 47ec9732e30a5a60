"""JSON Schema inference from tool function signatures."""

import inspect
import typing
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable

from toolrpc.mcp.progress import ProgressReporter

_NUMBER_TYPES = (float, Decimal, Fraction)


def _is_plain_class(annotation: Any) -> bool:
    # list[int] and friends pass isinstance(..., type) on older interpreters
    return isinstance(annotation, type) and typing.get_origin(annotation) is None


def json_type(annotation: Any) -> str:
    """Map a Python type annotation to a JSON Schema primitive type name."""
    if not _is_plain_class(annotation):
        return "object"
    # bool is a subclass of int
    if issubclass(annotation, bool):
        return "boolean"
    if issubclass(annotation, int):
        return "integer"
    if issubclass(annotation, _NUMBER_TYPES):
        return "number"
    if issubclass(annotation, str):
        return "string"
    return "object"


def is_progress_parameter(annotation: Any) -> bool:
    """Check whether a parameter is the out-of-band progress side channel."""
    return _is_plain_class(annotation) and issubclass(annotation, ProgressReporter)


def tool_parameters(
    func: Callable, bound: bool = False
) -> list[tuple[inspect.Parameter, Any]]:
    """
    Return the bindable parameters of a tool function with resolved annotations.

    Args:
        func: The tool function.
        bound: True when the first positional parameter receives the owning
            instance (self) and is not caller-supplied.

    Returns:
        (parameter, annotation) pairs in declaration order. Variadic
        parameters are dropped; progress parameters are kept so the
        invoker can inject them.
    """
    try:
        hints = typing.get_type_hints(func)
    except (NameError, TypeError):
        hints = {}

    params = list(inspect.signature(func).parameters.values())
    if bound and params:
        params = params[1:]

    result = []
    for param in params:
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        annotation = hints.get(param.name, param.annotation)
        if annotation is inspect.Parameter.empty:
            annotation = Any
        result.append((param, annotation))
    return result


def infer_schema(func: Callable, bound: bool = False) -> dict[str, Any]:
    """
    Infer the input schema of a tool from its signature.

    Every parameter without a default is required. Progress parameters are
    left out of both properties and required.
    """
    properties: dict[str, Any] = {}
    required: list[str] = []

    for param, annotation in tool_parameters(func, bound=bound):
        if is_progress_parameter(annotation):
            continue
        properties[param.name] = {"type": json_type(annotation)}
        if param.default is inspect.Parameter.empty:
            required.append(param.name)

    return {"type": "object", "properties": properties, "required": required}
