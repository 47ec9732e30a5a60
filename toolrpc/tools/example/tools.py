"""Example provider tools - demonstrates the tool implementation pattern."""

from datetime import datetime

from toolrpc.mcp.progress import ProgressReporter
from toolrpc.mcp.registry import ToolRegistry


class ExampleTools:
    """Small tools for checking that the server works end to end."""

    def get_time(self) -> str:
        """Returns the current local time."""
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def add(self, a: int, b: int) -> int:
        """Adds two integers."""
        return a + b

    def concat(self, text1: str, text2: str = "World") -> str:
        """Joins two strings with a space."""
        return f"{text1} {text2}"

    def echo(self, message: str) -> str:
        """Echoes back the provided message."""
        return message

    def count_to(self, n: int, progress: ProgressReporter) -> int:
        """Counts from 1 to n, reporting progress for every step."""
        for i in range(1, n + 1):
            progress.report(i, n, f"step {i}")
        return n


def register_tools(registry: ToolRegistry) -> None:
    """Register all example provider tools with the registry."""
    registry.register(ExampleTools)
