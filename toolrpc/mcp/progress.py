"""Out-of-band progress reporting for running tools."""

import logging
from typing import Callable

from toolrpc.mcp.models import ProgressNotification, ProgressParams, ProgressValue

logger = logging.getLogger(__name__)

ProgressSink = Callable[[ProgressNotification], None]


class ProgressReporter:
    """
    Handed to tools that declare a ProgressReporter parameter.

    Such parameters never appear in a tool's input schema and are never
    bound from caller arguments.
    """

    def __init__(
        self,
        progress_token: str | int | None = None,
        sink: ProgressSink | None = None,
    ):
        self.progress_token = progress_token
        self.sink = sink
        self.last: ProgressValue | None = None

    def report(self, progress: int, total: int = 0, message: str = "") -> None:
        """Publish a progress update."""
        self.last = ProgressValue(progress=progress, total=total, message=message)
        notification = ProgressNotification(
            params=ProgressParams(
                progressToken=self.progress_token,
                progress=progress,
                total=total,
                message=message,
            )
        )
        if self.sink is None:
            logger.debug(
                f"Progress {progress}/{total} for token {self.progress_token}: {message}"
            )
            return
        self.sink(notification)
