"""Utility modules: structured logging."""

from toolrpc.utils.logging import setup_logging, get_logger, set_request_id, set_session_id

__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_session_id",
]
