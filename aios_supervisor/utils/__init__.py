"""Utilities

Logging and error handling shared across the supervisor.
"""

from .logger import (
    setup_logging,
    get_logger,
    SupervisorLogger
)

from .error_handler import (
    ErrorHandler,
    SupervisorError,
    LaunchFailedError,
    SentinelWriteError,
    DelegateError,
    handle_error,
)

__all__ = [
    # Logger
    "setup_logging",
    "get_logger",
    "SupervisorLogger",
    # Error Handler
    "ErrorHandler",
    "SupervisorError",
    "LaunchFailedError",
    "SentinelWriteError",
    "DelegateError",
    "handle_error",
]
