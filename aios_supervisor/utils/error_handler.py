"""
Error types and error handling helpers for the supervisor.
"""

from pathlib import Path
from typing import Optional, Sequence

from .logger import get_logger

logger = get_logger(__name__)


class SupervisorError(Exception):
    """Base error for supervisor operations"""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code or "SUPERVISOR_ERROR"
        super().__init__(self.message)


class LaunchFailedError(SupervisorError):
    """The managed process could not be launched or exited during the grace interval"""

    def __init__(self, message: str, log_file: Optional[Path] = None):
        self.log_file = log_file
        super().__init__(message, "LAUNCH_FAILED")


class SentinelWriteError(SupervisorError):
    """The PID sentinel could not be persisted after launch"""

    def __init__(self, message: str, pid_file: Optional[Path] = None):
        self.pid_file = pid_file
        super().__init__(message, "SENTINEL_WRITE_FAILED")


class DelegateError(SupervisorError):
    """A managed CLI subcommand failed or is unavailable"""

    def __init__(self, message: str, command: Sequence[str] = (), returncode: Optional[int] = None):
        self.command = list(command)
        self.returncode = returncode
        super().__init__(message, "DELEGATE_FAILED")


class ErrorHandler:
    """Logs errors at a level matching their severity"""

    def handle_error(self, error: Exception, context: str = "") -> None:
        if isinstance(error, DelegateError):
            logger.warning(f"Delegate failure [{error.error_code}] in {context}: {error.message}")
        elif isinstance(error, SupervisorError):
            logger.error(f"Supervisor error [{error.error_code}] in {context}: {error.message}")
        else:
            logger.error(f"Unexpected error in {context}: {error}")


# Global error handler
global_error_handler = ErrorHandler()


def handle_error(error: Exception, context: str = "") -> None:
    """Log ``error`` through the global handler"""
    global_error_handler.handle_error(error, context)
