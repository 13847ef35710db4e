"""
Logging system.

Loguru routes every record to a Rich console handler and to files:
- aios_supervisor.log: every level, rotated at 10 MB
- errors.log: ERROR and above

The managed process writes to its own log sink; these files only hold the
supervisor's records.
"""

import sys
from pathlib import Path
from typing import Optional
from loguru import logger
from rich.console import Console
from rich.logging import RichHandler


class SupervisorLogger:
    """Logger owner for the supervisor"""

    def __init__(self, log_dir: Optional[Path] = None, level: str = "INFO"):
        """
        Args:
            log_dir: directory for the log files (default: ~/.cache/hyperspace/kernel-logs)
            level: minimum level for the console sink
        """
        self.console = Console(stderr=True)
        self.level = level

        if log_dir is None:
            self.log_dir = Path.home() / ".cache" / "hyperspace" / "kernel-logs"
        else:
            self.log_dir = log_dir

        self.log_dir.mkdir(parents=True, exist_ok=True)

        # Drop whatever was configured before
        logger.remove()
        logger.configure(extra={"component": "aios_supervisor"})

        self._setup_logging()

    def _setup_logging(self):
        """Register sinks"""

        # 1. Console (Rich)
        logger.add(
            sink=RichHandler(console=self.console, show_path=False, markup=False),
            format="<cyan>{extra[component]}</cyan> | {message}",
            level=self.level,
            colorize=False,
        )

        # 2. Full log file
        logger.add(
            sink=self.log_dir / "aios_supervisor.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]}:{function}:{line} | {message}",
            level="DEBUG",
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            enqueue=True
        )

        # 3. Error log file
        logger.add(
            sink=self.log_dir / "errors.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]}:{function}:{line} | {message}",
            level="ERROR",
            rotation="5 MB",
            retention="90 days",
            compression="zip",
            enqueue=True
        )

    def get_logger(self, name: str = "aios_supervisor"):
        """
        Return a logger bound to a component name.

        Args:
            name: component (module) name

        Returns:
            bound loguru logger
        """
        return logger.bind(component=name)


_logger_instance: Optional[SupervisorLogger] = None
_bootstrapped = False


def setup_logging(log_dir: Optional[Path] = None, level: str = "INFO") -> SupervisorLogger:
    """
    Initialize (or re-initialize) the global logging system.

    Args:
        log_dir: log directory
        level: console log level

    Returns:
        SupervisorLogger instance
    """
    global _logger_instance
    _logger_instance = SupervisorLogger(log_dir, level)
    return _logger_instance


def get_logger(name: str = "aios_supervisor"):
    """
    Return a logger for ``name``, initializing logging on first use.

    Loguru's bound loggers share the global sinks, so module-level loggers
    created before ``setup_logging`` pick up later reconfiguration.
    """
    global _bootstrapped
    if _logger_instance is None and not _bootstrapped:
        # stderr only until setup_logging() picks a log directory
        logger.remove()
        logger.configure(extra={"component": "aios_supervisor"})
        logger.add(sys.stderr, level="INFO", format="{level: <8} | {extra[component]} | {message}")
        _bootstrapped = True
    return logger.bind(component=name)
