"""
Daemon process supervision
"""
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import psutil

from .managed_process import (
    DelegateResult,
    ManagedProcess,
    is_process_alive,
    terminate_process,
)
from .state import FileStateStore, StateStore, SupervisorState
from .utils.error_handler import (
    DelegateError,
    LaunchFailedError,
    SentinelWriteError,
    SupervisorError,
    handle_error,
)
from .utils.logger import get_logger

logger = get_logger(__name__)


class DaemonState(str, Enum):
    """Lifecycle of the tracked process"""
    ABSENT = "absent"
    STARTING = "starting"
    RUNNING = "running"
    CRASHED = "crashed"


class StartOutcome(str, Enum):
    STARTED = "started"
    ALREADY_RUNNING = "already_running"


@dataclass
class StartResult:
    outcome: StartOutcome
    process_id: int
    log_file: Path
    pid_file: Path


@dataclass
class StatusReport:
    """Sentinel cross-check plus the managed CLI's own status output"""
    process_id: Optional[int]
    running: bool
    delegate: Optional[DelegateResult] = None
    delegate_error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class DaemonSupervisor:
    """Lifecycle of one managed daemon process tracked by a PID sentinel"""

    def __init__(
        self,
        store: StateStore,
        process: ManagedProcess,
        log_file: Path,
        launch_grace_interval: float = 2.0,
        stop_timeout: float = 10.0,
        status_args=("status",),
        stop_args=("kill",),
        liveness: Callable[[int], bool] = is_process_alive,
        terminate: Callable[[int, float], bool] = terminate_process,
        sleep: Callable[[float], None] = time.sleep,
        poll_interval: float = 0.5,
    ):
        self.store = store
        self.process = process
        self.log_file = log_file
        self.launch_grace_interval = launch_grace_interval
        self.stop_timeout = stop_timeout
        self.status_args = list(status_args)
        self.stop_args = list(stop_args)
        self.poll_interval = poll_interval
        self._is_alive = liveness
        self._terminate = terminate
        self._sleep = sleep
        self.state = DaemonState.ABSENT

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "DaemonSupervisor":
        return cls(
            store=FileStateStore(settings.get_pid_file()),
            process=ManagedProcess(settings.managed_cli, list(settings.start_args)),
            log_file=settings.get_log_file(),
            launch_grace_interval=settings.launch_grace_interval,
            stop_timeout=settings.stop_timeout,
            status_args=settings.status_args,
            stop_args=settings.stop_args,
            **kwargs,
        )

    def _validated_pid(self) -> Optional[int]:
        """Recorded PID if it is alive; a stale record is removed"""
        record = self.store.load()
        if record is None:
            self.state = DaemonState.ABSENT
            return None

        pid = record.process_id
        if pid is not None and self._is_alive(pid):
            self.state = DaemonState.RUNNING
            return pid

        if pid is None:
            logger.warning("Unreadable PID file found. Cleaning up...")
        else:
            logger.warning(f"Stale PID file found (PID {pid} is not running). Cleaning up...")
        self.store.clear()
        self.state = DaemonState.ABSENT
        return None

    def get_pid(self) -> Optional[int]:
        """PID of the live tracked process, if any"""
        return self._validated_pid()

    def current_state(self) -> DaemonState:
        self._validated_pid()
        return self.state

    def start(self) -> StartResult:
        """Start the daemon unless a live one is already tracked"""
        with self.store.lock():
            pid = self._validated_pid()
            if pid is not None:
                logger.warning(f"Daemon is already running with PID {pid}.")
                return StartResult(StartOutcome.ALREADY_RUNNING, pid, self.log_file, Path(self.store.location))

            logger.info("Starting managed daemon in the background...")
            self.state = DaemonState.STARTING
            try:
                pid = self.process.launch(self.log_file)
            except LaunchFailedError:
                self.state = DaemonState.CRASHED
                raise

            try:
                self.store.save(SupervisorState(process_id=pid))
            except OSError as e:
                logger.error(f"Could not record PID {pid}, terminating it: {e}")
                self._terminate(pid, self.stop_timeout)
                self.state = DaemonState.CRASHED
                raise SentinelWriteError(
                    f"Failed to write PID file {self.store.location}: {e}", Path(self.store.location)
                ) from e

            self._sleep(self.launch_grace_interval)

            if not self._is_alive(pid):
                self.store.clear()
                self.state = DaemonState.CRASHED
                raise LaunchFailedError(
                    f"Failed to start daemon (PID {pid} exited). Check {self.log_file}.", self.log_file
                )

            self.state = DaemonState.RUNNING
            logger.info(f"Daemon started. Logs: {self.log_file}, PID: {self.store.location}")
            return StartResult(StartOutcome.STARTED, pid, self.log_file, Path(self.store.location))

    def status(self) -> StatusReport:
        """Relay the managed CLI's status and cross-check the sentinel"""
        pid = self._validated_pid()
        report = StatusReport(process_id=pid, running=pid is not None)

        try:
            report.delegate = self.process.run(self.status_args)
        except DelegateError as e:
            handle_error(e, "status")
            report.delegate_error = e.message

        if pid is not None:
            report.details = ServiceStatus(pid).get_status_info()
        return report

    def stop(self, force: bool = False) -> bool:
        """Ask the managed CLI to terminate, then wait for the tracked PID.

        Returns True once no tracked process is alive.
        """
        pid = self._validated_pid()

        logger.info("Requesting daemon shutdown")
        delegated = True
        try:
            self.process.run(self.stop_args)
        except DelegateError as e:
            handle_error(e, "stop")
            delegated = False

        if pid is None:
            return True
        if not delegated and not force:
            return False

        waited = 0.0 if delegated else self.stop_timeout
        while waited < self.stop_timeout:
            if not self._is_alive(pid):
                break
            self._sleep(self.poll_interval)
            waited += self.poll_interval
        else:
            if self._is_alive(pid):
                if not force:
                    logger.warning(f"Daemon (PID {pid}) is still running after {self.stop_timeout}s")
                    return False
                logger.warning(f"Daemon (PID {pid}) did not exit in time, terminating it")
                if not self._terminate(pid, self.stop_timeout):
                    return False

        logger.info(f"Daemon (PID {pid}) stopped")
        self.store.clear()
        self.state = DaemonState.ABSENT
        return True

    def restart(self, force: bool = False) -> StartResult:
        logger.info("Restarting daemon")
        if not self.stop(force=force):
            raise SupervisorError("Existing daemon did not stop; not restarting")
        return self.start()


class ServiceStatus:
    """Details about a live daemon process"""

    def __init__(self, pid: int):
        self.pid = pid

    def get_status_info(self) -> dict:
        try:
            process = psutil.Process(self.pid)
            with process.oneshot():
                return {
                    'uptime': self._format_uptime(time.time() - process.create_time()),
                    'memory_usage': f"{process.memory_info().rss / 1024 / 1024:.1f} MB",
                    'cpu_usage': f"{process.cpu_percent(interval=0.1):.1f}%",
                    'command': " ".join(process.cmdline()),
                }
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            logger.debug(f"Process details unavailable for PID {self.pid}: {e}")
            return {}

    @staticmethod
    def _format_uptime(uptime_seconds: float) -> str:
        hours = int(uptime_seconds // 3600)
        minutes = int((uptime_seconds % 3600) // 60)
        seconds = int(uptime_seconds % 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
