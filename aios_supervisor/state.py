"""
Supervisor state persistence (PID sentinel)
"""
import fcntl
import os
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SupervisorState:
    """Last known belief about the managed process.

    ``process_id`` is None when the sentinel exists but is unreadable; such a
    record is handled like a stale one.
    """
    process_id: Optional[int] = None


class StateStore(ABC):
    """Storage for the single sentinel record"""

    @abstractmethod
    def load(self) -> Optional[SupervisorState]:
        """Return the stored state, or None when no record exists"""

    @abstractmethod
    def save(self, state: SupervisorState) -> None:
        """Persist ``state``, replacing any previous record"""

    @abstractmethod
    def clear(self) -> None:
        """Delete the record if present"""

    @abstractmethod
    def lock(self):
        """Context manager holding exclusive access to the record"""

    @property
    def location(self) -> str:
        return "<memory>"


class FileStateStore(StateStore):
    """Sentinel file whose whole content is the decimal PID"""

    def __init__(self, pid_file: Path):
        self.pid_file = pid_file
        self.lock_file = pid_file.with_name(pid_file.name + ".lock")

    @property
    def location(self) -> str:
        return str(self.pid_file)

    def load(self) -> Optional[SupervisorState]:
        try:
            raw = self.pid_file.read_text().strip()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            logger.warning(f"PID file is not valid text: {self.pid_file}")
            return SupervisorState(process_id=None)

        try:
            pid = int(raw)
        except ValueError:
            logger.warning(f"PID file holds no valid PID: {self.pid_file} ({raw!r})")
            return SupervisorState(process_id=None)

        if pid <= 0:
            logger.warning(f"PID file holds a non-positive PID: {self.pid_file} ({pid})")
            return SupervisorState(process_id=None)
        return SupervisorState(process_id=pid)

    def save(self, state: SupervisorState) -> None:
        if state.process_id is None:
            raise ValueError("cannot persist a state without a process id")

        self.pid_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = self.pid_file.with_name(self.pid_file.name + ".tmp")
        with open(tmp_file, 'w') as f:
            f.write(str(state.process_id))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_file, self.pid_file)
        logger.debug(f"PID file written: {self.pid_file} ({state.process_id})")

    def clear(self) -> None:
        try:
            self.pid_file.unlink()
            logger.debug(f"PID file removed: {self.pid_file}")
        except FileNotFoundError:
            pass

    @contextmanager
    def lock(self) -> Iterator[None]:
        self.lock_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.lock_file, 'a+') as fd:
            fcntl.flock(fd, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)


class MemoryStateStore(StateStore):
    """In-process store, used in tests and embedding"""

    def __init__(self, state: Optional[SupervisorState] = None):
        self.state = state
        self._lock = threading.Lock()

    def load(self) -> Optional[SupervisorState]:
        return self.state

    def save(self, state: SupervisorState) -> None:
        self.state = state

    def clear(self) -> None:
        self.state = None

    @contextmanager
    def lock(self) -> Iterator[None]:
        with self._lock:
            yield
