"""
Managed CLI adapter: launching, subcommands and liveness checks
"""
import shutil
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import psutil

from .utils.logger import get_logger
from .utils.error_handler import DelegateError, LaunchFailedError

logger = get_logger(__name__)


@dataclass
class DelegateResult:
    """Outcome of a managed CLI subcommand"""
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def is_process_alive(pid: int) -> bool:
    """Whether ``pid`` names a running (non-zombie) process"""
    try:
        process = psutil.Process(pid)
        return process.status() != psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        # Exists, owned by someone else
        return True


def terminate_process(pid: int, timeout: float = 5.0) -> bool:
    """SIGTERM ``pid``, then SIGKILL if it outlives ``timeout``"""
    try:
        process = psutil.Process(pid)
        process.terminate()
        try:
            process.wait(timeout=timeout)
        except psutil.TimeoutExpired:
            logger.warning(f"Process {pid} ignored SIGTERM, sending SIGKILL")
            process.kill()
            process.wait(timeout=timeout)
        return True
    except psutil.NoSuchProcess:
        return True
    except (psutil.AccessDenied, psutil.TimeoutExpired) as e:
        logger.error(f"Could not terminate process {pid}: {e}")
        return False


def _reap_child(proc: subprocess.Popen) -> None:
    # Waiting keeps an early exit from lingering as a zombie
    proc.wait()


@dataclass
class ManagedProcess:
    """The external executable the supervisor launches and talks to"""
    executable: str = "aios-cli"
    start_args: List[str] = field(default_factory=lambda: ["start"])

    def command(self, args: Sequence[str]) -> List[str]:
        return [self.executable, *args]

    def is_installed(self) -> bool:
        return shutil.which(self.executable) is not None

    def resolve(self) -> Optional[str]:
        return shutil.which(self.executable)

    def launch(self, log_file: Path) -> int:
        """Start the daemon mode detached, appending its output to ``log_file``.

        Returns the new process id.
        """
        log_file.parent.mkdir(parents=True, exist_ok=True)
        cmd = self.command(self.start_args)
        logger.info(f"Launching: {' '.join(cmd)}")

        with open(log_file, 'ab') as log:
            try:
                proc = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    start_new_session=True,
                    close_fds=True,
                )
            except OSError as e:
                raise LaunchFailedError(f"Could not execute {self.executable}: {e}", log_file) from e

        threading.Thread(target=_reap_child, args=(proc,), daemon=True).start()
        logger.debug(f"Launched PID {proc.pid}")
        return proc.pid

    def run(self, args: Sequence[str], capture: bool = True) -> DelegateResult:
        """Run a subcommand to completion.

        With ``capture=False`` the child shares this terminal (needed for
        interactive subcommands) and the result carries no output.
        """
        cmd = self.command(args)
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            completed = subprocess.run(
                cmd,
                capture_output=capture,
                text=True,
                check=False,
            )
        except OSError as e:
            raise DelegateError(f"Could not execute {self.executable}: {e}", cmd) from e

        result = DelegateResult(
            args=list(args),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if not result.ok:
            detail = result.stderr.strip() or result.stdout.strip()
            message = f"'{' '.join(cmd)}' exited with status {result.returncode}"
            if detail:
                message += f": {detail}"
            raise DelegateError(message, cmd, result.returncode)
        return result
