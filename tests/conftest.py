"""
Shared fixtures: isolated settings and a fake managed CLI script.
"""
import os
import stat
import textwrap

import pytest

from aios_supervisor import config


FAKE_CLI = textwrap.dedent("""\
    #!/bin/sh
    case "$1" in
      start)
        echo "daemon up"
        exec sleep 60
        ;;
      crash)
        echo "boom: missing keys"
        exit 1
        ;;
      status)
        echo "aios status: ok"
        ;;
      noisy-status)
        echo "status-on-stdout"
        echo "status-on-stderr" >&2
        ;;
      system-info)
        echo "system-info"
        echo "gpu: none detected" >&2
        ;;
      kill)
        if [ -f "$FAKE_PID_FILE" ]; then
          kill "$(cat "$FAKE_PID_FILE")"
        fi
        echo "killed"
        ;;
      broken)
        echo "no such subcommand" >&2
        exit 2
        ;;
      *)
        echo "$@"
        ;;
    esac
""")


@pytest.fixture
def fake_cli(tmp_path):
    path = tmp_path / "bin" / "fake-aios"
    path.parent.mkdir()
    path.write_text(FAKE_CLI)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def settings_env(tmp_path, monkeypatch, fake_cli):
    """Point every setting at tmp_path and reset the cached settings."""
    state_dir = tmp_path / "state"
    monkeypatch.setenv("AIOS_MANAGED_CLI", str(fake_cli))
    monkeypatch.setenv("AIOS_STATE_DIR", str(state_dir))
    monkeypatch.setenv("AIOS_LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("AIOS_LAUNCH_GRACE_INTERVAL", "0.3")
    monkeypatch.setenv("AIOS_STOP_TIMEOUT", "5")
    monkeypatch.setenv("AIOS_KEY_FILE", str(tmp_path / "my.pem"))
    monkeypatch.setenv("FAKE_PID_FILE", str(state_dir / "aios-daemon.pid"))
    monkeypatch.setattr(config, "_settings", None)
    yield state_dir
    _kill_leftover(state_dir / "aios-daemon.pid")


def _kill_leftover(pid_file):
    from aios_supervisor.managed_process import terminate_process

    try:
        pid = int(pid_file.read_text().strip())
    except (FileNotFoundError, ValueError):
        return
    if pid != os.getpid():
        terminate_process(pid, timeout=2)
