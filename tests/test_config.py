"""
Tests for Settings loading.
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from aios_supervisor import config
from aios_supervisor.config import DEFAULT_MODEL, Settings


def test_defaults_match_the_shell_installer(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = Settings(_env_file=None)

    assert settings.managed_cli == "aios-cli"
    assert settings.start_args == ["start"]
    assert settings.stop_args == ["kill"]
    assert settings.get_pid_file() == tmp_path / "aios-daemon.pid"
    assert settings.get_log_file() == tmp_path / "aios-daemon.log"
    assert settings.get_logs_dir() == tmp_path / ".cache" / "hyperspace" / "kernel-logs"
    assert settings.launch_grace_interval == 2.0
    assert settings.default_model == DEFAULT_MODEL


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("AIOS_STATE_DIR", str(tmp_path / "state"))
    monkeypatch.setenv("AIOS_START_ARGS", '["daemon", "--foreground"]')
    monkeypatch.setenv("AIOS_LAUNCH_GRACE_INTERVAL", "0.5")
    settings = Settings(_env_file=None)

    assert settings.get_pid_file() == Path(tmp_path / "state" / "aios-daemon.pid")
    assert settings.start_args == ["daemon", "--foreground"]
    assert settings.launch_grace_interval == 0.5


def test_negative_grace_interval_is_rejected(monkeypatch):
    monkeypatch.setenv("AIOS_LAUNCH_GRACE_INTERVAL", "-1")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached_and_reloadable(settings_env, monkeypatch):
    first = config.get_settings()

    assert config.get_settings() is first
    assert settings_env.is_dir()

    monkeypatch.setenv("AIOS_STOP_TIMEOUT", "1")
    reloaded = config.reload_settings()
    assert reloaded is not first
    assert reloaded.stop_timeout == 1.0
