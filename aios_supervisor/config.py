"""
Configuration management.

Settings are loaded from ``AIOS_``-prefixed environment variables (and an
optional ``.env`` file) through Pydantic Settings and validated on load.
"""

from pathlib import Path
from typing import Optional, List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from enum import Enum


DEFAULT_MODEL = "hf:TheBloke/Mistral-7B-Instruct-v0.1-GGUF:mistral-7b-instruct-v0.1.Q4_K_S.gguf"


class LogLevel(str, Enum):
    """Log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Supervisor settings"""
    model_config = SettingsConfigDict(
        env_prefix="AIOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Managed CLI
    managed_cli: str = Field(default="aios-cli", description="Managed CLI executable")
    start_args: List[str] = Field(default_factory=lambda: ["start"], description="Arguments selecting the daemon mode")
    status_args: List[str] = Field(default_factory=lambda: ["status"], description="Status subcommand")
    stop_args: List[str] = Field(default_factory=lambda: ["kill"], description="Terminate subcommand")

    # Sentinel and log sink
    state_dir: Path = Field(default_factory=Path.home, description="Directory holding the PID and log files")
    pid_file_name: str = Field(default="aios-daemon.pid", description="PID sentinel file name")
    log_file_name: str = Field(default="aios-daemon.log", description="Managed process log file name")

    # Process lifecycle
    launch_grace_interval: float = Field(default=2.0, description="Seconds to wait before the post-launch liveness check")
    stop_timeout: float = Field(default=10.0, description="Seconds to wait for the daemon to exit after a stop request")

    # Hive / models
    key_file: Path = Field(default=Path("my.pem"), description="Private key file passed to hive import-keys")
    default_model: str = Field(default=DEFAULT_MODEL, description="Model offered by 'models add'")

    # Logging
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    logs_dir: Optional[Path] = Field(default=None, description="Supervisor log directory")

    @field_validator("launch_grace_interval", "stop_timeout")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @field_validator("managed_cli")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("managed_cli must not be empty")
        return value.strip()

    def get_pid_file(self) -> Path:
        """PID sentinel file path"""
        return self.state_dir / self.pid_file_name

    def get_log_file(self) -> Path:
        """Managed process log file path"""
        return self.state_dir / self.log_file_name

    def get_logs_dir(self) -> Path:
        """Supervisor's own log directory"""
        if self.logs_dir is not None:
            return self.logs_dir
        return Path.home() / ".cache" / "hyperspace" / "kernel-logs"

    def ensure_directories(self):
        """Create the directories the supervisor writes into"""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.get_logs_dir().mkdir(parents=True, exist_ok=True)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Return the global settings instance.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.ensure_directories()
    return _settings


def reload_settings() -> Settings:
    """
    Reload settings from the environment.

    Returns:
        New Settings instance
    """
    global _settings
    _settings = Settings()
    _settings.ensure_directories()
    return _settings
