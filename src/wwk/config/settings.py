"""Centralized configuration for the reporting core.

Loads configuration from a .env file and the environment and provides
typed access to settings.

Variables
---------
WWK_DEFAULT_TZ       IANA timezone for day/hour reports (default: UTC)
WWK_INCLUDE_TITLES   Include window titles in exports (default: true)
WWK_LOG_LEVEL        Loguru level (default: INFO)
WWK_LOG_FILE         Optional JSONL log file
WWK_MACHINE_ID       Report identity: machine id
WWK_USERNAME         Report identity: user name
WWK_UID              Report identity: numeric uid
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path

from ..core.time import InvalidTimezoneError, resolve_timezone
from ..core.validation import SegmentValidationError
from ..observability.loguru_config import configure_loguru
from ..timeline.segments import ReportIdentity

__all__ = [
    "ConfigError",
    "Settings",
    "get_settings",
    "load_env_file",
    "load_settings",
    "parse_bool",
]

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class Settings:
    """Settings for report generation.

    Attributes
    ----------
    default_timezone : str
        Timezone used for local day/hour boundaries
    include_titles : bool
        Whether exports carry window titles
    log_level : str
        Logging level
    log_file : Path | None
        Log file path
    machine_id : str | None
        Identity: machine id
    username : str | None
        Identity: user name
    uid : int | None
        Identity: numeric uid
    """

    default_timezone: str = "UTC"
    include_titles: bool = True
    log_level: str = "INFO"
    log_file: Path | None = None
    machine_id: str | None = None
    username: str | None = None
    uid: int | None = None

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.log_file and isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)

        try:
            resolve_timezone(self.default_timezone)
        except InvalidTimezoneError as exc:
            raise ConfigError(
                f"WWK_DEFAULT_TZ is not a known timezone: {self.default_timezone!r}. "
                "Use an IANA name such as Europe/Brussels or America/New_York"
            ) from exc

        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError(f"WWK_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level!r}")

    @property
    def timezone(self) -> tzinfo:
        """Resolved default timezone."""
        return resolve_timezone(self.default_timezone)

    def identity(self) -> ReportIdentity:
        """Report identity from WWK_MACHINE_ID / WWK_USERNAME / WWK_UID.

        Raises
        ------
        ConfigError
            If any identity variable is missing or invalid
        """
        missing = [
            name
            for name, value in (
                ("WWK_MACHINE_ID", self.machine_id),
                ("WWK_USERNAME", self.username),
                ("WWK_UID", self.uid),
            )
            if value is None
        ]
        if missing:
            raise ConfigError(f"Report identity is incomplete; missing: {', '.join(missing)}")

        try:
            return ReportIdentity(machine_id=self.machine_id, username=self.username, uid=self.uid)
        except SegmentValidationError as exc:
            raise ConfigError(f"Invalid report identity: {exc}") from exc

    def configure_logging(self) -> None:
        """Install loguru sinks for this configuration."""
        configure_loguru(log_file=self.log_file, level=self.log_level)

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> Settings:
        """Load settings from environment.

        Loads from .env file if present, then reads os.environ.

        Parameters
        ----------
        env_file
            Path to .env file (default: .env in current directory)

        Raises
        ------
        ConfigError
            If settings are invalid
        """
        if env_file is None:
            env_file = Path(".env")

        if isinstance(env_file, str):
            env_file = Path(env_file)

        if env_file.exists():
            load_env_file(env_file)

        try:
            uid = os.environ.get("WWK_UID")
            return cls(
                default_timezone=os.environ.get("WWK_DEFAULT_TZ", "UTC"),
                include_titles=parse_bool(os.environ.get("WWK_INCLUDE_TITLES", "true")),
                log_level=os.environ.get("WWK_LOG_LEVEL", "INFO"),
                log_file=Path(os.environ["WWK_LOG_FILE"]) if "WWK_LOG_FILE" in os.environ else None,
                machine_id=os.environ.get("WWK_MACHINE_ID"),
                username=os.environ.get("WWK_USERNAME"),
                uid=int(uid) if uid is not None else None,
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc


def parse_bool(value: str) -> bool:
    """Parse a boolean environment value (true/false, 1/0, yes/no, on/off)."""
    normalized = value.strip().lower()
    if normalized in ("true", "1", "yes", "on"):
        return True
    if normalized in ("false", "0", "no", "off", ""):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def load_env_file(env_file: Path) -> None:
    """Load environment variables from .env file.

    Existing environment variables are overwritten.

    Parameters
    ----------
    env_file
        Path to .env file
    """
    with open(env_file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()

            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue

            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()

                # Remove quotes
                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]

                os.environ[key] = value


# Global settings instance
_settings: Settings | None = None


def load_settings(env_file: Path | str | None = None) -> Settings:
    """Load (or reload) global settings.

    Parameters
    ----------
    env_file
        Path to .env file

    Returns
    -------
    Settings
        Loaded settings
    """
    global _settings
    _settings = Settings.from_env(env_file)
    return _settings


def get_settings() -> Settings:
    """Get global settings, loading them from the environment on first use."""
    if _settings is None:
        return load_settings()
    return _settings
