"""
Application configuration.

Settings are read from environment variables; a ``.env`` file in the working
directory is loaded first (existing variables win). See load_settings() for
the variables and their defaults.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Mapping, Optional

from dotenv import load_dotenv

ENV_DEVELOPMENT = "development"
ENV_PRODUCTION = "production"
VALID_ENVIRONMENTS = {ENV_DEVELOPMENT, ENV_PRODUCTION}

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
DEFAULT_MAX_TOTAL_SIZE = 50 * 1024 * 1024  # 50 MB


class ConfigError(ValueError):
    """Raised when an environment variable holds an invalid value."""


@dataclass(frozen=True)
class Settings:
    app_name: str = "doozip"
    app_version: str = "1.0.0"
    environment: str = ENV_DEVELOPMENT
    server_host: str = "localhost"
    server_port: int = 8080
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_total_size: int = DEFAULT_MAX_TOTAL_SIZE
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = field(default="", repr=False)
    smtp_sender: str = ""
    cors_origins: List[str] = field(default_factory=list)

    @property
    def address(self) -> str:
        return f"{self.server_host}:{self.server_port}"

    def validate(self) -> None:
        if not self.app_name:
            raise ConfigError("APP_NAME is required")
        if not self.app_version:
            raise ConfigError("APP_VERSION is required")
        if self.environment not in VALID_ENVIRONMENTS:
            raise ConfigError(f"invalid ENVIRONMENT: {self.environment!r}")
        if not 1 <= self.server_port <= 65535:
            raise ConfigError(f"invalid SERVER_PORT: {self.server_port}")
        if not 1 <= self.smtp_port <= 65535:
            raise ConfigError(f"invalid SMTP_PORT: {self.smtp_port}")
        if self.max_file_size <= 0:
            raise ConfigError("MAX_FILE_SIZE must be positive")
        if self.max_total_size < self.max_file_size:
            raise ConfigError("MAX_TOTAL_SIZE must be at least MAX_FILE_SIZE")


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build and validate Settings.

    Args:
        environ: Mapping to read from. Defaults to os.environ after loading
            ``.env``; tests pass a plain dict.

    Raises:
        ConfigError: if any value is malformed or out of range.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    username = environ.get("SMTP_USERNAME", "").strip()
    cors_env = environ.get("CORS_ORIGINS", "").strip()

    settings = Settings(
        app_name=environ.get("APP_NAME", "doozip").strip(),
        app_version=environ.get("APP_VERSION", "1.0.0").strip(),
        environment=environ.get("ENVIRONMENT", ENV_DEVELOPMENT).strip().lower(),
        server_host=environ.get("SERVER_HOST", "localhost").strip(),
        server_port=_get_int(environ, "SERVER_PORT", 8080),
        max_file_size=_get_int(environ, "MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE),
        max_total_size=_get_int(environ, "MAX_TOTAL_SIZE", DEFAULT_MAX_TOTAL_SIZE),
        smtp_host=environ.get("SMTP_HOST", "").strip(),
        smtp_port=_get_int(environ, "SMTP_PORT", 587),
        smtp_username=username,
        smtp_password=environ.get("SMTP_PASSWORD", ""),
        smtp_sender=environ.get("SMTP_SENDER", "").strip() or username,
        cors_origins=[o.strip() for o in cors_env.split(",") if o.strip()],
    )
    settings.validate()
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()
