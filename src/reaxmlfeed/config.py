"""
Centralized Configuration Module

Provides configuration classes and environment variable loading for all components.

Usage:
    from reaxmlfeed.config import get_config

    config = get_config()
    db_path = config.database.path
    api_port = config.api.port
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from reaxmlfeed.exceptions import ConfigurationError

# Load .env file if present
load_dotenv()


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable."""
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _get_project_root() -> Path:
    """Get the project root directory."""
    # config.py -> reaxmlfeed -> src -> project_root
    current = Path(__file__).resolve()
    return current.parent.parent.parent


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: str = field(default_factory=lambda: os.getenv(
        "REAXMLFEED_DB_PATH",
        str(_get_project_root() / "reaxmlfeed.db")
    ))

    def __post_init__(self):
        # Resolve relative paths
        if self.path != ":memory:" and not os.path.isabs(self.path):
            self.path = str(_get_project_root() / self.path)


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "REAXMLFEED_API_HOST", "127.0.0.1"
    ))
    port: int = field(default_factory=lambda: _env_int("REAXMLFEED_API_PORT", 5000))
    debug: bool = field(default_factory=lambda: os.getenv(
        "REAXMLFEED_DEBUG", "false"
    ).lower() in ("true", "1", "yes"))
    max_upload_mb: int = field(default_factory=lambda: _env_int("REAXMLFEED_MAX_UPLOAD_MB", 20))

    @property
    def max_content_length(self) -> int:
        """Maximum accepted request body in bytes."""
        return self.max_upload_mb * 1024 * 1024


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv(
        "REAXMLFEED_LOG_LEVEL", "INFO"
    ).upper())
    log_file: Optional[str] = field(default_factory=lambda: os.getenv(
        "REAXMLFEED_LOG_FILE"
    ))

    def __post_init__(self):
        # Validate log level
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level not in valid_levels:
            self.level = "INFO"


@dataclass
class Config:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The application configuration.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the configuration (useful for testing)."""
    global _config
    _config = None
