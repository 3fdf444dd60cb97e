import argparse
import os
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_PATH_ENV = "CONFIG_PATH"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when the configuration file cannot be resolved or parsed."""


class Settings(BaseSettings):
    """
    Application settings.

    Values are read from the dotenv-style config file passed to `load_settings`;
    environment variables with the same name take precedence over the file.
    """

    # =============================================================================
    # APPLICATION
    # =============================================================================
    ENV: str
    PROJECT_NAME: str = "Students API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # =============================================================================
    # SERVER
    # =============================================================================
    HTTP_SERVER_ADDRESS: str = "localhost:8082"
    SHUTDOWN_TIMEOUT: int = 5

    # =============================================================================
    # STORAGE
    # =============================================================================
    # Filesystem path of the SQLite database, or a full SQLAlchemy URL
    STORAGE_PATH: str

    # =============================================================================
    # DATABASE POOL SETTINGS
    # =============================================================================
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_ECHO_SQL: bool = False

    # =============================================================================
    # LOGGING
    # =============================================================================
    LOG_LEVEL: str = "INFO"

    @field_validator("HTTP_SERVER_ADDRESS")
    @classmethod
    def check_address(cls, v: str) -> str:
        """Address must look like host:port."""
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"invalid address {v!r}, expected host:port")
        return v

    @field_validator("STORAGE_PATH")
    @classmethod
    def check_storage_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("storage path must not be empty")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"invalid log level {v!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def host(self) -> str:
        return self.HTTP_SERVER_ADDRESS.rpartition(":")[0]

    @property
    def port(self) -> int:
        return int(self.HTTP_SERVER_ADDRESS.rpartition(":")[2])

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the configured storage location."""
        if "://" in self.STORAGE_PATH:
            return self.STORAGE_PATH
        return f"sqlite:///{self.STORAGE_PATH}"

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


def resolve_config_path(argv: Optional[List[str]] = None) -> Path:
    """
    Find the config file path.

    Priority:
    1. CONFIG_PATH environment variable
    2. --config command-line flag
    """
    config_path = os.environ.get(CONFIG_PATH_ENV, "")

    if not config_path:
        parser = argparse.ArgumentParser(description="Students API server")
        parser.add_argument("--config", default="", help="path to configuration file")
        args, _ = parser.parse_known_args(argv)
        config_path = args.config

    if not config_path:
        raise ConfigError("Config path is not set")

    path = Path(config_path)
    if not path.is_file():
        raise ConfigError(f"Config file not found at {path}")
    return path


def load_settings(argv: Optional[List[str]] = None) -> Settings:
    path = resolve_config_path(argv)
    try:
        return Settings(_env_file=path)
    except ValidationError as exc:
        raise ConfigError(f"Failed to read config {path}: {exc}") from exc
