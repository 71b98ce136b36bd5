"""
Configuration for ThreadNotes.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """Database backend configuration."""

    backend: str = "sqlite"
    path: str = "data/threadnotes.db"
    busy_timeout: float = 5.0


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            THREADNOTES_DB_BACKEND: Database backend (sqlite)
            THREADNOTES_DB_PATH: SQLite file path or :memory:
            THREADNOTES_DB_BUSY_TIMEOUT: Seconds to wait on a locked database
            THREADNOTES_LOG_LEVEL: Log level
            THREADNOTES_LOG_TO_FILE: Enable file logging
            THREADNOTES_LOG_DIR: Log directory
            THREADNOTES_LOG_FILE_ROTATION: Rotation size/interval
            THREADNOTES_LOG_FILE_RETENTION: Retention period
            THREADNOTES_LOG_COMPRESSION: Rotated file compression
            THREADNOTES_LOG_SERIALIZE: JSON file logs
            THREADNOTES_SERVER_HOST: Bind address
            THREADNOTES_SERVER_PORT: Bind port
            THREADNOTES_SERVER_RELOAD: Auto-reload on code changes
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None or value == "":
                return default
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        return cls(
            database=DatabaseConfig(
                backend=get_env("THREADNOTES_DB_BACKEND", "sqlite"),
                path=get_env("THREADNOTES_DB_PATH", "data/threadnotes.db"),
                busy_timeout=get_env("THREADNOTES_DB_BUSY_TIMEOUT", 5.0),
            ),
            logging=LoggingConfig(
                level=get_env("THREADNOTES_LOG_LEVEL", "INFO"),
                log_to_file=get_env("THREADNOTES_LOG_TO_FILE", True),
                log_dir=get_env("THREADNOTES_LOG_DIR", "logs"),
                file_rotation=get_env("THREADNOTES_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("THREADNOTES_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("THREADNOTES_LOG_COMPRESSION", "zip"),
                serialize=get_env("THREADNOTES_LOG_SERIALIZE", True),
            ),
            server=ServerConfig(
                host=get_env("THREADNOTES_SERVER_HOST", "127.0.0.1"),
                port=get_env("THREADNOTES_SERVER_PORT", 8000),
                reload=get_env("THREADNOTES_SERVER_RELOAD", False),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Env values that differ from defaults override YAML
        final_dict = {**config_dict}
        default = cls()
        if env_config.database != default.database:
            final_dict["database"] = env_config.database.model_dump()
        if env_config.logging != default.logging:
            final_dict["logging"] = env_config.logging.model_dump()
        if env_config.server != default.server:
            final_dict["server"] = env_config.server.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
