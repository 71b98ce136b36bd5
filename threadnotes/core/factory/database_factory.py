"""
Factory for creating database backends.
"""

from threadnotes.config import Config
from threadnotes.core.database.base import Database
from threadnotes.core.database.sqlite_database import SQLiteDatabase
from threadnotes.utils.exceptions import ConfigurationError


class DatabaseFactory:
    """Factory for creating database backends from configuration."""

    @staticmethod
    def create(config: Config) -> Database:
        """
        Create database from configuration.

        Args:
            config: Main configuration object

        Returns:
            Database instance (not yet initialized)

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.database.backend == "sqlite":
            return SQLiteDatabase(
                db_path=config.database.path,
                busy_timeout=config.database.busy_timeout,
            )
        raise ConfigurationError(
            f"Unsupported database backend: {config.database.backend}",
            context={"backend": config.database.backend},
        )
