"""Global settings instance for FossilVault.

This module provides a settings object that flattens the structured
configuration loaded from config.toml and environment overrides.
"""

import logging

from fossilvault.config.loader import load_config
from fossilvault.config.schema import FossilVaultConfig

logger = logging.getLogger(__name__)


class Settings:
    """Flat interface over the structured FossilVaultConfig."""

    def __init__(self, config: FossilVaultConfig | None = None):
        """Initialize settings.

        Args:
            config: Optional FossilVaultConfig instance. If not provided, loads from file.
        """
        self._config = config or load_config()

    # =========================================================================
    # Config accessors
    # =========================================================================

    @property
    def config(self) -> FossilVaultConfig:
        """Get the full configuration object."""
        return self._config

    # =========================================================================
    # Flat property interface
    # =========================================================================

    # Application
    @property
    def app_name(self) -> str:
        return self._config.app_name

    @property
    def debug(self) -> bool:
        return self._config.server.debug

    # Server
    @property
    def host(self) -> str:
        return self._config.server.host

    @property
    def port(self) -> int:
        return self._config.server.port

    # Database
    @property
    def mongodb_url(self) -> str:
        return self._config.database.mongodb_url

    @property
    def mongodb_database(self) -> str:
        return self._config.database.mongodb_database

    # Import
    @property
    def batch_size(self) -> int:
        return self._config.imports.batch_size

    @property
    def max_rows(self) -> int:
        return self._config.imports.max_rows

    @property
    def default_currency(self) -> str:
        return self._config.imports.default_currency

    @property
    def max_upload_size_mb(self) -> int:
        return self._config.imports.max_upload_mb

    @property
    def max_upload_size_bytes(self) -> int:
        return self._config.imports.max_upload_bytes


# Global settings instance - lazily initialized
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    This function provides lazy initialization of the settings object.
    The settings are loaded once and cached for subsequent calls.

    Returns:
        The global Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance.

    This is primarily useful for testing to reload configuration.
    """
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy object that lazily loads settings on first access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()
