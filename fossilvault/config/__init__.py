"""FossilVault configuration module.

This module provides TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/fossilvault/config.toml (user config)
4. /etc/fossilvault/config.toml (system config)
"""

from fossilvault.config.schema import (
    DatabaseConfig,
    FossilVaultConfig,
    ImportConfig,
    ServerConfig,
)
from fossilvault.config.settings import get_settings, reset_settings, settings

__all__ = [
    "DatabaseConfig",
    "FossilVaultConfig",
    "ImportConfig",
    "ServerConfig",
    "get_settings",
    "reset_settings",
    "settings",
]
