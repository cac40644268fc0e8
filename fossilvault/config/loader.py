"""Configuration loader for FossilVault.

Loads configuration from TOML files. Environment variables can override
any configuration value.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from fossilvault.config.schema import FossilVaultConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "FOSSILVAULT"

INT_KEYS = {"port", "batch_size", "max_rows", "max_upload_mb"}
BOOL_KEYS = {"debug"}


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for configuration files.

    Returns paths in priority order (first found wins):
    1. ./config.toml (project root - for development)
    2. ~/.config/fossilvault/config.toml (user config)
    3. /etc/fossilvault/config.toml (system config)
    """
    paths = []

    # Project root (current working directory)
    paths.append(Path.cwd() / "config.toml")

    # User config directory
    paths.append(Path.home() / ".config" / "fossilvault" / "config.toml")

    # System config (Linux FHS)
    paths.append(Path("/etc/fossilvault/config.toml"))

    return paths


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    for path in get_config_search_paths():
        if path.exists() and path.is_file():
            logger.debug("Found config file: %s", path)
            return path
    return None


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = ENV_PREFIX) -> None:
    """Apply environment variable overrides to configuration dictionary.

    Environment variables are mapped as follows:
    - FOSSILVAULT_SERVER_HOST -> config_dict["server"]["host"]
    - FOSSILVAULT_DATABASE_MONGODB_URL -> config_dict["database"]["mongodb_url"]
    - FOSSILVAULT_IMPORT_BATCH_SIZE -> config_dict["import"]["batch_size"]
    - etc.

    Note: This modifies config_dict in place.
    """
    env_mappings = {
        # Server
        f"{prefix}_SERVER_HOST": ("server", "host"),
        f"{prefix}_SERVER_PORT": ("server", "port"),
        f"{prefix}_SERVER_DEBUG": ("server", "debug"),
        f"{prefix}_DEBUG": ("server", "debug"),  # Shorthand
        f"{prefix}_HOST": ("server", "host"),  # Shorthand
        f"{prefix}_PORT": ("server", "port"),  # Shorthand
        # Database
        f"{prefix}_DATABASE_MONGODB_URL": ("database", "mongodb_url"),
        f"{prefix}_DATABASE_MONGODB_DATABASE": ("database", "mongodb_database"),
        f"{prefix}_MONGODB_URL": ("database", "mongodb_url"),  # Shorthand
        f"{prefix}_MONGODB_DATABASE": ("database", "mongodb_database"),  # Shorthand
        # Import
        f"{prefix}_IMPORT_BATCH_SIZE": ("import", "batch_size"),
        f"{prefix}_IMPORT_MAX_ROWS": ("import", "max_rows"),
        f"{prefix}_IMPORT_DEFAULT_CURRENCY": ("import", "default_currency"),
        f"{prefix}_IMPORT_MAX_UPLOAD_MB": ("import", "max_upload_mb"),
        f"{prefix}_DEFAULT_CURRENCY": ("import", "default_currency"),  # Shorthand
    }

    for env_var, path in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            section, key = path

            # Ensure section exists
            if section not in config_dict:
                config_dict[section] = {}

            # Convert value to appropriate type
            if key in INT_KEYS:
                config_dict[section][key] = int(value)
            elif key in BOOL_KEYS:
                config_dict[section][key] = value.lower() in ("true", "1", "yes")
            else:
                config_dict[section][key] = value


def load_config(config_file: Path | None = None) -> FossilVaultConfig:
    """Load configuration from TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        FossilVaultConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    # Find and load config file
    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info("Loading config from: %s", config_file)
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    # Apply environment variable overrides
    apply_env_overrides(config_dict)

    return FossilVaultConfig(**config_dict)
