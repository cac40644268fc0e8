"""Pydantic models for FossilVault configuration.

These models define the structure of config.toml.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fossilvault.models.enums import Currency


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False


class DatabaseConfig(BaseModel):
    """MongoDB database configuration."""

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "fossilvault"


class ImportConfig(BaseModel):
    """Spreadsheet import configuration."""

    batch_size: int = Field(default=10, ge=1)
    max_rows: int = Field(default=5000, ge=1)
    default_currency: str = "USD"
    max_upload_mb: int = Field(default=10, ge=1)

    @field_validator("default_currency")
    @classmethod
    def _known_currency(cls, value: str) -> str:
        currency = Currency.from_text(value)
        if currency is None:
            raise ValueError(f"Unsupported currency: {value}")
        return currency.value

    @property
    def max_upload_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_mb * 1024 * 1024


class FossilVaultConfig(BaseModel):
    """Main FossilVault configuration loaded from config.toml."""

    app_name: str = "FossilVault"
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    imports: ImportConfig = Field(default_factory=ImportConfig, alias="import")

    model_config = ConfigDict(populate_by_name=True)
