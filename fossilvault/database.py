"""MongoDB database setup and Beanie ODM initialization."""

import logging
from typing import TYPE_CHECKING

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from fossilvault.config import settings

if TYPE_CHECKING:
    from beanie import Document

logger = logging.getLogger(__name__)

# Global database client and database references
client: AsyncIOMotorClient | None = None
database: AsyncIOMotorDatabase | None = None


def get_document_models() -> list[type["Document"]]:
    """Get all Beanie document models for initialization.

    Returns:
        List of Document model classes.
    """
    from fossilvault.models import SpecimenDocument

    return [SpecimenDocument]


async def init_db(
    mongodb_url: str | None = None,
    mongodb_database: str | None = None,
    motor_client: AsyncIOMotorClient | None = None,
) -> None:
    """Initialize the MongoDB database connection and Beanie ODM.

    Args:
        mongodb_url: Optional MongoDB connection URL. Defaults to settings.
        mongodb_database: Optional database name. Defaults to settings.
        motor_client: Optional pre-configured motor client (for testing).
    """
    global client, database

    if motor_client is not None:
        client = motor_client
    else:
        client = AsyncIOMotorClient(mongodb_url or settings.mongodb_url)

    db_name = mongodb_database or settings.mongodb_database
    database = client[db_name]
    logger.info("Connecting to MongoDB database '%s'", db_name)

    await init_beanie(
        database=database,
        document_models=get_document_models(),
    )


async def close_db() -> None:
    """Close the MongoDB database connection."""
    global client, database

    if client is not None:
        client.close()
        client = None
        database = None
