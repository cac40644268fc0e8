"""Pytest configuration and fixtures for FossilVault tests."""

import os
import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from beanie import init_beanie
from httpx import ASGITransport, AsyncClient
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from fossilvault.database import get_document_models
from fossilvault.models.fields import TargetField
from fossilvault.models.specimen import Specimen
from fossilvault.schemas.import_schemas import SpecimenDraft, TabularResult
from fossilvault.services.import_service import PersistenceError


# MongoDB connection URL for tests (can be overridden with env var)
TEST_MONGODB_URL = os.environ.get("TEST_MONGODB_URL", "mongodb://localhost:27017")

TEST_OWNER_ID = "owner-1"


class InMemorySpecimenStore:
    """SpecimenStore keeping records in a dict, for tests without MongoDB."""

    def __init__(self, existing_inventory_ids: set[str] | None = None, fail_on: set[str] | None = None):
        self.records: dict[str, Specimen] = {}
        self.existing_inventory_ids = set(existing_inventory_ids or ())
        self.fail_on = set(fail_on or ())
        self.lookups = 0
        self.saves = 0

    async def find_by_inventory_id(self, inventory_id: str) -> str | None:
        self.lookups += 1
        if inventory_id in self.existing_inventory_ids:
            return f"existing-{inventory_id}"
        for record_id, record in self.records.items():
            if record.inventory_id == inventory_id:
                return record_id
        return None

    async def save(self, record: Specimen) -> str:
        self.saves += 1
        if record.taxonomy.species in self.fail_on:
            raise PersistenceError(f"Failed to save specimen: {record.taxonomy.species}")
        self.records[record.id] = record
        return record.id


def make_tabular(headers: list[str], rows: list[list[str]], source_name: str = "fossils.csv") -> TabularResult:
    """Build a TabularResult directly, bypassing file parsing."""
    return TabularResult(
        headers=headers,
        rows=rows,
        source_name=source_name,
        row_count=len(rows),
    )


def make_draft(row_index: int, species: str = "", **values: str) -> SpecimenDraft:
    """Build an unvalidated draft with the given field values."""
    parsed = {TargetField(k): v for k, v in values.items()}
    if species:
        parsed[TargetField.SPECIES] = species
    return SpecimenDraft(row_index=row_index, parsed_values=parsed)


@pytest.fixture
def memory_store() -> InMemorySpecimenStore:
    """Empty in-memory specimen store."""
    return InMemorySpecimenStore()


@pytest.fixture
def sample_csv() -> bytes:
    """A small fossil collection export with the common messy formats."""
    content = (
        "Inventory ID,Species,Genus,Period,Locality,Size,Weight,Price,Condition\n"
        "F-001,Elrathia kingii,Elrathia,Cambrian,Utah,\"2,5x1,8 cm\",125 gr,$40,complete\n"
        "F-002,Phacops rana,Phacops,Devonian,Ohio,30,45,\"12,50\",restored\n"
        "F-003,,Unknown,Jurassic,Dorset,10,5,5,broken\n"
    )
    return content.encode("utf-8")


@pytest_asyncio.fixture(scope="function")
async def mongo_client():
    """Create a MongoDB client for testing, skipping when no server is reachable."""
    client = AsyncIOMotorClient(TEST_MONGODB_URL, serverSelectionTimeoutMS=2000)
    try:
        await client.admin.command("ping")
    except PyMongoError:
        client.close()
        pytest.skip(f"MongoDB not available at {TEST_MONGODB_URL}")
    yield client
    client.close()


@pytest_asyncio.fixture(scope="function")
async def init_test_db(mongo_client):
    """Initialize Beanie with a unique test database.

    Creates a unique database for each test function and drops it after the test.
    """
    db_name = f"test_fossilvault_{uuid.uuid4().hex[:8]}"
    db = mongo_client[db_name]

    await init_beanie(
        database=db,
        document_models=get_document_models(),
    )
    yield db

    # Cleanup: drop the entire test database
    await mongo_client.drop_database(db_name)


@pytest_asyncio.fixture(scope="function")
async def client(memory_store) -> AsyncGenerator[AsyncClient, None]:
    """Async test client whose import runs write to the in-memory store.

    ASGITransport does not send lifespan events, so no MongoDB connection
    is opened.
    """
    from fossilvault.main import create_app
    from fossilvault.routers.import_router import get_store_factory

    app = create_app()
    app.dependency_overrides[get_store_factory] = lambda: (lambda owner_id: memory_store)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
