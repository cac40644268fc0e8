"""Persistence for imported specimens."""

import logging
from typing import Protocol

from pymongo.errors import PyMongoError

from fossilvault.models.specimen import Specimen
from fossilvault.models.specimen_document import SpecimenDocument

from .errors import PersistenceError

logger = logging.getLogger(__name__)


class SpecimenStore(Protocol):
    """Where the import run looks up and saves specimen records."""

    async def find_by_inventory_id(self, inventory_id: str) -> str | None:
        """Return the ID of an existing record with this inventory ID, if any."""
        ...

    async def save(self, record: Specimen) -> str:
        """Persist a record and return its ID.

        Raises:
            PersistenceError: If the record cannot be saved.
        """
        ...


class BeanieSpecimenStore:
    """SpecimenStore backed by MongoDB through Beanie, scoped to one owner."""

    def __init__(self, owner_id: str):
        self.owner_id = owner_id

    async def find_by_inventory_id(self, inventory_id: str) -> str | None:
        try:
            existing = await SpecimenDocument.find_one(
                SpecimenDocument.owner_id == self.owner_id,
                SpecimenDocument.inventory_id == inventory_id,
            )
        except PyMongoError as e:
            raise PersistenceError(f"Lookup of inventory ID {inventory_id} failed: {e}") from e
        return existing.specimen_id if existing else None

    async def save(self, record: Specimen) -> str:
        doc = SpecimenDocument.from_specimen(record, self.owner_id)
        try:
            await doc.insert()
        except PyMongoError as e:
            logger.warning("Failed to save specimen %s: %s", record.id, e)
            raise PersistenceError(f"Failed to save specimen: {e}") from e
        return doc.specimen_id
