"""SpecimenDocument model for persisting imported specimens in MongoDB."""

from datetime import datetime, timezone
from typing import Optional

from beanie import Document, Indexed
from pydantic import Field

from fossilvault.models.specimen import Specimen


class SpecimenDocument(Document):
    """Stored specimen, scoped to its owner."""

    specimen_id: Indexed(str, unique=True)
    owner_id: Indexed(str)
    inventory_id: Optional[Indexed(str)] = None  # Denormalized for duplicate lookups

    specimen: Specimen
    imported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "specimens"
        indexes = [
            [("owner_id", 1), ("inventory_id", 1)],  # Duplicate inventory ID lookups
        ]

    @classmethod
    def from_specimen(cls, specimen: Specimen, owner_id: str) -> "SpecimenDocument":
        """Wrap a specimen record for storage under an owner."""
        return cls(
            specimen_id=specimen.id,
            owner_id=owner_id,
            inventory_id=specimen.inventory_id or None,
            specimen=specimen,
        )
