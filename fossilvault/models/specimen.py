"""Specimen record and its embedded subdocuments."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from fossilvault.models.enums import (
    AcquisitionMethod,
    Condition,
    Currency,
    FossilElement,
    SizeUnit,
    WeightUnit,
)
from fossilvault.models.geology import (
    GeologicalAge,
    GeologicalEpoch,
    GeologicalEra,
    GeologicalPeriod,
)


class Taxonomy(BaseModel):
    """Embedded subdocument for the taxonomic classification."""

    kingdom: Optional[str] = None
    phylum: Optional[str] = None
    taxonomic_class: Optional[str] = None  # "class" is reserved
    order: Optional[str] = None
    family: Optional[str] = None
    genus: Optional[str] = None
    species: str = ""

    @property
    def scientific_name(self) -> str:
        """Binomial name when the genus is known, else the species alone."""
        if self.genus and self.species:
            return f"{self.genus} {self.species}"
        return self.species


class GeologicalTime(BaseModel):
    """Embedded subdocument for the geological dating."""

    era: Optional[GeologicalEra] = None
    period: Optional[GeologicalPeriod] = None
    epoch: Optional[GeologicalEpoch] = None
    age: Optional[GeologicalAge] = None

    @property
    def is_empty(self) -> bool:
        return not (self.era or self.period or self.epoch or self.age)


class StorageMethod(BaseModel):
    """Embedded subdocument for where the specimen is kept."""

    room: Optional[str] = None
    cabinet: Optional[str] = None
    drawer: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.room or self.cabinet or self.drawer)


class Specimen(BaseModel):
    """A fossil specimen as stored in the collection."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str = ""

    taxonomy: Taxonomy = Field(default_factory=Taxonomy)
    geological_time: GeologicalTime = Field(default_factory=GeologicalTime)
    element: FossilElement = FossilElement.OTHER

    # Location
    location: Optional[str] = None
    country: Optional[str] = None
    formation: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Physical measurements
    width: Optional[float] = None
    height: Optional[float] = None
    length: Optional[float] = None
    unit: SizeUnit = SizeUnit.MM
    weight: Optional[float] = None
    weight_unit: WeightUnit = WeightUnit.GR

    # Dates
    collection_date: Optional[datetime] = None
    acquisition_date: Optional[datetime] = None
    creation_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Acquisition
    acquisition_method: Optional[AcquisitionMethod] = None
    condition: Optional[Condition] = None
    condition_detail: Optional[str] = None  # raw text when condition is OTHER

    # Metadata
    inventory_id: Optional[str] = None
    notes: Optional[str] = None
    storage: Optional[StorageMethod] = None
    tag_names: list[str] = Field(default_factory=list)

    # Valuation
    price_paid: Optional[float] = None
    price_paid_currency: Optional[Currency] = None
    estimated_value: Optional[float] = None
    estimated_value_currency: Optional[Currency] = None

    # Never populated by import
    image_urls: list[str] = Field(default_factory=list)
    share_url: Optional[str] = None
    is_favorite: bool = False
    is_public: bool = False

    @property
    def dimensions_description(self) -> Optional[str]:
        """Format dimensions as "LxWxH unit", or None when none are set."""
        parts = [str(v) for v in (self.length, self.width, self.height) if v is not None]
        if not parts:
            return None
        return f"{'x'.join(parts)} {self.unit.value}"
