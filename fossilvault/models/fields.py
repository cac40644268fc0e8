"""Catalog of importable specimen fields.

The catalog is built once at import time and exposed read-only through
``FIELD_CATALOG``. Declaration order is significant: it is the tie-break
order for column matching and the display order for grouped listings.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple


class FieldCategory(str, Enum):
    """Grouping of target fields for display."""

    TAXONOMY = "taxonomy"
    IDENTITY = "identity"
    GEOLOGICAL_TIME = "geological_time"
    LOCATION = "location"
    DIMENSIONS = "dimensions"
    ACQUISITION = "acquisition"
    FINANCIAL = "financial"
    METADATA = "metadata"

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self]


_CATEGORY_NAMES = {
    FieldCategory.TAXONOMY: "Taxonomy",
    FieldCategory.IDENTITY: "Identity",
    FieldCategory.GEOLOGICAL_TIME: "Geological Time",
    FieldCategory.LOCATION: "Location",
    FieldCategory.DIMENSIONS: "Dimensions",
    FieldCategory.ACQUISITION: "Acquisition",
    FieldCategory.FINANCIAL: "Financial",
    FieldCategory.METADATA: "Metadata & Storage",
}


class TargetField(str, Enum):
    """Specimen attribute a spreadsheet column can be mapped to."""

    # Taxonomy
    KINGDOM = "kingdom"
    PHYLUM = "phylum"
    CLASS = "class"
    ORDER = "order"
    FAMILY = "family"
    GENUS = "genus"
    SPECIES = "species"
    # Identity
    ELEMENT = "element"
    INVENTORY_ID = "inventory_id"
    NOTES = "notes"
    # Geological time
    ERA = "era"
    PERIOD = "period"
    EPOCH = "epoch"
    AGE = "age"
    # Location
    LOCATION = "location"
    COUNTRY = "country"
    FORMATION = "formation"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    # Dimensions
    WIDTH = "width"
    HEIGHT = "height"
    LENGTH = "length"
    SIZE_UNIT = "size_unit"
    WEIGHT = "weight"
    WEIGHT_UNIT = "weight_unit"
    # Acquisition
    COLLECTION_DATE = "collection_date"
    ACQUISITION_DATE = "acquisition_date"
    ACQUISITION_METHOD = "acquisition_method"
    CONDITION = "condition"
    # Financial
    PRICE_PAID = "price_paid"
    PRICE_PAID_CURRENCY = "price_paid_currency"
    ESTIMATED_VALUE = "estimated_value"
    ESTIMATED_VALUE_CURRENCY = "estimated_value_currency"
    # Metadata & storage
    STORAGE_ROOM = "storage_room"
    STORAGE_CABINET = "storage_cabinet"
    STORAGE_DRAWER = "storage_drawer"
    TAGS = "tags"

    @property
    def display_name(self) -> str:
        return FIELD_CATALOG[self].display_name

    @property
    def category(self) -> FieldCategory:
        return FIELD_CATALOG[self].category

    @property
    def required(self) -> bool:
        return FIELD_CATALOG[self].required

    @classmethod
    def required_fields(cls) -> list["TargetField"]:
        """Return the fields that must be mapped before import."""
        return [f for f in cls if f.required]

    @classmethod
    def fields_in_category(cls, category: FieldCategory) -> list["TargetField"]:
        """Return the fields of one category in catalog order."""
        return [f for f in cls if f.category == category]

    @classmethod
    def grouped_by_category(cls) -> dict[FieldCategory, list["TargetField"]]:
        """Return every category with its fields, both in catalog order."""
        return {category: cls.fields_in_category(category) for category in FieldCategory}


class FieldDefinition(NamedTuple):
    """Static description of one target field."""

    field: TargetField
    display_name: str
    category: FieldCategory
    required: bool = False


def _build_catalog() -> Mapping[TargetField, FieldDefinition]:
    c = FieldCategory
    definitions = [
        FieldDefinition(TargetField.KINGDOM, "Kingdom", c.TAXONOMY),
        FieldDefinition(TargetField.PHYLUM, "Phylum", c.TAXONOMY),
        FieldDefinition(TargetField.CLASS, "Class", c.TAXONOMY),
        FieldDefinition(TargetField.ORDER, "Order", c.TAXONOMY),
        FieldDefinition(TargetField.FAMILY, "Family", c.TAXONOMY),
        FieldDefinition(TargetField.GENUS, "Genus", c.TAXONOMY),
        FieldDefinition(TargetField.SPECIES, "Species", c.TAXONOMY, required=True),
        FieldDefinition(TargetField.ELEMENT, "Fossil Element", c.IDENTITY),
        FieldDefinition(TargetField.INVENTORY_ID, "Inventory ID", c.IDENTITY),
        FieldDefinition(TargetField.NOTES, "Notes", c.IDENTITY),
        FieldDefinition(TargetField.ERA, "Era", c.GEOLOGICAL_TIME),
        FieldDefinition(TargetField.PERIOD, "Period", c.GEOLOGICAL_TIME),
        FieldDefinition(TargetField.EPOCH, "Epoch", c.GEOLOGICAL_TIME),
        FieldDefinition(TargetField.AGE, "Age", c.GEOLOGICAL_TIME),
        FieldDefinition(TargetField.LOCATION, "Location", c.LOCATION),
        FieldDefinition(TargetField.COUNTRY, "Country", c.LOCATION),
        FieldDefinition(TargetField.FORMATION, "Formation", c.LOCATION),
        FieldDefinition(TargetField.LATITUDE, "Latitude", c.LOCATION),
        FieldDefinition(TargetField.LONGITUDE, "Longitude", c.LOCATION),
        FieldDefinition(TargetField.WIDTH, "Width", c.DIMENSIONS),
        FieldDefinition(TargetField.HEIGHT, "Height", c.DIMENSIONS),
        FieldDefinition(TargetField.LENGTH, "Length", c.DIMENSIONS),
        FieldDefinition(TargetField.SIZE_UNIT, "Size Unit", c.DIMENSIONS),
        FieldDefinition(TargetField.WEIGHT, "Weight", c.DIMENSIONS),
        FieldDefinition(TargetField.WEIGHT_UNIT, "Weight Unit", c.DIMENSIONS),
        FieldDefinition(TargetField.COLLECTION_DATE, "Collection Date", c.ACQUISITION),
        FieldDefinition(TargetField.ACQUISITION_DATE, "Acquisition Date", c.ACQUISITION),
        FieldDefinition(TargetField.ACQUISITION_METHOD, "Acquisition Method", c.ACQUISITION),
        FieldDefinition(TargetField.CONDITION, "Condition", c.ACQUISITION),
        FieldDefinition(TargetField.PRICE_PAID, "Price Paid", c.FINANCIAL),
        FieldDefinition(TargetField.PRICE_PAID_CURRENCY, "Price Paid Currency", c.FINANCIAL),
        FieldDefinition(TargetField.ESTIMATED_VALUE, "Estimated Value", c.FINANCIAL),
        FieldDefinition(
            TargetField.ESTIMATED_VALUE_CURRENCY, "Estimated Value Currency", c.FINANCIAL
        ),
        FieldDefinition(TargetField.STORAGE_ROOM, "Storage Room", c.METADATA),
        FieldDefinition(TargetField.STORAGE_CABINET, "Storage Cabinet", c.METADATA),
        FieldDefinition(TargetField.STORAGE_DRAWER, "Storage Drawer", c.METADATA),
        FieldDefinition(TargetField.TAGS, "Tags", c.METADATA),
    ]
    return MappingProxyType({d.field: d for d in definitions})


FIELD_CATALOG: Mapping[TargetField, FieldDefinition] = _build_catalog()
