"""Specimen models for FossilVault."""

from fossilvault.models.enums import (
    AcquisitionMethod,
    Condition,
    Currency,
    FossilElement,
    SizeUnit,
    WeightUnit,
)
from fossilvault.models.fields import FIELD_CATALOG, FieldCategory, FieldDefinition, TargetField
from fossilvault.models.geology import (
    GeologicalAge,
    GeologicalEpoch,
    GeologicalEra,
    GeologicalPeriod,
)
from fossilvault.models.specimen import GeologicalTime, Specimen, StorageMethod, Taxonomy
from fossilvault.models.specimen_document import SpecimenDocument

__all__ = [
    # Main documents
    "SpecimenDocument",
    "Specimen",
    # Embedded subdocuments
    "Taxonomy",
    "GeologicalTime",
    "StorageMethod",
    # Enumerations
    "AcquisitionMethod",
    "Condition",
    "Currency",
    "FossilElement",
    "SizeUnit",
    "WeightUnit",
    # Geological time scale
    "GeologicalEra",
    "GeologicalPeriod",
    "GeologicalEpoch",
    "GeologicalAge",
    # Field catalog
    "FIELD_CATALOG",
    "FieldCategory",
    "FieldDefinition",
    "TargetField",
]
