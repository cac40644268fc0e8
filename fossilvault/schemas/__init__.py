"""Pydantic schemas for FossilVault imports."""

from fossilvault.schemas.import_schemas import (
    ConfidenceLevel,
    FieldMapping,
    FieldMappingResponse,
    ImportPreviewResponse,
    ImportProgress,
    ImportRunRequest,
    ImportSummary,
    ImportWarning,
    MappingConfiguration,
    SpecimenDraft,
    TabularResult,
    ValidationError,
    ValidationSeverity,
    ValidationWarning,
)

__all__ = [
    # Source and mapping
    "TabularResult",
    "ConfidenceLevel",
    "FieldMapping",
    "MappingConfiguration",
    # Drafts and validation
    "SpecimenDraft",
    "ValidationError",
    "ValidationSeverity",
    "ValidationWarning",
    # Import run
    "ImportProgress",
    "ImportSummary",
    "ImportWarning",
    # API
    "FieldMappingResponse",
    "ImportPreviewResponse",
    "ImportRunRequest",
]
