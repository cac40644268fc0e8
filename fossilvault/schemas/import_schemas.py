"""Pydantic schemas for spreadsheet import functionality."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fossilvault.models.fields import TargetField

DELIMITER_NAMES = {
    ",": "Comma (,)",
    ";": "Semicolon (;)",
    "\t": "Tab",
    "|": "Pipe (|)",
}


class TabularResult(BaseModel):
    """Headers and rows read from a spreadsheet."""

    model_config = ConfigDict(frozen=True)

    headers: list[str]
    rows: list[list[str]]
    source_name: str
    delimiter: str = ","
    row_count: int = 0

    @property
    def delimiter_name(self) -> str:
        return DELIMITER_NAMES.get(self.delimiter, self.delimiter or "None")

    def value_at(self, row: list[str], index: int) -> str:
        """Return a cell, treating cells missing from a short row as blank."""
        if 0 <= index < len(row):
            return row[index]
        return ""

    def sample_rows(self, count: int = 5) -> list[list[str]]:
        return self.rows[:count]

    def column_values(self, index: int) -> list[str]:
        return [row[index] for row in self.rows if index < len(row)]

    def column_index(self, header: str) -> int:
        """Index of a header, or -1 when the table has no such column."""
        try:
            return self.headers.index(header)
        except ValueError:
            return -1


class ConfidenceLevel(str, Enum):
    """Display bucket for a mapping confidence score."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_score(cls, confidence: float) -> "ConfidenceLevel":
        if confidence >= 0.9:
            return cls.HIGH
        if confidence >= 0.7:
            return cls.MEDIUM
        if confidence > 0.0:
            return cls.LOW
        return cls.NONE


class FieldMapping(BaseModel):
    """Columns feeding one target field. Multiple columns are joined with ", "."""

    model_config = ConfigDict(frozen=True)

    target_field: TargetField
    source_columns: list[str] = Field(default_factory=list)
    confirmed: bool = False
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    @property
    def is_mapped(self) -> bool:
        return bool(self.source_columns)

    @property
    def confidence_level(self) -> ConfidenceLevel:
        return ConfidenceLevel.from_score(self.confidence)


class MappingConfiguration(BaseModel):
    """One FieldMapping per target field, plus the table they were built from."""

    model_config = ConfigDict(frozen=True)

    mappings: list[FieldMapping]
    tabular: TabularResult

    def mapping_for(self, field: TargetField) -> Optional[FieldMapping]:
        for mapping in self.mappings:
            if mapping.target_field == field:
                return mapping
        return None

    def mapped_fields(self) -> list[TargetField]:
        return [m.target_field for m in self.mappings if m.is_mapped]

    def unmapped_required_fields(self) -> list[TargetField]:
        mapped = set(self.mapped_fields())
        return [f for f in TargetField.required_fields() if f not in mapped]

    def has_all_required_fields_mapped(self) -> bool:
        return not self.unmapped_required_fields()

    def mapping_progress(self) -> float:
        """Fraction of catalog fields that have at least one column."""
        return len(self.mapped_fields()) / len(TargetField)

    def conflicting_columns(self) -> dict[str, list[TargetField]]:
        """Columns claimed by more than one field.

        Only manual edits can produce these; they are reported, never resolved.
        """
        claims: dict[str, list[TargetField]] = {}
        for mapping in self.mappings:
            for column in mapping.source_columns:
                claims.setdefault(column, []).append(mapping.target_field)
        return {column: fields for column, fields in claims.items() if len(fields) > 1}


class ValidationSeverity(str, Enum):
    """How a validation problem affects import."""

    BLOCKING = "blocking"
    WARNING = "warning"


class ValidationError(BaseModel):
    """A problem found in one field of one row."""

    model_config = ConfigDict(frozen=True)

    field: TargetField
    original_value: str
    message: str
    severity: ValidationSeverity = ValidationSeverity.BLOCKING


class ValidationWarning(BaseModel):
    """A non-blocking problem, optionally with the value import will apply."""

    model_config = ConfigDict(frozen=True)

    field: TargetField
    original_value: str
    message: str
    corrected_value: Optional[str] = None


class SpecimenDraft(BaseModel):
    """A validated, not yet persisted, spreadsheet row."""

    model_config = ConfigDict(frozen=True)

    row_index: int
    selected: bool = True
    parsed_values: dict[TargetField, str] = Field(default_factory=dict)
    blocking_errors: list[ValidationError] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(e.severity == ValidationSeverity.BLOCKING for e in self.blocking_errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def is_importable(self) -> bool:
        return self.selected and not self.has_errors

    @property
    def display_name(self) -> str:
        species = self.parsed_values.get(TargetField.SPECIES)
        return species if species else f"Row {self.row_index + 1}"

    def with_selected(self, selected: bool) -> "SpecimenDraft":
        """Return a copy with the selection toggled."""
        return self.model_copy(update={"selected": selected})


class ImportWarning(BaseModel):
    """A draft warning carried into the summary for an imported row."""

    row_number: int
    specimen_name: str
    field: TargetField
    message: str
    original_value: str
    corrected_value: Optional[str] = None


class ImportProgress(BaseModel):
    """Snapshot of a running import."""

    model_config = ConfigDict(frozen=True)

    total_specimens: int
    imported_count: int = 0
    failed_count: int = 0
    current_specimen: Optional[str] = None
    completed: bool = False
    cancelled: bool = False
    last_error: Optional[str] = None

    @property
    def completed_count(self) -> int:
        return self.imported_count + self.failed_count

    @property
    def progress_percentage(self) -> float:
        if self.total_specimens == 0:
            return 0.0
        return self.completed_count / self.total_specimens * 100.0

    @property
    def remaining_count(self) -> int:
        return self.total_specimens - self.completed_count


class ImportSummary(BaseModel):
    """Final result of an import run."""

    model_config = ConfigDict(frozen=True)

    import_id: str
    source_name: str
    total_processed: int
    success_count: int
    failed_count: int
    skipped_count: int
    warnings: list[ImportWarning] = Field(default_factory=list)
    duration_ms: int = 0
    imported_record_ids: list[str] = Field(default_factory=list)

    @property
    def is_full_success(self) -> bool:
        return self.failed_count == 0 and self.skipped_count == 0

    @property
    def is_partial_success(self) -> bool:
        return self.success_count > 0 and (self.failed_count > 0 or self.skipped_count > 0)

    @property
    def success_rate(self) -> float:
        if self.total_processed == 0:
            return 0.0
        return self.success_count / self.total_processed * 100.0


# API request/response schemas


class FieldMappingResponse(BaseModel):
    """One field mapping as returned by the preview endpoint."""

    target_field: TargetField
    display_name: str
    category: str
    required: bool
    source_columns: list[str]
    confidence: float
    confidence_level: ConfidenceLevel
    confirmed: bool

    @classmethod
    def from_mapping(cls, mapping: FieldMapping) -> "FieldMappingResponse":
        field = mapping.target_field
        return cls(
            target_field=field,
            display_name=field.display_name,
            category=field.category.display_name,
            required=field.required,
            source_columns=list(mapping.source_columns),
            confidence=mapping.confidence,
            confidence_level=mapping.confidence_level,
            confirmed=mapping.confirmed,
        )


class ImportPreviewResponse(BaseModel):
    """Response after uploading a spreadsheet for preview."""

    source_name: str
    delimiter: str
    row_count: int
    headers: list[str]
    preview_rows: list[list[str]]
    mappings: list[FieldMappingResponse]
    unmapped_required_fields: list[TargetField]
    conflicting_columns: dict[str, list[TargetField]]
    drafts: list[SpecimenDraft]
    importable_count: int


class ImportRunRequest(BaseModel):
    """Options for running an import."""

    owner_id: str = Field(..., min_length=1)
    mapping: dict[TargetField, list[str]] = Field(
        default_factory=dict,
        description="Map of target field -> ordered source columns, overriding the suggestion",
    )
    deselected_rows: list[int] = Field(
        default_factory=list,
        description="Zero-based row indexes to leave out of the import",
    )
