"""Import service package for reading spreadsheets and creating specimen records."""

from .constants import BATCH_SIZE, DEFAULT_CURRENCY, FIELD_ALIASES, MAX_ROWS
from .converters import (
    draft_to_specimen,
    parse_amount,
    parse_combined_dimensions,
    parse_date,
    parse_number,
    parse_weight,
    split_tags,
)
from .errors import (
    ConversionError,
    DuplicateInventoryIdError,
    FossilImportError,
    PersistenceError,
    RowImportError,
    SourceReadError,
)
from .mapping import apply_overrides, generate_mapping, score_header, update_mapping
from .parsers import detect_delimiter, parse_csv, parse_file, parse_xlsx
from .processor import ImportRun, RowResult, import_selected, run_import
from .store import BeanieSpecimenStore, SpecimenStore
from .validation import Blocked, Parsed, Warned, build_drafts, validate_values

__all__ = [
    # Constants
    "BATCH_SIZE",
    "DEFAULT_CURRENCY",
    "FIELD_ALIASES",
    "MAX_ROWS",
    # Errors
    "FossilImportError",
    "SourceReadError",
    "RowImportError",
    "ConversionError",
    "DuplicateInventoryIdError",
    "PersistenceError",
    # Parsers
    "detect_delimiter",
    "parse_csv",
    "parse_file",
    "parse_xlsx",
    # Mapping
    "generate_mapping",
    "update_mapping",
    "apply_overrides",
    "score_header",
    # Validation
    "build_drafts",
    "validate_values",
    "Parsed",
    "Warned",
    "Blocked",
    # Converters
    "draft_to_specimen",
    "parse_amount",
    "parse_combined_dimensions",
    "parse_date",
    "parse_number",
    "parse_weight",
    "split_tags",
    # Processor
    "ImportRun",
    "RowResult",
    "import_selected",
    "run_import",
    # Persistence
    "SpecimenStore",
    "BeanieSpecimenStore",
]
