"""Row validation and draft building for specimen imports.

Every mapped value is checked by a field validator that returns one of
three outcomes: ``Parsed`` (accepted as is), ``Warned`` (importable, with
warnings and possibly a correction import will apply) or ``Blocked`` (the
row cannot be imported). Only a blank species blocks.
"""

import logging
from functools import lru_cache
from typing import Callable, Union

from pydantic import BaseModel, ConfigDict, Field

from fossilvault.models.enums import (
    AcquisitionMethod,
    Condition,
    Currency,
    FossilElement,
    SizeUnit,
    WeightUnit,
)
from fossilvault.models.fields import TargetField
from fossilvault.models.geology import GeologicalAge, GeologicalEpoch, GeologicalEra
from fossilvault.schemas.import_schemas import (
    MappingConfiguration,
    SpecimenDraft,
    ValidationError,
    ValidationSeverity,
    ValidationWarning,
)

from .constants import (
    COORDINATE_LIMITS,
    CURRENCY_FIELDS,
    DATE_FIELDS,
    DEFAULT_CURRENCY,
    DIMENSION_FIELDS,
    MAX_REASONABLE_DIMENSION,
    MAX_REASONABLE_PRICE,
    MAX_REASONABLE_WEIGHT,
    MULTI_VALUE_SEPARATOR,
    PRICE_FIELDS,
)
from .converters import (
    acquisition_from_flags,
    has_inline_weight_unit,
    is_combined_dimensions,
    is_european_decimal,
    is_iso_date,
    normalize_numeric,
    parse_amount,
    parse_combined_dimensions,
    parse_date,
    parse_number,
    parse_weight,
    resolve_period,
    strip_currency,
)

logger = logging.getLogger(__name__)

SPECIES_REQUIRED = "Species is required and cannot be empty"
COMBINED_DIMENSIONS = (
    "Combined dimension format detected (e.g., '2,5x1,8 cm'). "
    "Values will be split into Width, Height, Length."
)
EUROPEAN_DECIMAL = "European decimal format detected (comma). Will be converted to period decimal."
WEIGHT_WITH_UNIT = "Weight value includes unit. Unit will be extracted and stored separately."
NON_ISO_DATE = "Non-standard date format. Will attempt to parse (recommended format: yyyy-MM-dd)."
UNPARSEABLE_DATE = "Unrecognized date format. The date will be left empty."
CURRENCY_SYMBOL_REMOVED = "Currency symbol removed from price"
UNPARSEABLE_NUMBER = "Not a valid number. The field will be left empty."
NEGATIVE_VALUE = "Negative values are not allowed. The field will be left empty."


# Outcomes


class Parsed(BaseModel):
    """Value accepted unchanged."""

    model_config = ConfigDict(frozen=True)

    field: TargetField
    value: str


class Warned(BaseModel):
    """Value importable with warnings."""

    model_config = ConfigDict(frozen=True)

    field: TargetField
    value: str
    warnings: list[ValidationWarning] = Field(default_factory=list)


class Blocked(BaseModel):
    """Value that prevents the row from being imported."""

    model_config = ConfigDict(frozen=True)

    field: TargetField
    error: ValidationError


FieldOutcome = Union[Parsed, Warned, Blocked]


class _Collector:
    """Accumulates warnings for one field and folds them into an outcome."""

    def __init__(self, field: TargetField, value: str):
        self.field = field
        self.value = value
        self.warnings: list[ValidationWarning] = []

    def warn(self, message: str, corrected_value: str | None = None) -> None:
        self.warnings.append(
            ValidationWarning(
                field=self.field,
                original_value=self.value,
                message=message,
                corrected_value=corrected_value,
            )
        )

    def outcome(self) -> FieldOutcome:
        if self.warnings:
            return Warned(field=self.field, value=self.value, warnings=self.warnings)
        return Parsed(field=self.field, value=self.value)


def _fmt(number: float) -> str:
    return f"{number:g}"


# Field validators


def _check_magnitude(c: _Collector, number: float, limit: float) -> None:
    if number < 0:
        c.warn(NEGATIVE_VALUE)
    elif number > limit:
        c.warn(f"Unusually large value ({_fmt(number)}). Please verify.")


def _validate_plain_number(c: _Collector, text: str, limit: float) -> None:
    if is_european_decimal(text):
        c.warn(EUROPEAN_DECIMAL, normalize_numeric(text))
    number = parse_number(text)
    if number is None:
        c.warn(UNPARSEABLE_NUMBER)
    else:
        _check_magnitude(c, number, limit)


def validate_species(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
    if not value.strip():
        return Blocked(
            field=field,
            error=ValidationError(
                field=field,
                original_value=value,
                message=SPECIES_REQUIRED,
                severity=ValidationSeverity.BLOCKING,
            ),
        )
    return Parsed(field=field, value=value)


def validate_dimension(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
    c = _Collector(field, value)
    if field == TargetField.WIDTH and is_combined_dimensions(value):
        parsed = parse_combined_dimensions(value)
        numbers = [n for n in (parsed.width, parsed.height, parsed.length) if n is not None]
        corrected = " x ".join(_fmt(n) for n in numbers)
        if corrected and parsed.unit is not None:
            corrected = f"{corrected} {parsed.unit.value}"
        c.warn(COMBINED_DIMENSIONS, corrected or None)
        if not numbers:
            c.warn(UNPARSEABLE_NUMBER)
        for number in numbers:
            _check_magnitude(c, number, MAX_REASONABLE_DIMENSION)
        return c.outcome()

    # Height and length are ignored when a combined width already set them
    width_text = values.get(TargetField.WIDTH, "")
    if field != TargetField.WIDTH and width_text and is_combined_dimensions(width_text):
        parsed = parse_combined_dimensions(width_text)
        if (field == TargetField.HEIGHT and parsed.height is not None) or (
            field == TargetField.LENGTH and parsed.length is not None
        ):
            c.warn(f"Ignored because the {TargetField.WIDTH.display_name} column already gives a value")
            return c.outcome()

    _validate_plain_number(c, value, MAX_REASONABLE_DIMENSION)
    return c.outcome()


def validate_weight(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
    c = _Collector(field, value)
    if has_inline_weight_unit(value):
        number, unit = parse_weight(value)
        corrected = f"{_fmt(number)} {unit.value}" if number is not None and unit else None
        c.warn(WEIGHT_WITH_UNIT, corrected)
        if number is None:
            c.warn(UNPARSEABLE_NUMBER)
        else:
            _check_magnitude(c, number, MAX_REASONABLE_WEIGHT)
        return c.outcome()

    _validate_plain_number(c, value, MAX_REASONABLE_WEIGHT)
    return c.outcome()


def validate_coordinate(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
    c = _Collector(field, value)
    if is_european_decimal(value):
        c.warn(EUROPEAN_DECIMAL, normalize_numeric(value))
    number = parse_number(value)
    limit = COORDINATE_LIMITS[field]
    if number is None:
        c.warn(UNPARSEABLE_NUMBER)
    elif abs(number) > limit:
        c.warn(
            f"{field.display_name} must be between {-limit:g} and {limit:g}. "
            "The coordinate will be cleared."
        )
    return c.outcome()


def validate_price(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
    c = _Collector(field, value)
    cleaned = strip_currency(value)
    amount = parse_amount(value)
    if amount is None:
        c.warn(UNPARSEABLE_NUMBER)
        return c.outcome()
    if cleaned != value.strip():
        c.warn(CURRENCY_SYMBOL_REMOVED, cleaned)
    if amount > MAX_REASONABLE_PRICE:
        c.warn(f"Unusually large price ({_fmt(amount)}). Please verify.")
    return c.outcome()


def _enum_validator(enum_cls, fallback, label: str) -> Callable[..., FieldOutcome]:
    """Validator for an enum field: fall back when unrecognized, note aliases."""

    def validate(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
        c = _Collector(field, value)
        member = enum_cls.from_text(value)
        if member is None:
            c.warn(
                f"Unrecognized {label}, will be set to '{fallback.display_name}'",
                fallback.value,
            )
        elif value.strip().lower() not in (
            member.value.lower(),
            member.name.lower(),
            member.display_name.lower(),
        ):
            c.warn(f"{label.capitalize()} '{value}' normalized to '{member.display_name}'", member.value)
        return c.outcome()

    return validate


def validate_condition(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
    c = _Collector(field, value)
    if Condition.from_text(value) is None:
        c.warn(
            "Unrecognized condition, will be set to 'Other' and the text kept as detail",
            Condition.OTHER.value,
        )
    return c.outcome()


def make_currency_validator(default_currency: str) -> Callable[..., FieldOutcome]:
    fallback = Currency(default_currency)

    def validate(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
        c = _Collector(field, value)
        currency = Currency.from_text(value)
        if currency is None:
            c.warn(f"Unrecognized currency, will be set to '{fallback.value}'", fallback.value)
        elif value.strip().upper() != currency.value:
            c.warn(f"Currency '{value}' normalized to '{currency.value}'", currency.value)
        return c.outcome()

    return validate


def _geology_validator(enum_cls, label: str) -> Callable[..., FieldOutcome]:
    def validate(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
        c = _Collector(field, value)
        if enum_cls.from_text(value) is None:
            c.warn(f"Unrecognized {label}. The field will be left empty.")
        return c.outcome()

    return validate


def validate_period(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
    c = _Collector(field, value)
    period, legacy = resolve_period(value)
    if period is None:
        c.warn("Unrecognized geological period. The field will be left empty.")
    elif legacy:
        c.warn(
            f"Legacy period name, will be stored as '{period.display_name}' "
            f"({period.era.display_name})",
            period.value,
        )
    return c.outcome()


def validate_date(field: TargetField, value: str, values: dict[TargetField, str]) -> FieldOutcome:
    c = _Collector(field, value)
    parsed = parse_date(value)
    if parsed is None:
        c.warn(UNPARSEABLE_DATE)
    elif not is_iso_date(value):
        c.warn(NON_ISO_DATE, parsed.date().isoformat())
    return c.outcome()


@lru_cache(maxsize=None)
def _build_validators(default_currency: str) -> dict[TargetField, Callable[..., FieldOutcome]]:
    validators: dict[TargetField, Callable[..., FieldOutcome]] = {
        TargetField.SPECIES: validate_species,
        TargetField.WEIGHT: validate_weight,
        TargetField.ELEMENT: _enum_validator(FossilElement, FossilElement.OTHER, "fossil element"),
        TargetField.SIZE_UNIT: _enum_validator(SizeUnit, SizeUnit.MM, "size unit"),
        TargetField.WEIGHT_UNIT: _enum_validator(WeightUnit, WeightUnit.GR, "weight unit"),
        TargetField.ACQUISITION_METHOD: _enum_validator(
            AcquisitionMethod, AcquisitionMethod.FOUND, "acquisition method"
        ),
        TargetField.CONDITION: validate_condition,
        TargetField.ERA: _geology_validator(GeologicalEra, "geological era"),
        TargetField.PERIOD: validate_period,
        TargetField.EPOCH: _geology_validator(GeologicalEpoch, "geological epoch"),
        TargetField.AGE: _geology_validator(GeologicalAge, "geological age"),
    }
    for field in DIMENSION_FIELDS:
        validators[field] = validate_dimension
    for field in COORDINATE_LIMITS:
        validators[field] = validate_coordinate
    for field in PRICE_FIELDS:
        validators[field] = validate_price
    currency_validator = make_currency_validator(default_currency)
    for field in CURRENCY_FIELDS:
        validators[field] = currency_validator
    for field in DATE_FIELDS:
        validators[field] = validate_date
    return validators


# Drafts


def gather_values(config: MappingConfiguration, row: list[str]) -> dict[TargetField, str]:
    """Collect one row's text per mapped field.

    Values of a field's columns are trimmed, blanks dropped and the rest
    joined with ", ". Boolean found/bought/traded/gift columns feeding the
    acquisition method are resolved to a single method.
    """
    tabular = config.tabular
    values: dict[TargetField, str] = {}
    for mapping in config.mappings:
        if not mapping.is_mapped:
            continue
        parts: list[str] = []
        by_column: dict[str, str] = {}
        for column in mapping.source_columns:
            text = tabular.value_at(row, tabular.column_index(column)).strip()
            if text:
                parts.append(text)
                by_column[column.strip().lower()] = text
        if not parts:
            continue
        if mapping.target_field == TargetField.ACQUISITION_METHOD:
            method = acquisition_from_flags(by_column)
            if method is not None:
                values[mapping.target_field] = method
                continue
        values[mapping.target_field] = MULTI_VALUE_SEPARATOR.join(parts)
    return values


def validate_values(
    values: dict[TargetField, str],
    default_currency: str = DEFAULT_CURRENCY,
) -> list[FieldOutcome]:
    """Run every field validator that applies to a row's values.

    Species is always checked, mapped or not.
    """
    validators = _build_validators(default_currency)
    outcomes: list[FieldOutcome] = [
        validate_species(TargetField.SPECIES, values.get(TargetField.SPECIES, ""), values)
    ]
    for field, value in values.items():
        if field == TargetField.SPECIES:
            continue
        validator = validators.get(field)
        outcomes.append(validator(field, value, values) if validator else Parsed(field=field, value=value))
    return outcomes


def build_draft(
    config: MappingConfiguration,
    row_index: int,
    default_currency: str = DEFAULT_CURRENCY,
) -> SpecimenDraft:
    """Build and validate the draft for one row."""
    values = gather_values(config, config.tabular.rows[row_index])
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []
    for outcome in validate_values(values, default_currency):
        if isinstance(outcome, Blocked):
            errors.append(outcome.error)
        elif isinstance(outcome, Warned):
            warnings.extend(outcome.warnings)
    return SpecimenDraft(
        row_index=row_index,
        selected=True,
        parsed_values=values,
        blocking_errors=errors,
        warnings=warnings,
    )


def build_drafts(
    config: MappingConfiguration,
    default_currency: str = DEFAULT_CURRENCY,
) -> list[SpecimenDraft]:
    """Build one validated draft per spreadsheet row, in row order.

    Pure and repeatable: the same configuration always yields equal drafts.

    Args:
        config: Mapping configuration with its source table.
        default_currency: Currency suggested for unrecognized currency text.

    Returns:
        List of SpecimenDraft, one per row.
    """
    drafts = [build_draft(config, i, default_currency) for i in range(len(config.tabular.rows))]
    logger.debug(
        "Built %d drafts, %d with blocking errors",
        len(drafts),
        sum(1 for d in drafts if d.has_errors),
    )
    return drafts
