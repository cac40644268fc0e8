"""Text parsing and draft conversion functions for specimen imports.

The parsing helpers are shared by validation (to predict what import will
do) and by ``draft_to_specimen`` (to do it), so both always agree.
"""

import math
import re
from datetime import datetime, timezone
from typing import NamedTuple, Optional

from pydantic import ValidationError as PydanticValidationError

from fossilvault.models.enums import (
    CURRENCY_SYMBOLS,
    AcquisitionMethod,
    Condition,
    Currency,
    FossilElement,
    SizeUnit,
    WeightUnit,
)
from fossilvault.models.fields import TargetField
from fossilvault.models.geology import (
    LEGACY_PERIODS,
    GeologicalAge,
    GeologicalEpoch,
    GeologicalEra,
    GeologicalPeriod,
)
from fossilvault.models.specimen import GeologicalTime, Specimen, StorageMethod, Taxonomy
from fossilvault.schemas.import_schemas import SpecimenDraft

from .constants import (
    ACQUISITION_FLAG_COLUMNS,
    COORDINATE_LIMITS,
    DATE_FORMATS,
    DEFAULT_CURRENCY,
    TIME_SUFFIX,
    TRUTHY_FLAGS,
)
from .errors import ConversionError

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_EUROPEAN_DECIMAL_RE = re.compile(r"^[+-]?\d*,\d+$")
_SIZE_UNIT_RE = re.compile(r"(cm|mm|inch|in)\s*$", re.IGNORECASE)
_WEIGHT_UNIT_RE = re.compile(r"(kilograms?|grams?|kg|gr|g)\s*$", re.IGNORECASE)
_DIMENSION_SPLIT_RE = re.compile(r"[xX×*]")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# Numbers


def normalize_numeric(text: str) -> str:
    """Treat a single comma as a decimal separator ("2,5" -> "2.5")."""
    text = text.strip()
    if text.count(",") == 1:
        return text.replace(",", ".")
    return text


def is_european_decimal(text: str) -> bool:
    return bool(_EUROPEAN_DECIMAL_RE.match(text.strip()))


def parse_number(text: Optional[str]) -> float | None:
    """Parse a finite number, accepting a decimal comma. Never raises."""
    if not text:
        return None
    normalized = normalize_numeric(text)
    if not _NUMBER_RE.match(normalized):
        return None
    value = float(normalized)
    return value if math.isfinite(value) else None


# Dimensions


def is_combined_dimensions(text: str) -> bool:
    return any(marker in text for marker in ("x", "X", "×"))


class DimensionParse(NamedTuple):
    width: float | None
    height: float | None
    length: float | None
    unit: SizeUnit | None


def parse_combined_dimensions(text: str) -> DimensionParse:
    """Split "W x H x L unit" text into width, height and length.

    Tokens that are not numbers are skipped and the numbers that remain are
    assigned in order, so "a x 3 x 2" gives width 3 and height 2. A trailing
    cm, mm, in or inch sets the unit.

    Example:
        "2,5x1,8 cm" -> DimensionParse(2.5, 1.8, None, SizeUnit.CM)
    """
    text = text.strip()
    unit = None
    match = _SIZE_UNIT_RE.search(text)
    if match:
        unit = SizeUnit.from_text(match.group(1)) or SizeUnit.MM
        text = text[:match.start()]

    values = [parse_number(token) for token in _DIMENSION_SPLIT_RE.split(text)]
    values = [v for v in values if v is not None]
    values += [None] * (3 - len(values))
    return DimensionParse(values[0], values[1], values[2], unit)


# Weight


def has_inline_weight_unit(text: str) -> bool:
    return bool(_WEIGHT_UNIT_RE.search(text.strip()))


def parse_weight(text: str) -> tuple[float | None, WeightUnit | None]:
    """Parse a weight, with or without a trailing unit ("125 gr", "1,2kg")."""
    text = text.strip()
    match = _WEIGHT_UNIT_RE.search(text)
    if match:
        return parse_number(text[:match.start()]), WeightUnit.from_text(match.group(1))
    return parse_number(text), None


# Currency amounts


def strip_currency(text: str) -> str:
    """Drop everything except digits and the decimal point.

    Commas are always treated as thousands separators and signs are removed,
    so "12,50" reads as 1250 and "-20" as 20.
    """
    return re.sub(r"[^0-9.]", "", text.strip())


def parse_amount(text: Optional[str]) -> float | None:
    """Parse a price such as "$1,250.00" or "40 €"."""
    if not text:
        return None
    return parse_number(strip_currency(text))


def currency_symbol_in(text: str) -> Currency | None:
    for symbol, code in CURRENCY_SYMBOLS.items():
        if symbol in text:
            return Currency(code)
    return None


# Dates


def parse_date(text: Optional[str]) -> datetime | None:
    """Parse a date in any supported format, as a UTC datetime.

    ISO 8601 timestamps are tried first, then day-first, month-first,
    ISO, dotted and slashed year-first dates, each with an optional
    "HH:MM:SS" time. Returns None when nothing matches.
    """
    if not text:
        return None
    text = text.strip()

    if "T" in text:
        try:
            value = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            value = None
        if value is not None:
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)

    for fmt in DATE_FORMATS:
        for pattern in (fmt + TIME_SUFFIX, fmt):
            try:
                return datetime.strptime(text, pattern).replace(tzinfo=timezone.utc)
            except ValueError:
                continue
    return None


def is_iso_date(text: str) -> bool:
    """True for "yyyy-mm-dd" dates and ISO 8601 timestamps."""
    text = text.strip()
    if _ISO_DATE_RE.match(text):
        return True
    if "T" not in text:
        return False
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


# Tags and flags


def split_tags(text: Optional[str]) -> list[str]:
    if not text:
        return []
    return [tag.strip() for tag in re.split(r"[,;]", text) if tag.strip()]


def acquisition_from_flags(flags: dict[str, str]) -> str | None:
    """Resolve TriloBase-style boolean columns into an acquisition method.

    Args:
        flags: Lowercased column name -> cell text for the flag columns.

    Returns:
        The method value of the highest-priority set flag, or None.
    """
    for column, method in ACQUISITION_FLAG_COLUMNS.items():
        if flags.get(column, "").strip().lower() in TRUTHY_FLAGS:
            return method
    return None


# Geological time


def resolve_period(text: str) -> tuple[GeologicalPeriod | None, bool]:
    """Look up a period, falling back to legacy names.

    Returns:
        Tuple of (period, used_legacy_name).
    """
    period = GeologicalPeriod.from_text(text)
    if period is not None:
        return period, False
    legacy = LEGACY_PERIODS.get(text.strip().lower())
    return legacy, legacy is not None


def _geological_time(values: dict[TargetField, str]) -> GeologicalTime:
    period = None
    if values.get(TargetField.PERIOD):
        period, _ = resolve_period(values[TargetField.PERIOD])
    era = GeologicalEra.from_text(values.get(TargetField.ERA))
    if era is None and period is not None:
        era = period.era
    return GeologicalTime(
        era=era,
        period=period,
        epoch=GeologicalEpoch.from_text(values.get(TargetField.EPOCH)),
        age=GeologicalAge.from_text(values.get(TargetField.AGE)),
    )


# Draft conversion


def _non_negative(value: float | None) -> float | None:
    if value is None or value < 0:
        return None
    return value


def _coordinate(values: dict[TargetField, str], field: TargetField) -> float | None:
    value = parse_number(values.get(field))
    if value is None or abs(value) > COORDINATE_LIMITS[field]:
        return None
    return value


def _currency(
    values: dict[TargetField, str],
    currency_field: TargetField,
    amount_field: TargetField,
    default_currency: str,
) -> Currency | None:
    explicit = values.get(currency_field)
    if explicit:
        return Currency.from_text(explicit) or Currency(default_currency)
    amount_text = values.get(amount_field)
    if not amount_text:
        return None
    return currency_symbol_in(amount_text) or Currency(default_currency)


def draft_to_specimen(
    draft: SpecimenDraft,
    owner_id: str,
    default_currency: str = DEFAULT_CURRENCY,
) -> Specimen:
    """Convert a draft's parsed values into a specimen record.

    Unparseable numbers and dates become None, negative measurements are
    dropped, prices keep only their digits and decimal point, out-of-range
    coordinates are cleared and unrecognized enum text falls back to its
    default.

    Args:
        draft: Validated draft.
        owner_id: Owner of the new record.
        default_currency: Currency used when a price has none.

    Returns:
        A new Specimen with a fresh ID.

    Raises:
        ConversionError: If the record cannot be built.
    """
    v = draft.parsed_values

    width = height = length = None
    size_unit = SizeUnit.MM
    width_text = v.get(TargetField.WIDTH)
    if width_text:
        if is_combined_dimensions(width_text):
            width, height, length, parsed_unit = parse_combined_dimensions(width_text)
            if parsed_unit is not None:
                size_unit = parsed_unit
        else:
            width = parse_number(width_text)
    if height is None:
        height = parse_number(v.get(TargetField.HEIGHT))
    if length is None:
        length = parse_number(v.get(TargetField.LENGTH))
    if v.get(TargetField.SIZE_UNIT):
        size_unit = SizeUnit.from_text(v[TargetField.SIZE_UNIT]) or SizeUnit.MM

    weight = None
    weight_unit = WeightUnit.GR
    if v.get(TargetField.WEIGHT):
        weight, parsed_weight_unit = parse_weight(v[TargetField.WEIGHT])
        if parsed_weight_unit is not None:
            weight_unit = parsed_weight_unit
    if v.get(TargetField.WEIGHT_UNIT):
        weight_unit = WeightUnit.from_text(v[TargetField.WEIGHT_UNIT]) or WeightUnit.GR

    element = FossilElement.from_text(v.get(TargetField.ELEMENT)) or FossilElement.OTHER

    acquisition_method = None
    if v.get(TargetField.ACQUISITION_METHOD):
        acquisition_method = (
            AcquisitionMethod.from_text(v[TargetField.ACQUISITION_METHOD])
            or AcquisitionMethod.FOUND
        )

    condition = condition_detail = None
    if v.get(TargetField.CONDITION):
        condition = Condition.from_text(v[TargetField.CONDITION])
        if condition is None:
            condition = Condition.OTHER
            condition_detail = v[TargetField.CONDITION]

    storage = StorageMethod(
        room=v.get(TargetField.STORAGE_ROOM),
        cabinet=v.get(TargetField.STORAGE_CABINET),
        drawer=v.get(TargetField.STORAGE_DRAWER),
    )

    try:
        return Specimen(
            user_id=owner_id,
            taxonomy=Taxonomy(
                kingdom=v.get(TargetField.KINGDOM),
                phylum=v.get(TargetField.PHYLUM),
                taxonomic_class=v.get(TargetField.CLASS),
                order=v.get(TargetField.ORDER),
                family=v.get(TargetField.FAMILY),
                genus=v.get(TargetField.GENUS),
                species=v.get(TargetField.SPECIES, ""),
            ),
            geological_time=_geological_time(v),
            element=element,
            location=v.get(TargetField.LOCATION),
            country=v.get(TargetField.COUNTRY),
            formation=v.get(TargetField.FORMATION),
            latitude=_coordinate(v, TargetField.LATITUDE),
            longitude=_coordinate(v, TargetField.LONGITUDE),
            width=_non_negative(width),
            height=_non_negative(height),
            length=_non_negative(length),
            unit=size_unit,
            weight=_non_negative(weight),
            weight_unit=weight_unit,
            collection_date=parse_date(v.get(TargetField.COLLECTION_DATE)),
            acquisition_date=parse_date(v.get(TargetField.ACQUISITION_DATE)),
            acquisition_method=acquisition_method,
            condition=condition,
            condition_detail=condition_detail,
            inventory_id=v.get(TargetField.INVENTORY_ID) or None,
            notes=v.get(TargetField.NOTES),
            storage=None if storage.is_empty else storage,
            tag_names=split_tags(v.get(TargetField.TAGS)),
            price_paid=parse_amount(v.get(TargetField.PRICE_PAID)),
            price_paid_currency=_currency(
                v, TargetField.PRICE_PAID_CURRENCY, TargetField.PRICE_PAID, default_currency
            ),
            estimated_value=parse_amount(v.get(TargetField.ESTIMATED_VALUE)),
            estimated_value_currency=_currency(
                v,
                TargetField.ESTIMATED_VALUE_CURRENCY,
                TargetField.ESTIMATED_VALUE,
                default_currency,
            ),
            is_favorite=False,
            image_urls=[],
            is_public=False,
            share_url=None,
        )
    except (PydanticValidationError, ValueError) as e:
        raise ConversionError(f"Row {draft.row_index + 1}: {e}") from e
