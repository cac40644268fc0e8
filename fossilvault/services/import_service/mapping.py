"""Column mapping functions for specimen imports."""

import logging
import re
from difflib import SequenceMatcher

from fossilvault.models.fields import TargetField
from fossilvault.schemas.import_schemas import (
    FieldMapping,
    MappingConfiguration,
    TabularResult,
)

from .constants import (
    CONTAINMENT_BASE_SCORE,
    CONTAINMENT_BONUS,
    EXACT_MATCH_SCORE,
    FIELD_ALIASES,
    FUZZY_THRESHOLD,
    MIN_CONTAINMENT_LENGTH,
)

logger = logging.getLogger(__name__)


def normalize_header(text: str) -> str:
    """Lowercase a header, turn separators into spaces and collapse whitespace."""
    text = re.sub(r"[_\-/]", " ", text.strip().lower())
    return re.sub(r"\s+", " ", text).strip()


def _build_terms() -> dict[TargetField, tuple[str, ...]]:
    terms: dict[TargetField, tuple[str, ...]] = {}
    for field in TargetField:
        candidates = [field.display_name, *FIELD_ALIASES.get(field, ())]
        normalized = dict.fromkeys(normalize_header(c) for c in candidates)
        terms[field] = tuple(t for t in normalized if t)
    return terms


# Normalized display name and aliases per field, in catalog order
FIELD_TERMS = _build_terms()


def _contains_words(longer: str, shorter: str) -> bool:
    """True if the words of ``shorter`` appear as a run inside ``longer``."""
    outer = re.findall(r"\w+", longer)
    inner = re.findall(r"\w+", shorter)
    if not inner or len(inner) > len(outer):
        return False
    return any(outer[i:i + len(inner)] == inner for i in range(len(outer) - len(inner) + 1))


def score_term(header: str, term: str) -> float:
    """Similarity between a normalized header and one normalized term.

    Args:
        header: Normalized header text.
        term: Normalized display name or alias.

    Returns:
        1.0 for an exact match, 0.7 to 0.85 when one contains the other as
        whole words (longer overlaps score higher), the fuzzy ratio when it
        exceeds the threshold, else 0.0.
    """
    if not header or not term:
        return 0.0
    if header == term:
        return EXACT_MATCH_SCORE

    score = 0.0
    shorter, longer = sorted((header, term), key=len)
    if len(shorter) >= MIN_CONTAINMENT_LENGTH and _contains_words(longer, shorter):
        score = CONTAINMENT_BASE_SCORE + CONTAINMENT_BONUS * len(shorter) / len(longer)

    if len(shorter) >= MIN_CONTAINMENT_LENGTH:
        ratio = SequenceMatcher(None, header, term).ratio()
        if ratio > FUZZY_THRESHOLD:
            score = max(score, ratio)

    return score


def score_header(header: str, field: TargetField) -> float:
    """Best score of a raw header against a field's display name and aliases."""
    normalized = normalize_header(header)
    return max((score_term(normalized, term) for term in FIELD_TERMS[field]), default=0.0)


def best_field_for_header(header: str) -> tuple[TargetField | None, float]:
    """Find the single best target field for a header.

    Ties keep the field declared first in the catalog.

    Returns:
        Tuple of (field, score), or (None, 0.0) when nothing scores.
    """
    best_field: TargetField | None = None
    best_score = 0.0
    for field in TargetField:
        score = score_header(header, field)
        if score > best_score:
            best_field, best_score = field, score
    return best_field, best_score


def generate_mapping(result: TabularResult) -> MappingConfiguration:
    """Suggest a mapping from spreadsheet headers to target fields.

    Each header goes to at most one field. Several headers may land on the
    same field, in header order; the field's confidence is the best score
    among them.

    Args:
        result: Parsed spreadsheet.

    Returns:
        MappingConfiguration with one unconfirmed FieldMapping per field.
    """
    columns: dict[TargetField, list[str]] = {field: [] for field in TargetField}
    confidence: dict[TargetField, float] = {field: 0.0 for field in TargetField}

    for header in result.headers:
        field, score = best_field_for_header(header)
        if field is None:
            logger.debug("No field matches column '%s'", header)
            continue
        if header in columns[field]:
            continue
        columns[field].append(header)
        confidence[field] = max(confidence[field], score)
        logger.debug("Column '%s' -> %s (%.2f)", header, field.value, score)

    mappings = [
        FieldMapping(
            target_field=field,
            source_columns=columns[field],
            confirmed=False,
            confidence=round(confidence[field], 4),
        )
        for field in TargetField
    ]
    return MappingConfiguration(mappings=mappings, tabular=result)


def update_mapping(
    config: MappingConfiguration,
    target_field: TargetField,
    new_columns: list[str],
) -> MappingConfiguration:
    """Replace the columns of one field and mark it confirmed.

    Other fields are left untouched, so a column moved here may still be
    claimed elsewhere. Such conflicts are logged and reported by
    ``MappingConfiguration.conflicting_columns``.

    Args:
        config: Current mapping configuration.
        target_field: Field to update.
        new_columns: Ordered source columns, empty to clear the field.

    Returns:
        New MappingConfiguration; the input is not modified.
    """
    columns = list(dict.fromkeys(new_columns))
    updated = FieldMapping(
        target_field=target_field,
        source_columns=columns,
        confirmed=True,
        confidence=1.0 if columns else 0.0,
    )

    mappings: list[FieldMapping] = []
    for mapping in config.mappings:
        if mapping.target_field == target_field:
            mappings.append(updated)
            continue
        shared = [c for c in mapping.source_columns if c in columns]
        if shared:
            logger.warning(
                "Column(s) %s mapped to %s are still mapped to %s",
                ", ".join(shared),
                target_field.value,
                mapping.target_field.value,
            )
        mappings.append(mapping)

    return config.model_copy(update={"mappings": mappings})


def apply_overrides(
    config: MappingConfiguration,
    overrides: dict[TargetField, list[str]],
) -> MappingConfiguration:
    """Apply several manual field updates in turn.

    Raises:
        ValueError: If an override names a column the spreadsheet lacks.
    """
    headers = set(config.tabular.headers)
    for field, cols in overrides.items():
        unknown = [c for c in cols if c not in headers]
        if unknown:
            raise ValueError(f"Unknown column(s) for {field.value}: {', '.join(unknown)}")
        config = update_mapping(config, field, cols)
    return config
