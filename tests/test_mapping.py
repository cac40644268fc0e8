"""Unit tests for header scoring and column mapping."""

import logging

import pytest

from fossilvault.models.fields import TargetField
from fossilvault.schemas.import_schemas import ConfidenceLevel
from fossilvault.services.import_service import (
    apply_overrides,
    generate_mapping,
    score_header,
    update_mapping,
)
from fossilvault.services.import_service.mapping import (
    best_field_for_header,
    normalize_header,
    score_term,
)
from tests.conftest import make_tabular


# =============================================================================
# Scoring Tests
# =============================================================================


def test_normalize_header() -> None:
    """Test that separators become spaces and case is folded."""
    assert normalize_header("  Inventory_ID ") == "inventory id"
    assert normalize_header("Collection-Date") == "collection date"
    assert normalize_header("Storage   Room") == "storage room"


def test_score_exact_match() -> None:
    """Test that identical text scores 1.0."""
    assert score_term("species", "species") == 1.0


def test_score_containment_grows_with_overlap() -> None:
    """Test that containment scores between 0.7 and 0.85."""
    score = score_term("fossil species", "species")
    assert score == pytest.approx(0.7 + 0.15 * 7 / 14)
    assert 0.7 <= score <= 0.85


def test_score_ignores_short_fragments() -> None:
    """Test that terms under three characters never match partially."""
    assert score_term("depth", "d") == 0.0
    assert score_term("w", "width") == 0.0


def test_score_fuzzy_typo() -> None:
    """Test that a close misspelling scores by similarity."""
    assert score_term("formaton", "formation") > 0.9


def test_score_unrelated() -> None:
    """Test that unrelated text scores 0."""
    assert score_term("zzqx", "species") == 0.0


def test_score_header_uses_aliases() -> None:
    """Test that aliases match as well as display names."""
    assert score_header("Taxon", TargetField.SPECIES) == 1.0
    assert score_header("Locality", TargetField.LOCATION) == 1.0
    assert score_header("Acc. No.", TargetField.INVENTORY_ID) == 1.0


def test_best_field_for_header() -> None:
    """Test that each header resolves to its single best field."""
    assert best_field_for_header("Species")[0] == TargetField.SPECIES
    assert best_field_for_header("Weight")[0] == TargetField.WEIGHT
    assert best_field_for_header("Weight Unit")[0] == TargetField.WEIGHT_UNIT
    assert best_field_for_header("Zzqx") == (None, 0.0)


# =============================================================================
# Confidence Level Tests
# =============================================================================


@pytest.mark.parametrize(
    "score,level",
    [
        (1.0, ConfidenceLevel.HIGH),
        (0.9, ConfidenceLevel.HIGH),
        (0.75, ConfidenceLevel.MEDIUM),
        (0.7, ConfidenceLevel.MEDIUM),
        (0.65, ConfidenceLevel.LOW),
        (0.0, ConfidenceLevel.NONE),
    ],
)
def test_confidence_levels(score: float, level: ConfidenceLevel) -> None:
    """Test the score thresholds of each confidence level."""
    assert ConfidenceLevel.from_score(score) == level


# =============================================================================
# Mapping Generation Tests
# =============================================================================


def test_generate_mapping_basic() -> None:
    """Test mapping of a typical collection export."""
    result = make_tabular(
        ["Inventory ID", "Species", "Genus", "Period", "Locality", "Comments"],
        [["F-1", "Elrathia kingii", "Elrathia", "Cambrian", "Utah", "nice"]],
    )
    config = generate_mapping(result)

    assert len(config.mappings) == len(TargetField)
    assert [m.target_field for m in config.mappings] == list(TargetField)
    assert config.mapping_for(TargetField.SPECIES).source_columns == ["Species"]
    assert config.mapping_for(TargetField.INVENTORY_ID).source_columns == ["Inventory ID"]
    assert config.mapping_for(TargetField.LOCATION).source_columns == ["Locality"]
    assert config.mapping_for(TargetField.NOTES).source_columns == ["Comments"]
    assert config.mapping_for(TargetField.SPECIES).confidence_level == ConfidenceLevel.HIGH
    assert not any(m.confirmed for m in config.mappings)
    assert config.has_all_required_fields_mapped()


def test_generate_mapping_each_column_used_once() -> None:
    """Test that a header is never assigned to two fields."""
    result = make_tabular(["Species", "Name", "Width", "Height", "Notes", "Remarks"], [])
    config = generate_mapping(result)

    seen: list[str] = []
    for mapping in config.mappings:
        seen.extend(mapping.source_columns)
    assert len(seen) == len(set(seen))
    assert config.conflicting_columns() == {}


def test_generate_mapping_several_columns_per_field() -> None:
    """Test that several headers can feed one field, in header order."""
    result = make_tabular(["Notes", "Species", "Remarks"], [])
    config = generate_mapping(result)
    assert config.mapping_for(TargetField.NOTES).source_columns == ["Notes", "Remarks"]


def test_generate_mapping_missing_species() -> None:
    """Test that an unmapped species column is reported."""
    result = make_tabular(["Genus", "Period"], [])
    config = generate_mapping(result)
    assert config.unmapped_required_fields() == [TargetField.SPECIES]
    assert not config.has_all_required_fields_mapped()


def test_generate_mapping_is_deterministic() -> None:
    """Test that the same headers always give the same mapping."""
    headers = ["Acc No", "Taxon", "Fm", "Lat", "Lon", "Price", "Value", "Drawer"]
    result = make_tabular(headers, [])
    assert generate_mapping(result) == generate_mapping(result)


def test_generate_mapping_trilobase_flags() -> None:
    """Test that found/bought/traded columns all feed the acquisition method."""
    result = make_tabular(["Species", "Found", "Bought", "Traded"], [])
    config = generate_mapping(result)
    assert config.mapping_for(TargetField.ACQUISITION_METHOD).source_columns == [
        "Found",
        "Bought",
        "Traded",
    ]


def test_mapping_progress() -> None:
    """Test the fraction of mapped fields."""
    result = make_tabular(["Species", "Genus"], [])
    config = generate_mapping(result)
    assert config.mapping_progress() == pytest.approx(2 / len(TargetField))


# =============================================================================
# Manual Update Tests
# =============================================================================


def test_update_mapping_confirms_field() -> None:
    """Test that a manual update replaces columns and confirms the field."""
    result = make_tabular(["Taxon", "Common Name"], [])
    config = generate_mapping(result)

    updated = update_mapping(config, TargetField.SPECIES, ["Common Name", "Common Name"])
    mapping = updated.mapping_for(TargetField.SPECIES)
    assert mapping.source_columns == ["Common Name"]
    assert mapping.confirmed is True
    assert mapping.confidence == 1.0
    # Input is unchanged
    assert config.mapping_for(TargetField.SPECIES).source_columns[0] == "Taxon"
    assert not config.mapping_for(TargetField.SPECIES).confirmed


def test_update_mapping_clear() -> None:
    """Test that an empty column list unmaps a field."""
    result = make_tabular(["Species"], [])
    config = update_mapping(generate_mapping(result), TargetField.SPECIES, [])
    mapping = config.mapping_for(TargetField.SPECIES)
    assert mapping.source_columns == []
    assert mapping.confidence == 0.0
    assert config.unmapped_required_fields() == [TargetField.SPECIES]


def test_update_mapping_reports_shared_columns(caplog) -> None:
    """Test that moving a claimed column leaves a reported conflict."""
    result = make_tabular(["Species", "Genus"], [])
    config = generate_mapping(result)

    with caplog.at_level(logging.WARNING):
        updated = update_mapping(config, TargetField.FAMILY, ["Genus"])

    assert updated.mapping_for(TargetField.GENUS).source_columns == ["Genus"]
    assert updated.conflicting_columns() == {"Genus": [TargetField.FAMILY, TargetField.GENUS]}
    assert "still mapped" in caplog.text


def test_apply_overrides_unknown_column() -> None:
    """Test that overrides naming absent columns are rejected."""
    result = make_tabular(["Species"], [])
    config = generate_mapping(result)
    with pytest.raises(ValueError, match="Nope"):
        apply_overrides(config, {TargetField.GENUS: ["Nope"]})


def test_apply_overrides_multiple() -> None:
    """Test applying several overrides at once."""
    result = make_tabular(["Name", "Fossil", "Where"], [])
    config = apply_overrides(
        generate_mapping(result),
        {TargetField.SPECIES: ["Fossil"], TargetField.LOCATION: ["Where"]},
    )
    assert config.mapping_for(TargetField.SPECIES).source_columns == ["Fossil"]
    assert config.mapping_for(TargetField.LOCATION).source_columns == ["Where"]
    assert config.mapping_for(TargetField.LOCATION).confirmed
