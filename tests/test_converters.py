"""Unit tests for value converters and draft-to-specimen conversion."""

from datetime import datetime, timezone

import pytest

from fossilvault.models.enums import (
    AcquisitionMethod,
    Condition,
    Currency,
    FossilElement,
    SizeUnit,
    WeightUnit,
)
from fossilvault.models.fields import TargetField
from fossilvault.models.geology import GeologicalEra, GeologicalPeriod
from fossilvault.services.import_service import (
    draft_to_specimen,
    parse_amount,
    parse_combined_dimensions,
    parse_date,
    parse_number,
    parse_weight,
    split_tags,
)
from fossilvault.services.import_service.converters import (
    acquisition_from_flags,
    is_iso_date,
    resolve_period,
)
from tests.conftest import TEST_OWNER_ID, make_draft


# =============================================================================
# Number Tests
# =============================================================================


@pytest.mark.parametrize(
    "text,expected",
    [
        ("42", 42.0),
        ("2,5", 2.5),
        (" 3.75 ", 3.75),
        ("-4", -4.0),
        ("1e3", 1000.0),
        ("abc", None),
        ("", None),
        (None, None),
        ("inf", None),
        ("1,000,000", None),
    ],
)
def test_parse_number(text, expected) -> None:
    """Test number parsing with decimal commas."""
    assert parse_number(text) == expected


def test_parse_combined_dimensions() -> None:
    """Test splitting "W x H unit" text."""
    parsed = parse_combined_dimensions("2,5x1,8 cm")
    assert parsed.width == 2.5
    assert parsed.height == 1.8
    assert parsed.length is None
    assert parsed.unit == SizeUnit.CM


def test_parse_combined_dimensions_three_values() -> None:
    """Test three dimensions with spaces and no unit."""
    assert tuple(parse_combined_dimensions("25 x 18 x 4")) == (25.0, 18.0, 4.0, None)


def test_parse_combined_dimensions_skips_non_numbers() -> None:
    """Test that later values move up when a token is not a number."""
    assert tuple(parse_combined_dimensions("? x 3 x 2")) == (3.0, 2.0, None, None)


def test_parse_combined_dimensions_inches() -> None:
    """Test the inch unit suffix."""
    assert parse_combined_dimensions("3X2 in").unit == SizeUnit.INCH


def test_parse_weight() -> None:
    """Test weights with and without units."""
    assert parse_weight("125 gr") == (125.0, WeightUnit.GR)
    assert parse_weight("1,2kg") == (1.2, WeightUnit.KG)
    assert parse_weight("300") == (300.0, None)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("$1,250.00", 1250.0),
        ("12,50", 1250.0),
        ("12.50 €", 12.5),
        ("€ 40", 40.0),
        ("-20", 20.0),
        ("free", None),
        (None, None),
    ],
)
def test_parse_amount(text, expected) -> None:
    """Test that prices keep only digits and the decimal point."""
    assert parse_amount(text) == expected


# =============================================================================
# Date Tests
# =============================================================================


@pytest.mark.parametrize(
    "text",
    ["2021-03-15", "15/03/2021", "15.03.2021", "2021/03/15", "03/15/2021", "2021-03-15T00:00:00Z"],
)
def test_parse_date_formats(text: str) -> None:
    """Test every supported date format gives the same UTC date."""
    assert parse_date(text) == datetime(2021, 3, 15, tzinfo=timezone.utc)


def test_parse_date_day_first() -> None:
    """Test that ambiguous dates are read day first."""
    assert parse_date("04/05/2020") == datetime(2020, 5, 4, tzinfo=timezone.utc)


def test_parse_date_with_time() -> None:
    """Test a date with a time of day."""
    assert parse_date("2021-03-15 10:30:00") == datetime(2021, 3, 15, 10, 30, tzinfo=timezone.utc)


def test_parse_date_invalid() -> None:
    """Test that unknown formats give None."""
    assert parse_date("March 2021") is None
    assert parse_date("") is None


def test_is_iso_date() -> None:
    """Test ISO detection."""
    assert is_iso_date("2021-03-15")
    assert is_iso_date("2021-03-15T10:00:00+02:00")
    assert not is_iso_date("15/03/2021")


# =============================================================================
# Tag, Flag and Period Tests
# =============================================================================


def test_split_tags() -> None:
    """Test splitting tags on commas and semicolons."""
    assert split_tags("trilobite, cambrian;Utah ,") == ["trilobite", "cambrian", "Utah"]
    assert split_tags(None) == []


def test_acquisition_from_flags() -> None:
    """Test TriloBase flag priority."""
    assert acquisition_from_flags({"gift": "1"}) == "gifted"
    assert acquisition_from_flags({"traded": "TRUE", "bought": "true"}) == "purchased"
    assert acquisition_from_flags({"found": "0", "bought": "no"}) is None


def test_resolve_period() -> None:
    """Test modern and legacy period names."""
    assert resolve_period("Cretaceous") == (GeologicalPeriod.CRETACEOUS, False)
    assert resolve_period("Paleocene") == (GeologicalPeriod.PALEOGENE, True)
    assert resolve_period("Nope") == (None, False)


# =============================================================================
# Draft Conversion Tests
# =============================================================================


def test_draft_to_specimen_full() -> None:
    """Test conversion of a fully populated draft."""
    draft = make_draft(
        0,
        species="Elrathia kingii",
        genus="Elrathia",
        period="Cambrian",
        element="whole body",
        location="House Range",
        country="USA",
        latitude="39.2",
        longitude="-113.3",
        width="2,5x1,8 cm",
        weight="125 gr",
        collection_date="15/03/2021",
        acquisition_method="bought",
        condition="restored",
        inventory_id="F-001",
        tags="trilobite; cambrian",
        storage_cabinet="A",
        storage_drawer="3",
        price_paid="$40",
        estimated_value="60",
        estimated_value_currency="eur",
    )
    specimen = draft_to_specimen(draft, TEST_OWNER_ID)

    assert specimen.user_id == TEST_OWNER_ID
    assert specimen.taxonomy.species == "Elrathia kingii"
    assert specimen.taxonomy.genus == "Elrathia"
    assert specimen.geological_time.period == GeologicalPeriod.CAMBRIAN
    assert specimen.geological_time.era == GeologicalEra.PALEOZOIC
    assert specimen.latitude == 39.2
    assert specimen.longitude == -113.3
    assert (specimen.width, specimen.height, specimen.length) == (2.5, 1.8, None)
    assert specimen.unit == SizeUnit.CM
    assert specimen.weight == 125.0
    assert specimen.weight_unit == WeightUnit.GR
    assert specimen.collection_date == datetime(2021, 3, 15, tzinfo=timezone.utc)
    assert specimen.acquisition_method == AcquisitionMethod.PURCHASED
    assert specimen.condition == Condition.RESTORED
    assert specimen.condition_detail is None
    assert specimen.inventory_id == "F-001"
    assert specimen.tag_names == ["trilobite", "cambrian"]
    assert specimen.storage.cabinet == "A"
    assert specimen.storage.drawer == "3"
    assert specimen.storage.room is None
    assert specimen.price_paid == 40.0
    assert specimen.price_paid_currency == Currency.USD
    assert specimen.estimated_value == 60.0
    assert specimen.estimated_value_currency == Currency.EUR
    assert specimen.is_favorite is False
    assert specimen.is_public is False
    assert specimen.image_urls == []


def test_draft_to_specimen_defaults() -> None:
    """Test defaults and fallbacks for a species-only draft."""
    specimen = draft_to_specimen(make_draft(0, species="Phacops rana"), TEST_OWNER_ID)
    assert specimen.element == FossilElement.OTHER
    assert specimen.unit == SizeUnit.MM
    assert specimen.weight_unit == WeightUnit.GR
    assert specimen.storage is None
    assert specimen.price_paid is None
    assert specimen.price_paid_currency is None
    assert specimen.inventory_id is None
    assert specimen.tag_names == []
    assert specimen.id


def test_draft_to_specimen_fresh_ids() -> None:
    """Test that each conversion creates a new record ID."""
    draft = make_draft(0, species="Phacops rana")
    assert draft_to_specimen(draft, TEST_OWNER_ID).id != draft_to_specimen(draft, TEST_OWNER_ID).id


def test_draft_to_specimen_unknown_enums_fall_back() -> None:
    """Test enum fallbacks and free-text condition detail."""
    draft = make_draft(
        0,
        species="A",
        element="blob",
        acquisition_method="found it on a beach",
        condition="slightly chipped",
    )
    specimen = draft_to_specimen(draft, TEST_OWNER_ID)
    assert specimen.element == FossilElement.OTHER
    assert specimen.acquisition_method == AcquisitionMethod.FOUND
    assert specimen.condition == Condition.OTHER
    assert specimen.condition_detail == "slightly chipped"


def test_draft_to_specimen_drops_invalid_numbers() -> None:
    """Test that negative, unparseable and out-of-range values are dropped.

    Prices lose their sign instead.
    """
    draft = make_draft(
        0,
        species="A",
        width="-3",
        height="tall",
        latitude="120",
        longitude="200",
        estimated_value="-15",
        collection_date="someday",
    )
    specimen = draft_to_specimen(draft, TEST_OWNER_ID)
    assert specimen.width is None
    assert specimen.height is None
    assert specimen.latitude is None
    assert specimen.longitude is None
    assert specimen.estimated_value == 15.0
    assert specimen.collection_date is None


def test_draft_to_specimen_explicit_units_win() -> None:
    """Test that unit columns override units parsed from values."""
    draft = make_draft(
        0,
        species="A",
        width="3x2 cm",
        size_unit="inch",
        weight="2 kg",
        weight_unit="gr",
    )
    specimen = draft_to_specimen(draft, TEST_OWNER_ID)
    assert specimen.unit == SizeUnit.INCH
    assert specimen.weight == 2.0
    assert specimen.weight_unit == WeightUnit.GR


def test_draft_to_specimen_separate_height_kept() -> None:
    """Test that height and length columns fill what combined width leaves."""
    draft = make_draft(0, species="A", width="3x2", height="9", length="7")
    specimen = draft_to_specimen(draft, TEST_OWNER_ID)
    assert (specimen.width, specimen.height, specimen.length) == (3.0, 2.0, 7.0)


def test_draft_to_specimen_currency_resolution() -> None:
    """Test currency from explicit column, then symbol, then default."""
    symbol = draft_to_specimen(make_draft(0, species="A", price_paid="12.50 €"), TEST_OWNER_ID)
    assert symbol.price_paid == 12.5
    assert symbol.price_paid_currency == Currency.EUR

    default = draft_to_specimen(make_draft(0, species="A", price_paid="12"), TEST_OWNER_ID, "GBP")
    assert default.price_paid_currency == Currency.GBP

    explicit = draft_to_specimen(
        make_draft(0, species="A", price_paid="$12", price_paid_currency="CHF"),
        TEST_OWNER_ID,
    )
    assert explicit.price_paid_currency == Currency.CHF


def test_draft_to_specimen_price_strips_sign_and_commas() -> None:
    """Test that commas and minus signs are removed from prices before parsing."""
    draft = make_draft(0, species="A", price_paid="-20", estimated_value="12,50")
    specimen = draft_to_specimen(draft, TEST_OWNER_ID)
    assert specimen.price_paid == 20.0
    assert specimen.estimated_value == 1250.0


def test_draft_to_specimen_legacy_period_sets_era() -> None:
    """Test that a legacy period name is stored as its modern period and era."""
    specimen = draft_to_specimen(make_draft(0, species="A", period="Precambrian"), TEST_OWNER_ID)
    assert specimen.geological_time.period == GeologicalPeriod.NEO_PROTEROZOIC
    assert specimen.geological_time.era == GeologicalEra.PROTEROZOIC
