"""Enumerations used by the specimen record.

Every enum stores its serialized name as the member value. ``from_text``
accepts the value, the member name or a known alias (case-insensitive) and
returns ``None`` when the text is not recognized, leaving the fallback
decision to the caller.
"""

from enum import Enum
from typing import Optional


def _match_member(enum_cls, text: Optional[str], aliases: dict[str, str] | None = None):
    """Find the enum member matching free text, or None."""
    if text is None:
        return None
    key = text.strip().lower()
    if not key:
        return None
    if aliases and key in aliases:
        return enum_cls(aliases[key])
    for member in enum_cls:
        if key in (member.value.lower(), member.name.lower(), member.display_name.lower()):
            return member
    return None


class FossilElement(str, Enum):
    """Anatomical element or fossil type."""

    TOOTH = "tooth"
    JAW = "jaw"
    SKULL = "skull"
    BONE = "bone"
    CLAW = "claw"
    HORN = "horn"
    RIB = "rib"
    VERTEBRA = "vertebra"
    SHELL = "shell"
    AMMONITE = "ammonite"
    MATRIX = "matrix"
    COPROLITE = "coprolite"
    IMPRINT = "imprint"
    TRACK = "track"
    EGG = "egg"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional["FossilElement"]:
        return _match_member(
            cls,
            text,
            {"teeth": "tooth", "vertebrae": "vertebra", "footprint": "track", "trace": "track"},
        )


class SizeUnit(str, Enum):
    """Unit for width, height and length."""

    MM = "mm"
    CM = "cm"
    INCH = "inch"

    @property
    def display_name(self) -> str:
        return {"mm": "Millimeters", "cm": "Centimeters", "inch": "Inches"}[self.value]

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional["SizeUnit"]:
        return _match_member(
            cls,
            text,
            {
                "millimeter": "mm",
                "millimeters": "mm",
                "centimeter": "cm",
                "centimeters": "cm",
                "in": "inch",
                "inches": "inch",
                '"': "inch",
            },
        )


class WeightUnit(str, Enum):
    """Unit for weight."""

    GR = "gr"
    KG = "kg"

    @property
    def display_name(self) -> str:
        return {"gr": "Grams", "kg": "Kilograms"}[self.value]

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional["WeightUnit"]:
        return _match_member(
            cls,
            text,
            {
                "g": "gr",
                "gram": "gr",
                "grams": "gr",
                "kilogram": "kg",
                "kilograms": "kg",
            },
        )


class AcquisitionMethod(str, Enum):
    """How a specimen entered the collection."""

    FOUND = "found"
    GIFTED = "gifted"
    PURCHASED = "purchased"
    TRADED = "traded"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional["AcquisitionMethod"]:
        return _match_member(
            cls,
            text,
            {
                "find": "found",
                "collected": "found",
                "gift": "gifted",
                "given": "gifted",
                "buy": "purchased",
                "bought": "purchased",
                "purchase": "purchased",
                "trade": "traded",
                "exchange": "traded",
                "exchanged": "traded",
            },
        )


class Condition(str, Enum):
    """Preparation state of a specimen. OTHER keeps the raw text as detail."""

    CAST = "cast"
    COMPOSED = "composed"
    ENHANCED = "enhanced"
    NATURAL = "natural"
    RECONSTRUCTED = "reconstructed"
    RESTORED = "restored"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional["Condition"]:
        return _match_member(cls, text)


# Currency symbols that unambiguously identify one currency
CURRENCY_SYMBOLS: dict[str, str] = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
    "¥": "JPY",
    "₽": "RUB",
    "₹": "INR",
    "₩": "KRW",
    "₺": "TRY",
    "₪": "ILS",
    "฿": "THB",
}


class Currency(str, Enum):
    """ISO 4217 currencies supported for prices and valuations."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"
    CHF = "CHF"
    CNY = "CNY"
    SEK = "SEK"
    NOK = "NOK"
    DKK = "DKK"
    PLN = "PLN"
    CZK = "CZK"
    HUF = "HUF"
    RUB = "RUB"
    BRL = "BRL"
    INR = "INR"
    KRW = "KRW"
    MXN = "MXN"
    SGD = "SGD"
    HKD = "HKD"
    NZD = "NZD"
    ZAR = "ZAR"
    TRY = "TRY"
    ILS = "ILS"
    AED = "AED"
    THB = "THB"
    MYR = "MYR"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional["Currency"]:
        if text is not None and text.strip() in CURRENCY_SYMBOLS:
            return cls(CURRENCY_SYMBOLS[text.strip()])
        return _match_member(cls, text)
