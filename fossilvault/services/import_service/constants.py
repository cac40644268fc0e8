"""Constants for the specimen import service."""

from fossilvault.models.fields import TargetField

# Maximum rows read from one spreadsheet
MAX_ROWS = 5000

# Drafts persisted per progress batch
BATCH_SIZE = 10

# Separator used when several columns feed one field
MULTI_VALUE_SEPARATOR = ", "

# Currency applied when a price has no recognizable currency
DEFAULT_CURRENCY = "USD"

# Column matching scores
EXACT_MATCH_SCORE = 1.0
CONTAINMENT_BASE_SCORE = 0.7
CONTAINMENT_BONUS = 0.15
MIN_CONTAINMENT_LENGTH = 3
FUZZY_THRESHOLD = 0.6

# Values above these limits are flagged as unusual
MAX_REASONABLE_DIMENSION = 10_000.0
MAX_REASONABLE_WEIGHT = 1_000_000.0
MAX_REASONABLE_PRICE = 10_000_000.0

# Candidate CSV delimiters, in preference order for ties
CSV_DELIMITERS = (",", ";", "\t", "|")
DELIMITER_SAMPLE_LINES = 10

# Encodings tried in order when decoding CSV bytes
CSV_ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")

# strptime formats tried after ISO 8601, each with and without a time part
DATE_FORMATS = (
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%Y-%m-%d",
    "%d.%m.%Y",
    "%Y/%m/%d",
)
TIME_SUFFIX = " %H:%M:%S"

# Boolean TriloBase columns feeding the acquisition method, highest priority first
ACQUISITION_FLAG_COLUMNS: dict[str, str] = {
    "found": "found",
    "gift": "gifted",
    "bought": "purchased",
    "traded": "traded",
}
TRUTHY_FLAGS = {"1", "true"}

# Header aliases per target field; the display name is always matched too
FIELD_ALIASES: dict[TargetField, tuple[str, ...]] = {
    TargetField.KINGDOM: ("kingdom", "regnum"),
    TargetField.PHYLUM: ("phylum", "division"),
    TargetField.CLASS: ("class", "classis"),
    TargetField.ORDER: ("order", "ordo"),
    TargetField.FAMILY: ("family", "familia"),
    TargetField.GENUS: ("genus", "genera"),
    TargetField.SPECIES: (
        "species", "taxon", "scientific name", "sci name", "sci_name", "sp.",
        "binomial", "latin name", "organism", "fossil name", "specimen name", "name",
    ),
    TargetField.ELEMENT: (
        "element", "fossil element", "fossil type", "part", "body part",
        "anatomical element", "fossil part", "type", "piece",
    ),
    TargetField.INVENTORY_ID: (
        "inventory id", "inv id", "catalog id", "cat id", "specimen id", "spec id",
        "acc. no.", "acc no", "accession number", "catalog number", "id",
        "identifier", "catalog no", "specimen number", "number",
    ),
    TargetField.NOTES: (
        "notes", "note", "comments", "comment", "description", "remarks",
        "remark", "additional info", "details", "memo",
    ),
    TargetField.ERA: ("era", "geologic era", "geological era"),
    TargetField.PERIOD: ("period", "geological period", "geologic period", "time period"),
    TargetField.EPOCH: ("epoch", "geologic epoch", "geological epoch"),
    TargetField.AGE: ("age", "stage", "geologic age", "geological age", "time", "geology"),
    TargetField.LOCATION: (
        "location", "locality", "site", "place", "discovery site", "collection site",
        "found at", "where", "provenance", "origin", "site description",
    ),
    TargetField.COUNTRY: ("country", "nation", "state"),
    TargetField.FORMATION: (
        "formation", "geological formation", "geologic formation", "fm",
        "rock formation", "strata", "stratum",
    ),
    TargetField.LATITUDE: ("latitude", "lat", "coord lat", "gps lat", "y", "lat."),
    TargetField.LONGITUDE: (
        "longitude", "long", "lon", "lng", "coord long", "gps long", "gps lon",
        "x", "long.", "lon.",
    ),
    TargetField.WIDTH: ("width", "w", "wide", "breadth", "dimensions", "dimension", "size"),
    TargetField.HEIGHT: ("height", "h", "tall", "depth", "d"),
    TargetField.LENGTH: ("length", "l", "long"),
    TargetField.SIZE_UNIT: (
        "size unit", "unit", "measurement unit", "dimension unit", "units", "measure",
    ),
    TargetField.WEIGHT: ("weight", "mass", "wt", "wt.", "grams", "kilograms"),
    TargetField.WEIGHT_UNIT: ("weight unit", "mass unit", "wt unit", "weight units"),
    TargetField.COLLECTION_DATE: (
        "collection date", "collected date", "found date", "discovery date",
        "date collected", "date found", "find date", "col date",
    ),
    TargetField.ACQUISITION_DATE: (
        "acquisition date", "acquired date", "purchase date", "acq date",
        "date acquired", "obtained date", "date obtained",
    ),
    TargetField.ACQUISITION_METHOD: (
        "acquisition method", "acq method", "how acquired", "obtained by",
        "acquisition", "source", "acquired from", "method", "found", "bought",
        "traded", "gift", "for sale", "for trade",
    ),
    TargetField.CONDITION: ("condition", "preservation", "quality", "state", "grade", "rating"),
    TargetField.PRICE_PAID: (
        "price paid", "purchase price", "cost", "paid", "price", "bought for",
        "amount paid", "amount",
    ),
    TargetField.PRICE_PAID_CURRENCY: (
        "price paid currency", "purchase currency", "paid currency", "currency paid",
        "cost currency",
    ),
    TargetField.ESTIMATED_VALUE: (
        "estimated value", "value", "est value", "worth", "appraisal",
        "estimated price", "market value", "current value",
    ),
    TargetField.ESTIMATED_VALUE_CURRENCY: (
        "estimated value currency", "value currency", "est currency", "appraisal currency",
    ),
    TargetField.STORAGE_ROOM: (
        "storage room", "room", "storage location", "stored in room", "location room",
    ),
    TargetField.STORAGE_CABINET: (
        "storage cabinet", "cabinet", "drawer unit", "stored in cabinet",
    ),
    TargetField.STORAGE_DRAWER: ("storage drawer", "drawer", "tray", "stored in drawer"),
    TargetField.TAGS: (
        "tags", "tag names", "labels", "keywords", "categories", "tag", "label",
    ),
}

# Fields whose text is parsed as a number
DIMENSION_FIELDS = (TargetField.WIDTH, TargetField.HEIGHT, TargetField.LENGTH)
PRICE_FIELDS = (TargetField.PRICE_PAID, TargetField.ESTIMATED_VALUE)
COORDINATE_LIMITS: dict[TargetField, float] = {
    TargetField.LATITUDE: 90.0,
    TargetField.LONGITUDE: 180.0,
}
CURRENCY_FIELDS = (TargetField.PRICE_PAID_CURRENCY, TargetField.ESTIMATED_VALUE_CURRENCY)
DATE_FIELDS = (TargetField.COLLECTION_DATE, TargetField.ACQUISITION_DATE)
