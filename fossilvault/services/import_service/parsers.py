"""File parsing functions for CSV and XLSX imports."""

import csv
import io
import logging
from pathlib import Path

from openpyxl import load_workbook

from fossilvault.schemas.import_schemas import TabularResult

from .constants import CSV_DELIMITERS, CSV_ENCODINGS, DELIMITER_SAMPLE_LINES, MAX_ROWS
from .errors import SourceReadError

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = {".csv", ".tsv", ".txt"}
XLSX_EXTENSIONS = {".xlsx", ".xlsm"}


def _decode(file_content: bytes) -> str:
    """Decode CSV bytes with the first encoding that accepts them."""
    for encoding in CSV_ENCODINGS:
        try:
            return file_content.decode(encoding)
        except UnicodeDecodeError:
            logger.debug("CSV content is not valid %s, trying next encoding", encoding)
            continue
    raise SourceReadError("Failed to decode CSV with any supported encoding")


def _score_delimiter(lines: list[str], delimiter: str) -> float:
    """Score a delimiter by column-count consistency across sample lines.

    Consistent counts score up to 10, wider tables earn a small bonus and a
    delimiter that never splits a line is heavily penalized.
    """
    counts = [len(line.split(delimiter)) for line in lines]
    if not counts:
        return 0.0
    average = sum(counts) / len(counts)
    variance = sum((c - average) ** 2 for c in counts) / len(counts)
    consistency = 1.0 / (1.0 + variance)
    column_bonus = average * 0.1 if average > 1 else -10.0
    return consistency * 10 + column_bonus


def detect_delimiter(content: str) -> str:
    """Pick the most likely delimiter from the first lines of CSV text.

    Args:
        content: Decoded CSV text.

    Returns:
        One of the supported delimiters; "," when the text is empty.
    """
    lines = content.splitlines()[:DELIMITER_SAMPLE_LINES]
    if not lines:
        return ","
    # max() keeps the first of equal scores, so ties follow preference order
    return max(CSV_DELIMITERS, key=lambda d: _score_delimiter(lines, d))


def _normalize_headers(raw_headers: list[str]) -> list[str]:
    """Trim headers and name blank ones by position."""
    return [h.strip() or f"Column {i + 1}" for i, h in enumerate(raw_headers)]


def _truncate(rows: list[list[str]], max_rows: int, source_name: str) -> list[list[str]]:
    if len(rows) > max_rows:
        logger.warning(
            "%s has %d rows, only the first %d will be imported",
            source_name,
            len(rows),
            max_rows,
        )
        return rows[:max_rows]
    return rows


def parse_csv(
    file_content: bytes,
    source_name: str = "import.csv",
    max_rows: int = MAX_ROWS,
) -> TabularResult:
    """Parse CSV file content into headers and rows.

    Tries UTF-8 (with or without BOM), then Windows-1252, then Latin-1, and
    detects the delimiter from the first lines. Cells are trimmed and blank
    lines are dropped.

    Args:
        file_content: Raw CSV file bytes.
        source_name: File name shown in previews and summaries.
        max_rows: Rows beyond this limit are dropped with a warning.

    Returns:
        TabularResult with the header row split from the data rows.

    Raises:
        SourceReadError: If the CSV cannot be decoded or has no headers.
    """
    content = _decode(file_content)
    delimiter = detect_delimiter(content)

    try:
        reader = csv.reader(io.StringIO(content, newline=""), delimiter=delimiter)
        records = [[cell.strip() for cell in record] for record in reader]
    except csv.Error as e:
        raise SourceReadError(f"Malformed CSV: {e}") from e

    records = [r for r in records if any(r)]
    if not records:
        raise SourceReadError("CSV file has no headers")

    headers = _normalize_headers(records[0])
    rows = _truncate(records[1:], max_rows, source_name)

    logger.info(
        "Parsed %s: %d columns, %d rows, delimiter %r",
        source_name,
        len(headers),
        len(rows),
        delimiter,
    )
    return TabularResult(
        headers=headers,
        rows=rows,
        source_name=source_name,
        delimiter=delimiter,
        row_count=len(rows),
    )


def parse_xlsx(
    file_content: bytes,
    source_name: str = "import.xlsx",
    max_rows: int = MAX_ROWS,
) -> TabularResult:
    """Parse XLSX file content into headers and rows (first sheet only).

    Uses openpyxl read_only mode and iterates rows lazily to avoid loading
    the entire sheet into memory at once.

    Args:
        file_content: Raw XLSX file bytes.
        source_name: File name shown in previews and summaries.
        max_rows: Rows beyond this limit are dropped with a warning.

    Returns:
        TabularResult with an empty delimiter.

    Raises:
        SourceReadError: If the workbook cannot be opened or has no headers.
    """
    try:
        wb = load_workbook(filename=io.BytesIO(file_content), read_only=True, data_only=True)
    except Exception as e:
        raise SourceReadError(f"Unable to open workbook: {e}") from e

    try:
        ws = wb.active
        if ws is None:
            raise SourceReadError("XLSX file has no worksheets")

        row_iter = ws.iter_rows(values_only=True)
        try:
            raw_headers = next(row_iter)
        except StopIteration:
            raise SourceReadError("XLSX file is empty")

        raw = [str(h).strip() if h is not None else "" for h in raw_headers]
        while raw and not raw[-1]:
            raw.pop()
        headers = _normalize_headers(raw)
        if not headers:
            raise SourceReadError("XLSX file has no valid headers")

        rows: list[list[str]] = []
        dropped = 0
        for row_values in row_iter:
            row = [
                str(row_values[j]).strip() if j < len(row_values) and row_values[j] is not None else ""
                for j in range(len(headers))
            ]
            if not any(row):
                continue
            if len(rows) >= max_rows:
                dropped += 1
                continue
            rows.append(row)
    finally:
        wb.close()

    if dropped:
        logger.warning(
            "%s has %d rows, only the first %d will be imported",
            source_name,
            len(rows) + dropped,
            max_rows,
        )

    logger.info("Parsed %s: %d columns, %d rows", source_name, len(headers), len(rows))
    return TabularResult(
        headers=headers,
        rows=rows,
        source_name=source_name,
        delimiter="",
        row_count=len(rows),
    )


def parse_file(path: str | Path, max_rows: int = MAX_ROWS) -> TabularResult:
    """Read and parse a CSV or XLSX file from disk, choosing by extension.

    Raises:
        SourceReadError: If the file cannot be read or its type is unsupported.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in CSV_EXTENSIONS | XLSX_EXTENSIONS:
        raise SourceReadError(f"Unsupported file type: {suffix or path.name}")

    try:
        content = path.read_bytes()
    except OSError as e:
        raise SourceReadError(f"Unable to open file: {e}") from e

    if suffix in XLSX_EXTENSIONS:
        return parse_xlsx(content, path.name, max_rows)
    return parse_csv(content, path.name, max_rows)
