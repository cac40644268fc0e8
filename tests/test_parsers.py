"""Unit tests for CSV and XLSX parsing."""

import io
import logging

import pytest
from openpyxl import Workbook

from fossilvault.services.import_service import (
    SourceReadError,
    detect_delimiter,
    parse_csv,
    parse_file,
    parse_xlsx,
)


def _make_xlsx(headers: list, rows: list[list]) -> bytes:
    """Helper to create XLSX bytes from headers and rows."""
    wb = Workbook()
    ws = wb.active
    ws.append(headers)
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


# =============================================================================
# Delimiter Detection Tests
# =============================================================================


def test_detect_comma() -> None:
    """Test that comma separated text is detected."""
    assert detect_delimiter("a,b,c\n1,2,3\n4,5,6") == ","


def test_detect_semicolon() -> None:
    """Test that semicolons win when they split lines consistently."""
    content = "Species;Width;Weight\nElrathia kingii;2,5;12\nPhacops rana;3,1;40\n"
    assert detect_delimiter(content) == ";"


def test_detect_tab() -> None:
    """Test tab separated text."""
    assert detect_delimiter("Species\tGenus\nA\tB\nC\tD\n") == "\t"


def test_detect_pipe() -> None:
    """Test pipe separated text."""
    assert detect_delimiter("Species|Genus|Period\nA|B|C\n") == "|"


def test_detect_empty_defaults_to_comma() -> None:
    """Test that empty content falls back to comma."""
    assert detect_delimiter("") == ","


# =============================================================================
# CSV Parsing Tests
# =============================================================================


def test_parse_csv_basic() -> None:
    """Test basic CSV parsing."""
    content = "Species,Genus,Period\nElrathia kingii,Elrathia,Cambrian\nPhacops rana,Phacops,Devonian\n"
    result = parse_csv(content.encode("utf-8"), "fossils.csv")
    assert result.headers == ["Species", "Genus", "Period"]
    assert result.row_count == 2
    assert result.rows[0] == ["Elrathia kingii", "Elrathia", "Cambrian"]
    assert result.source_name == "fossils.csv"
    assert result.delimiter == ","
    assert result.delimiter_name == "Comma (,)"


def test_parse_csv_trims_cells_and_drops_blank_rows() -> None:
    """Test that cells are trimmed and blank lines skipped."""
    content = "Species , Genus\n  Elrathia kingii ,Elrathia\n,\n\nPhacops rana,Phacops\n"
    result = parse_csv(content.encode("utf-8"))
    assert result.headers == ["Species", "Genus"]
    assert result.rows == [["Elrathia kingii", "Elrathia"], ["Phacops rana", "Phacops"]]


def test_parse_csv_quoted_delimiter() -> None:
    """Test that a quoted comma stays inside its cell."""
    content = 'Species,Width\nElrathia kingii,"2,5x1,8 cm"\n'
    result = parse_csv(content.encode("utf-8"))
    assert result.rows[0][1] == "2,5x1,8 cm"


def test_parse_csv_blank_header_named_by_position() -> None:
    """Test that blank headers get a positional name."""
    content = "Species,,Genus\nA,x,B\n"
    result = parse_csv(content.encode("utf-8"))
    assert result.headers == ["Species", "Column 2", "Genus"]


def test_parse_csv_utf8_bom() -> None:
    """Test that a UTF-8 byte order mark is not part of the first header."""
    content = "\ufeffSpecies,Genus\nA,B\n"
    result = parse_csv(content.encode("utf-8"))
    assert result.headers[0] == "Species"


def test_parse_csv_legacy_encoding() -> None:
    """Test CSV saved with a Windows code page (accented characters)."""
    content = "Species,Locality\nEncrinus liliiformis,Crailsheim Württemberg\n"
    result = parse_csv(content.encode("cp1252"))
    assert result.rows[0][1] == "Crailsheim Württemberg"


def test_parse_csv_headers_only() -> None:
    """Test CSV with headers but no data rows."""
    result = parse_csv(b"Species,Genus\n")
    assert result.headers == ["Species", "Genus"]
    assert result.rows == []
    assert result.row_count == 0


def test_parse_csv_no_headers() -> None:
    """Test error on CSV with no content."""
    with pytest.raises(SourceReadError, match="no headers"):
        parse_csv(b"")


def test_parse_csv_row_limit(caplog) -> None:
    """Test that rows beyond the limit are dropped with a warning."""
    lines = ["Species"] + [f"Specimen {i}" for i in range(10)]
    content = "\n".join(lines).encode("utf-8")
    with caplog.at_level(logging.WARNING):
        result = parse_csv(content, "big.csv", max_rows=4)
    assert result.row_count == 4
    assert result.rows[-1] == ["Specimen 3"]
    assert "only the first 4" in caplog.text


def test_sample_rows_and_column_values() -> None:
    """Test TabularResult helpers used by previews."""
    lines = ["Species,Genus"] + [f"S{i},G{i}" for i in range(8)]
    result = parse_csv("\n".join(lines).encode("utf-8"))
    assert len(result.sample_rows()) == 5
    assert result.column_values(1)[:2] == ["G0", "G1"]
    assert result.column_index("Genus") == 1
    assert result.column_index("Missing") == -1


# =============================================================================
# XLSX Parsing Tests
# =============================================================================


def test_parse_xlsx_basic() -> None:
    """Test basic XLSX parsing with numeric cells turned into text."""
    content = _make_xlsx(
        ["Species", "Width", "Period"],
        [
            ["Elrathia kingii", 25, "Cambrian"],
            ["Phacops rana", 3.5, "Devonian"],
        ],
    )
    result = parse_xlsx(content, "fossils.xlsx")
    assert result.headers == ["Species", "Width", "Period"]
    assert result.row_count == 2
    assert result.rows[0] == ["Elrathia kingii", "25", "Cambrian"]
    assert result.rows[1][1] == "3.5"
    assert result.delimiter == ""


def test_parse_xlsx_first_sheet_only() -> None:
    """Test that only the first sheet is parsed."""
    wb = Workbook()
    ws1 = wb.active
    ws1.append(["Species"])
    ws1.append(["First Sheet Fossil"])
    ws2 = wb.create_sheet("Sheet2")
    ws2.append(["Species"])
    ws2.append(["Second Sheet Fossil"])
    buf = io.BytesIO()
    wb.save(buf)

    result = parse_xlsx(buf.getvalue())
    assert result.rows == [["First Sheet Fossil"]]


def test_parse_xlsx_skips_empty_rows_and_pads_short_rows() -> None:
    """Test that empty rows are skipped and missing cells become blank."""
    content = _make_xlsx(
        ["Species", "Genus", "Period"],
        [["Elrathia kingii"], [None, None, None], ["Phacops rana", "Phacops", "Devonian"]],
    )
    result = parse_xlsx(content)
    assert result.rows == [
        ["Elrathia kingii", "", ""],
        ["Phacops rana", "Phacops", "Devonian"],
    ]


def test_parse_xlsx_invalid_bytes() -> None:
    """Test that a non-workbook upload is a read error."""
    with pytest.raises(SourceReadError, match="Unable to open workbook"):
        parse_xlsx(b"not a workbook")


# =============================================================================
# File Dispatch Tests
# =============================================================================


def test_parse_file_csv(tmp_path) -> None:
    """Test reading a CSV file from disk."""
    path = tmp_path / "collection.csv"
    path.write_text("Species;Genus\nA;B\n", encoding="utf-8")
    result = parse_file(path)
    assert result.source_name == "collection.csv"
    assert result.delimiter == ";"
    assert result.rows == [["A", "B"]]


def test_parse_file_xlsx(tmp_path) -> None:
    """Test reading an XLSX file from disk."""
    path = tmp_path / "collection.xlsx"
    path.write_bytes(_make_xlsx(["Species"], [["Elrathia kingii"]]))
    result = parse_file(path)
    assert result.rows == [["Elrathia kingii"]]


def test_parse_file_unsupported_type(tmp_path) -> None:
    """Test that unknown extensions are rejected."""
    path = tmp_path / "collection.pdf"
    path.write_bytes(b"%PDF")
    with pytest.raises(SourceReadError, match="Unsupported file type"):
        parse_file(path)


def test_parse_file_missing(tmp_path) -> None:
    """Test that a missing file is a read error."""
    with pytest.raises(SourceReadError, match="Unable to open file"):
        parse_file(tmp_path / "missing.csv")
