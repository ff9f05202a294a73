"""
Unit tests for the delimited text parser.
"""

import pytest

from parsers.csv_parser import (
    parse_csv,
    split_line,
    split_header,
    detect_encoding,
    decode_content,
    detect_separator,
    column_labels,
    UTF8,
    LATIN1,
)
from exceptions import ImportFileError


# ===================
# ENCODING
# ===================

class TestEncoding:
    """Tests for encoding detection."""

    def test_utf8_file(self):
        content = "Bjørnstad AS;100\n".encode("utf-8")
        assert detect_encoding(content) == UTF8
        assert decode_content(content).text.startswith("Bjørnstad AS")

    def test_latin1_file_with_norwegian_letters(self):
        """Latin-1 bytes for æøå are invalid UTF-8 and get re-decoded."""
        content = "Bjørnstad AS;100\nÆrø Bakeri;200\n".encode("latin-1")
        decoded = decode_content(content)
        assert decoded.encoding == LATIN1
        assert "Bjørnstad AS" in decoded.text
        assert "Ærø Bakeri" in decoded.text

    def test_invalid_utf8_without_norwegian_letters_stays_utf8(self):
        content = b"Acme\xff;100\n"
        assert detect_encoding(content) == UTF8

    def test_utf8_bom_is_dropped(self):
        content = "\ufeffOrg.nr;Navn\n".encode("utf-8")
        assert decode_content(content).text.startswith("Org.nr")


# ===================
# SPLITTING
# ===================

class TestSplitLine:
    """Tests for split_line."""

    def test_semicolon_preferred(self):
        assert detect_separator("a;b,c") == ";"
        assert split_line("a;b,c") == ["a", "b,c"]

    def test_comma_when_no_semicolon(self):
        assert split_line("a, b ,c") == ["a", "b", "c"]

    def test_quoted_separator_is_literal(self):
        assert split_line('a;"b;c";d') == ["a", "b;c", "d"]
        assert split_line('"Acme, Avd. Oslo",1000') == ["Acme, Avd. Oslo", "1000"]

    def test_empty_fields_kept(self):
        assert split_line(";Kari Nordmann;500") == ["", "Kari Nordmann", "500"]


# ===================
# PARSE
# ===================

class TestParseCsv:
    """Tests for parse_csv."""

    def test_parses_rows_and_skips_blank_lines(self):
        content = b"987654321;Acme AS;10 000\r\n\r\n;Kari;500\r\n   \n"
        result = parse_csv(content)

        assert result.rows == [
            ["987654321", "Acme AS", "10 000"],
            ["", "Kari", "500"],
        ]
        assert result.row_count == 2
        assert result.column_count == 3
        assert result.encoding == UTF8

    def test_empty_file_rejected(self):
        with pytest.raises(ImportFileError):
            parse_csv(b"")

    def test_whitespace_only_file_rejected(self):
        with pytest.raises(ImportFileError) as exc:
            parse_csv(b"\n \r\n")
        assert exc.value.code == "IMPORT_FILE_INVALID"

    def test_ragged_rows_are_kept_as_is(self):
        """Short rows are not padded; missing fields read as empty later."""
        result = parse_csv(b"a;b;c\nd\n")
        assert result.rows == [["a", "b", "c"], ["d"]]

    def test_column_count_is_widest_row(self):
        result = parse_csv(b"a;b\nc;d;e;f\ng\n")
        assert result.column_count == 4


class TestSplitHeader:

    def test_with_header(self):
        labels, data = split_header([["Org.nr", "Navn"], ["1", "A"]], has_header_row=True)
        assert labels == ["Org.nr", "Navn"]
        assert data == [["1", "A"]]

    def test_without_header_generates_labels(self):
        labels, data = split_header([["1", "A", "3"]], has_header_row=False)
        assert labels == ["Kolonne 1", "Kolonne 2", "Kolonne 3"]
        assert data == [["1", "A", "3"]]

    def test_generated_labels_cover_widest_row(self):
        labels, _ = split_header([["1", "A"], ["2", "B", "3"]], has_header_row=False)
        assert labels == ["Kolonne 1", "Kolonne 2", "Kolonne 3"]

    def test_column_labels(self):
        assert column_labels(2) == ["Kolonne 1", "Kolonne 2"]
