"""
Delimited text parser for point-of-sale sales exports.

Exports arrive as ; or , separated text, sometimes UTF-8 and sometimes
Latin-1 (older Windows tills), usually without a header row.
"""

from dataclasses import dataclass, field
from typing import Optional
import structlog

from exceptions import ImportFileError

logger = structlog.get_logger(__name__)


UTF8 = "utf-8"
LATIN1 = "latin-1"

# Letters that only decode correctly from Latin-1 when the file really is Latin-1
NORWEGIAN_LETTERS = frozenset("ÆØÅæøå")
REPLACEMENT_CHAR = "\ufffd"


# ===================
# DATA CLASSES
# ===================

@dataclass
class DecodedText:
    """Upload content decoded to text."""
    text: str
    encoding: str


@dataclass
class CsvParseResult:
    """Rows of string fields, exactly as split from the file."""
    rows: list[list[str]] = field(default_factory=list)
    encoding: str = UTF8

    @property
    def column_count(self) -> int:
        return widest_row(self.rows)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def widest_row(rows: list[list[str]]) -> int:
    """Width of the widest row; templates and column labels are fitted to it."""
    return max((len(r) for r in rows), default=0)


# ===================
# ENCODING
# ===================

def _looks_garbled(text: str) -> bool:
    return REPLACEMENT_CHAR in text or "?" in text


def detect_encoding(content: bytes) -> str:
    """
    Pick the encoding for an upload.

    UTF-8 unless decoding it produced replacement characters and Latin-1
    yields real Æ/Ø/Å letters.

    Args:
        content: Raw upload bytes

    Returns:
        "utf-8" or "latin-1"
    """
    utf8_text = content.decode("utf-8-sig", errors="replace")
    if not _looks_garbled(utf8_text):
        return UTF8

    latin1_text = content.decode(LATIN1, errors="replace")
    if any(ch in NORWEGIAN_LETTERS for ch in latin1_text):
        return LATIN1

    return UTF8


def decode_content(content: bytes) -> DecodedText:
    """Decode upload bytes; never raises on bad bytes."""
    encoding = detect_encoding(content)
    codec = "utf-8-sig" if encoding == UTF8 else encoding
    return DecodedText(
        text=content.decode(codec, errors="replace"),
        encoding=encoding,
    )


# ===================
# SPLITTING
# ===================

def detect_separator(line: str) -> str:
    """Semicolon if the line has one, otherwise comma."""
    return ";" if ";" in line else ","


def split_line(line: str, separator: Optional[str] = None) -> list[str]:
    """
    Split one line on the separator, honouring double quotes.

    Quotes toggle literal mode and are dropped from the values:
        'a;"b;c";d' → ["a", "b;c", "d"]
    """
    separator = separator or detect_separator(line)

    values: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == separator and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    values.append("".join(current).strip())
    return values


def parse_rows(text: str) -> list[list[str]]:
    """Split text into rows, skipping blank lines. Separator is detected per line."""
    return [
        split_line(line.rstrip("\r"))
        for line in text.split("\n")
        if line.strip()
    ]


# ===================
# MAIN PARSER
# ===================

def parse_csv(content: bytes, filename: Optional[str] = None) -> CsvParseResult:
    """
    Parse an uploaded sales file.

    Args:
        content: Raw file bytes
        filename: Original filename (for logging only)

    Returns:
        CsvParseResult with every non-empty line as a row

    Raises:
        ImportFileError: If the file is empty or has no rows
    """
    if not content:
        raise ImportFileError("Filen er tom", details={"filename": filename})

    decoded = decode_content(content)
    rows = parse_rows(decoded.text)

    if not rows:
        raise ImportFileError(
            "Filen inneholder ingen rader",
            details={"filename": filename, "encoding": decoded.encoding}
        )

    result = CsvParseResult(rows=rows, encoding=decoded.encoding)

    logger.info(
        "csv_parsed",
        filename=filename,
        encoding=result.encoding,
        rows=result.row_count,
        columns=result.column_count,
    )

    return result


def column_labels(column_count: int) -> list[str]:
    """Generated labels for files without a header row."""
    return [f"Kolonne {i + 1}" for i in range(column_count)]


def split_header(rows: list[list[str]], has_header_row: bool) -> tuple[list[str], list[list[str]]]:
    """
    Separate header labels from data rows.

    Without a header every row is data and labels are "Kolonne 1..N".

    Returns:
        Tuple of (labels, data rows)
    """
    if not rows:
        return [], []
    if has_header_row:
        return list(rows[0]), rows[1:]
    return column_labels(widest_row(rows)), rows
