"""
Upload parsers module.
"""

from parsers.csv_parser import (
    parse_csv,
    split_header,
    decode_content,
    detect_encoding,
    widest_row,
    CsvParseResult,
    DecodedText,
)

__all__ = [
    "parse_csv",
    "split_header",
    "decode_content",
    "detect_encoding",
    "widest_row",
    "CsvParseResult",
    "DecodedText",
]
