"""
GV100AD ingestion: line sources, fixed-width layouts and the line parser.
"""

from gv100ad.ingestion.layout import LAYOUTS, RECORD_WIDTH, FieldSpec
from gv100ad.ingestion.parser import FieldReader, LineParser, parse_line
from gv100ad.ingestion.source import (
    decode_line,
    iter_lines,
    lines_from_bytes,
    lines_from_path,
)

__all__ = [
    "LAYOUTS",
    "RECORD_WIDTH",
    "FieldReader",
    "FieldSpec",
    "LineParser",
    "decode_line",
    "iter_lines",
    "lines_from_bytes",
    "lines_from_path",
    "parse_line",
]
