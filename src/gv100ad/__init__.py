"""
gv100ad: Parser and in-memory database for the German municipality directory.

Reads the fixed-width GV100AD file published quarterly by the Federal
Statistical Office (Destatis) and answers key lookups and hierarchy queries
over Länder, Regierungsbezirke, Regionen, Kreise, Gemeindeverbände and
Gemeinden.
"""

from importlib.metadata import version

from gv100ad.database import Database
from gv100ad.errors import (
    ConstructionError,
    DuplicateKeyError,
    Gv100adError,
    KeyFormatError,
    LineParseError,
    RecordNotFoundError,
)
from gv100ad.model import Kind, parse_key

__version__ = version("gv100ad")

__all__ = [
    "ConstructionError",
    "Database",
    "DuplicateKeyError",
    "Gv100adError",
    "KeyFormatError",
    "Kind",
    "LineParseError",
    "RecordNotFoundError",
    "__version__",
    "parse_key",
]
