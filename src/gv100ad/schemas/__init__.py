"""
Schema definitions using Pandera for tabular exports.
"""

from gv100ad.schemas.records import (
    AreaUnitSchema,
    GemeindeSchema,
    KreisSchema,
    VerbandSchema,
)
from gv100ad.schemas.registry import SchemaInfo, SchemaRegistry

__all__ = [
    "AreaUnitSchema",
    "GemeindeSchema",
    "KreisSchema",
    "SchemaInfo",
    "SchemaRegistry",
    "VerbandSchema",
]
