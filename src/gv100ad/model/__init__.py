"""
Typed keys and records for the six GV100AD kinds.
"""

from gv100ad.model.keys import (
    KEY_TYPES,
    GemeindeKey,
    Key,
    KreisKey,
    LandKey,
    RegierungsbezirkKey,
    RegionKey,
    VerbandKey,
    can_contain,
    contains,
    parse_key,
)
from gv100ad.model.kinds import HIERARCHY, GemeindeType, Kind, KreisType, RecordType
from gv100ad.model.records import (
    CourtDistricts,
    ElectoralDistricts,
    Gemeinde,
    Kreis,
    Land,
    Record,
    Regierungsbezirk,
    Region,
    Verband,
)

__all__ = [
    "HIERARCHY",
    "KEY_TYPES",
    "CourtDistricts",
    "ElectoralDistricts",
    "Gemeinde",
    "GemeindeKey",
    "GemeindeType",
    "Key",
    "Kind",
    "Kreis",
    "KreisKey",
    "KreisType",
    "Land",
    "LandKey",
    "RecordType",
    "Record",
    "Regierungsbezirk",
    "RegierungsbezirkKey",
    "Region",
    "RegionKey",
    "Verband",
    "VerbandKey",
    "can_contain",
    "contains",
    "parse_key",
]
