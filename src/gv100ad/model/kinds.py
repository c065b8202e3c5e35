"""
Administrative kinds and classification codes of the GV100AD registry.

A GV100AD line starts with a two-digit record type (Satzart) that selects one
of six kinds. Land, Regierungsbezirk, Kreis and Gemeinde form a strict
hierarchy addressed by key prefixes; Region and Gemeindeverband are scoped
within a Land.
"""

from enum import Enum, IntEnum


class Kind(str, Enum):
    """Administrative kind of a record."""

    LAND = "Land"
    REGIERUNGSBEZIRK = "Regierungsbezirk"
    REGION = "Region"
    KREIS = "Kreis"
    VERBAND = "Gemeindeverband"
    GEMEINDE = "Gemeinde"

    @property
    def key_length(self) -> int:
        """Number of digits in the canonical key text."""
        return {
            Kind.LAND: 2,
            Kind.REGIERUNGSBEZIRK: 3,
            Kind.REGION: 4,
            Kind.KREIS: 5,
            Kind.VERBAND: 9,
            Kind.GEMEINDE: 8,
        }[self]

    @property
    def record_type(self) -> "RecordType":
        """Satzart used for this kind in GV100AD files."""
        return RecordType[self.name]

    @property
    def is_hierarchical(self) -> bool:
        """Whether the kind is addressed by a strict key prefix."""
        return self in HIERARCHY

    @property
    def depth(self) -> int:
        """Position in the strict hierarchy (Land is 0)."""
        if not self.is_hierarchical:
            msg = f"{self.value} is not part of the strict key hierarchy"
            raise ValueError(msg)
        return HIERARCHY.index(self)

    @classmethod
    def from_string(cls, value: str) -> "Kind":
        """Create Kind from its German name, member name or English alias."""
        normalized = value.strip().lower().replace("-", "_")
        for kind in cls:
            if normalized in (kind.value.lower(), kind.name.lower()):
                return kind
        if normalized in _ALIASES:
            return _ALIASES[normalized]
        msg = f"Unknown kind: {value}. Valid: {[k.value for k in cls]}"
        raise ValueError(msg)


HIERARCHY: tuple[Kind, ...] = (
    Kind.LAND,
    Kind.REGIERUNGSBEZIRK,
    Kind.KREIS,
    Kind.GEMEINDE,
)

_ALIASES: dict[str, Kind] = {
    "state": Kind.LAND,
    "government_district": Kind.REGIERUNGSBEZIRK,
    "rb": Kind.REGIERUNGSBEZIRK,
    "district": Kind.KREIS,
    "association": Kind.VERBAND,
    "municipality": Kind.GEMEINDE,
}


class RecordType(IntEnum):
    """Record type (Satzart) discriminator in columns 1-2 of every line."""

    LAND = 10
    REGIERUNGSBEZIRK = 20
    REGION = 30
    KREIS = 40
    VERBAND = 50
    GEMEINDE = 60

    @property
    def kind(self) -> Kind:
        return Kind[self.name]


class KreisType(IntEnum):
    """Documented Textkennzeichen values for Kreis records."""

    KREISFREIE_STADT = 41
    STADTKREIS = 42
    KREIS = 43
    LANDKREIS = 44
    REGIONALVERBAND = 45

    @classmethod
    def lookup(cls, code: int | None) -> "KreisType | None":
        """Map a raw code to a member, or None if the code is not documented."""
        if code is None or code not in cls._value2member_map_:
            return None
        return cls(code)


class GemeindeType(IntEnum):
    """Documented Textkennzeichen values for Gemeinde records."""

    MARKT = 60
    KREISFREIE_STADT = 61
    STADTKREIS = 62
    STADT = 63
    KREISANGEHOERIGE_GEMEINDE = 64
    GEMEINDEFREIES_GEBIET_BEWOHNT = 65
    GEMEINDEFREIES_GEBIET_UNBEWOHNT = 66
    GROSSE_KREISSTADT = 67

    @classmethod
    def lookup(cls, code: int | None) -> "GemeindeType | None":
        """Map a raw code to a member, or None if the code is not documented."""
        if code is None or code not in cls._value2member_map_:
            return None
        return cls(code)
