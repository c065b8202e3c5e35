"""
Record types, one per GV100AD kind.

Records are immutable attribute bags. All validation happens in the line
parser; measures that are blank in the source are None, never zero.
"""

from dataclasses import dataclass
from datetime import date
from typing import ClassVar

from gv100ad.model.keys import (
    GemeindeKey,
    Key,
    KreisKey,
    LandKey,
    RegierungsbezirkKey,
    RegionKey,
    VerbandKey,
)
from gv100ad.model.kinds import GemeindeType, Kind, KreisType


@dataclass(frozen=True)
class Record:
    """Fields shared by all records."""

    kind: ClassVar[Kind]

    territorial_date: date
    key: Key
    name: str


@dataclass(frozen=True)
class Land(Record):
    """A Land (state), record type 10."""

    kind: ClassVar[Kind] = Kind.LAND

    key: LandKey
    seat_of_government: str | None = None


@dataclass(frozen=True)
class Regierungsbezirk(Record):
    """A Regierungsbezirk (government district), record type 20."""

    kind: ClassVar[Kind] = Kind.REGIERUNGSBEZIRK

    key: RegierungsbezirkKey
    seat_of_administration: str | None = None


@dataclass(frozen=True)
class Region(Record):
    """A Region (Baden-Württemberg only), record type 30."""

    kind: ClassVar[Kind] = Kind.REGION

    key: RegionKey
    seat_of_administration: str | None = None


@dataclass(frozen=True)
class Kreis(Record):
    """A Kreis (district), record type 40."""

    kind: ClassVar[Kind] = Kind.KREIS

    key: KreisKey
    seat_of_administration: str | None = None
    classification_code: int | None = None

    @property
    def classification(self) -> KreisType | None:
        """Documented meaning of the Textkennzeichen, if any."""
        return KreisType.lookup(self.classification_code)


@dataclass(frozen=True)
class Verband(Record):
    """
    A Gemeindeverband (association of municipalities), record type 50.

    The Textkennzeichen is kept as the raw code only.
    """

    kind: ClassVar[Kind] = Kind.VERBAND

    key: VerbandKey
    seat_of_administration: str | None = None
    classification_code: int | None = None


@dataclass(frozen=True)
class CourtDistricts:
    """Court districts (Gerichtsbarkeit) a Gemeinde belongs to."""

    oberlandesgericht: str
    landgericht: str
    amtsgericht: str


@dataclass(frozen=True)
class ElectoralDistricts:
    """
    Bundestag electoral districts (Wahlkreise) of a Gemeinde.

    Large cities span several districts, given as an inclusive range that may
    contain gaps.
    """

    first: int
    last: int | None = None

    @property
    def is_range(self) -> bool:
        return self.last is not None


@dataclass(frozen=True)
class Gemeinde(Record):
    """A Gemeinde (municipality), record type 60."""

    kind: ClassVar[Kind] = Kind.GEMEINDE

    key: GemeindeKey
    verband: int = 0
    classification_code: int | None = None
    area_ha: int | None = None
    population_total: int | None = None
    population_male: int | None = None
    postal_code: str | None = None
    postal_code_unambiguous: bool = True
    tax_office_district: int | None = None
    court_districts: CourtDistricts | None = None
    employment_agency_district: int | None = None
    electoral_districts: ElectoralDistricts | None = None

    @property
    def classification(self) -> GemeindeType | None:
        """Documented meaning of the Textkennzeichen, if any."""
        return GemeindeType.lookup(self.classification_code)

    @property
    def population_female(self) -> int | None:
        if self.population_total is None or self.population_male is None:
            return None
        return self.population_total - self.population_male

    @property
    def verband_key(self) -> VerbandKey:
        """Key of the Gemeindeverband this Gemeinde belongs to."""
        return self.key.verband_key(self.verband)

    @property
    def ars(self) -> str:
        """12-digit Amtlicher Regionalschlüssel."""
        return self.key.ars(self.verband)

