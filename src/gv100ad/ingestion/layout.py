"""
Fixed-width record layouts of the GV100AD text file.

Columns are 1-based and inclusive, as in the Destatis record description
("Satzbeschreibung"). Every line is 220 characters wide; columns not listed
here are filler.
"""

from dataclasses import dataclass

from gv100ad.model.kinds import RecordType

RECORD_WIDTH = 220


@dataclass(frozen=True)
class FieldSpec:
    """Position of one field within a line."""

    name: str
    start: int
    width: int

    @property
    def end(self) -> int:
        """Last column (inclusive)."""
        return self.start + self.width - 1

    def extract(self, line: str) -> str:
        return line[self.start - 1 : self.end]


RECORD_TYPE = FieldSpec("record_type", 1, 2)
TERRITORIAL_DATE = FieldSpec("territorial_date", 3, 8)
NAME = FieldSpec("name", 23, 50)
SEAT = FieldSpec("seat", 73, 50)
CLASSIFICATION_CODE = FieldSpec("classification_code", 123, 2)


def _layout(*fields: FieldSpec) -> dict[str, FieldSpec]:
    return {spec.name: spec for spec in (RECORD_TYPE, TERRITORIAL_DATE, *fields)}


LAYOUTS: dict[RecordType, dict[str, FieldSpec]] = {
    RecordType.LAND: _layout(
        FieldSpec("key", 11, 2),
        NAME,
        SEAT,
    ),
    RecordType.REGIERUNGSBEZIRK: _layout(
        FieldSpec("key", 11, 3),
        NAME,
        SEAT,
    ),
    RecordType.REGION: _layout(
        FieldSpec("key", 11, 4),
        NAME,
        SEAT,
    ),
    RecordType.KREIS: _layout(
        FieldSpec("key", 11, 5),
        NAME,
        SEAT,
        CLASSIFICATION_CODE,
    ),
    RecordType.VERBAND: _layout(
        FieldSpec("kreis_key", 11, 5),
        FieldSpec("verband", 19, 4),
        NAME,
        SEAT,
        CLASSIFICATION_CODE,
    ),
    RecordType.GEMEINDE: _layout(
        FieldSpec("key", 11, 8),
        FieldSpec("verband", 19, 4),
        NAME,
        CLASSIFICATION_CODE,
        FieldSpec("area_ha", 129, 11),
        FieldSpec("population_total", 140, 11),
        FieldSpec("population_male", 151, 11),
        FieldSpec("postal_code", 166, 5),
        FieldSpec("postal_code_marker", 171, 5),
        FieldSpec("tax_office_district", 178, 4),
        FieldSpec("court_districts", 182, 4),
        FieldSpec("employment_agency_district", 186, 5),
        FieldSpec("electoral_districts", 191, 6),
    ),
}
