"""
Line parser for GV100AD files.

Each line is decoded into exactly one record. The record type is taken from
columns 1-2; every other field is cut out by its fixed column position and
checked. Malformed content raises LineParseError naming the line and field;
nothing is silently skipped or guessed.
"""

from collections.abc import Callable, Iterable, Iterator
from datetime import date

from gv100ad.config.settings import ParserConfig
from gv100ad.errors import KeyFormatError, LineParseError
from gv100ad.ingestion.layout import (
    LAYOUTS,
    RECORD_TYPE,
    RECORD_WIDTH,
    TERRITORIAL_DATE,
    FieldSpec,
)
from gv100ad.model.keys import (
    GemeindeKey,
    Key,
    KreisKey,
    LandKey,
    RegierungsbezirkKey,
    RegionKey,
    VerbandKey,
)
from gv100ad.model.kinds import RecordType
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
from gv100ad.utils.logging import get_logger

log = get_logger(__name__)


class FieldReader:
    """Reads and decodes the fields of a single line."""

    def __init__(
        self,
        line: str,
        line_number: int,
        layout: dict[str, FieldSpec],
    ) -> None:
        """
        Initialize field reader.

        Args:
            line: Line without terminator, padded to the record width.
            line_number: 1-based line number for error messages.
            layout: Field positions for the line's record type.
        """
        self.line = line
        self.line_number = line_number
        self.layout = layout

    def error(self, field: str, reason: str) -> LineParseError:
        return LineParseError(self.line_number, field, reason, self.line.rstrip())

    def raw(self, name: str) -> str:
        """Field content exactly as in the line."""
        return self.layout[name].extract(self.line)

    def text(self, name: str) -> str | None:
        """Field content trimmed; None if the field is blank."""
        value = self.raw(name).strip()
        return value or None

    def integer(self, name: str) -> int:
        """Unsigned, zero-padded integer filling the whole field."""
        value = self.raw(name)
        if not (value.isascii() and value.isdigit()):
            raise self.error(name, f"expected {len(value)} digits, got {value!r}")
        return int(value)

    def optional_integer(self, name: str) -> int | None:
        """Like integer(), but a field of only spaces is absent."""
        if not self.raw(name).strip():
            return None
        return self.integer(name)

    def date(self, name: str) -> date:
        """Date in YYYYMMDD format."""
        value = self.raw(name)
        if not (value.isascii() and value.isdigit()):
            raise self.error(name, f"expected date as YYYYMMDD, got {value!r}")
        try:
            return date(int(value[0:4]), int(value[4:6]), int(value[6:8]))
        except ValueError as e:
            raise self.error(name, f"invalid date {value!r}: {e}") from e

    def key(self, name: str, key_type: type[Key]) -> Key:
        """Key in canonical text form."""
        try:
            return key_type.parse(self.raw(name))
        except KeyFormatError as e:
            raise self.error(name, e.detail) from e


def _parse_land(fields: FieldReader, territorial_date: date) -> Land:
    return Land(
        territorial_date=territorial_date,
        key=fields.key("key", LandKey),
        name=fields.text("name") or "",
        seat_of_government=fields.text("seat"),
    )


def _parse_regierungsbezirk(fields: FieldReader, territorial_date: date) -> Regierungsbezirk:
    return Regierungsbezirk(
        territorial_date=territorial_date,
        key=fields.key("key", RegierungsbezirkKey),
        name=fields.text("name") or "",
        seat_of_administration=fields.text("seat"),
    )


def _parse_region(fields: FieldReader, territorial_date: date) -> Region:
    return Region(
        territorial_date=territorial_date,
        key=fields.key("key", RegionKey),
        name=fields.text("name") or "",
        seat_of_administration=fields.text("seat"),
    )


def _parse_kreis(fields: FieldReader, territorial_date: date) -> Kreis:
    return Kreis(
        territorial_date=territorial_date,
        key=fields.key("key", KreisKey),
        name=fields.text("name") or "",
        seat_of_administration=fields.text("seat"),
        classification_code=fields.optional_integer("classification_code"),
    )


def _parse_verband(fields: FieldReader, territorial_date: date) -> Verband:
    kreis_key = fields.key("kreis_key", KreisKey)
    verband = fields.integer("verband")
    return Verband(
        territorial_date=territorial_date,
        key=VerbandKey(kreis_key.land, kreis_key.regierungsbezirk, kreis_key.kreis, verband),
        name=fields.text("name") or "",
        seat_of_administration=fields.text("seat"),
        classification_code=fields.optional_integer("classification_code"),
    )


def _parse_court_districts(fields: FieldReader) -> CourtDistricts | None:
    value = fields.raw("court_districts")
    if not value.strip():
        return None
    if " " in value:
        raise fields.error("court_districts", f"incomplete court districts {value!r}")
    return CourtDistricts(
        oberlandesgericht=value[0:1],
        landgericht=value[1:2],
        amtsgericht=value[2:4],
    )


def _parse_electoral_districts(fields: FieldReader) -> ElectoralDistricts | None:
    value = fields.raw("electoral_districts")
    if not value.strip():
        return None
    first, last = value[:3], value[3:]
    if not (first.isascii() and first.isdigit()):
        raise fields.error("electoral_districts", f"invalid first district {first!r}")
    if not last.strip():
        return ElectoralDistricts(first=int(first))
    if not (last.isascii() and last.isdigit()):
        raise fields.error("electoral_districts", f"invalid last district {last!r}")
    return ElectoralDistricts(first=int(first), last=int(last))


def _parse_gemeinde(fields: FieldReader, territorial_date: date) -> Gemeinde:
    postal_code = fields.text("postal_code")
    if postal_code is not None and not (postal_code.isascii() and postal_code.isdigit()):
        raise fields.error("postal_code", f"invalid postal code {postal_code!r}")

    return Gemeinde(
        territorial_date=territorial_date,
        key=fields.key("key", GemeindeKey),
        name=fields.text("name") or "",
        verband=fields.integer("verband"),
        classification_code=fields.optional_integer("classification_code"),
        area_ha=fields.optional_integer("area_ha"),
        population_total=fields.optional_integer("population_total"),
        population_male=fields.optional_integer("population_male"),
        postal_code=postal_code,
        # A non-blank marker (usually "*****") means several postal codes exist
        postal_code_unambiguous=fields.text("postal_code_marker") is None,
        tax_office_district=fields.optional_integer("tax_office_district"),
        court_districts=_parse_court_districts(fields),
        employment_agency_district=fields.optional_integer("employment_agency_district"),
        electoral_districts=_parse_electoral_districts(fields),
    )


_RECORD_PARSERS: dict[RecordType, Callable[[FieldReader, date], Record]] = {
    RecordType.LAND: _parse_land,
    RecordType.REGIERUNGSBEZIRK: _parse_regierungsbezirk,
    RecordType.REGION: _parse_region,
    RecordType.KREIS: _parse_kreis,
    RecordType.VERBAND: _parse_verband,
    RecordType.GEMEINDE: _parse_gemeinde,
}


class LineParser:
    """
    Parser for GV100AD lines.

    Blank lines and lines matching the configured ignore pattern yield None.
    Every other line yields a record or raises LineParseError.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        """
        Initialize line parser.

        Args:
            config: Parser configuration, defaults apply if omitted.
        """
        self.config = config or ParserConfig()
        self._ignore = self.config.ignore_regex

    def is_ignored(self, line: str) -> bool:
        """Whether a line is skipped without being parsed."""
        if not line.strip():
            return True
        return self._ignore is not None and self._ignore.search(line) is not None

    def parse_line(self, line: str, line_number: int) -> Record | None:
        """
        Parse one line.

        Args:
            line: Decoded line, with or without trailing line terminator.
            line_number: 1-based line number.

        Returns:
            Parsed record, or None for blank and ignored lines.

        Raises:
            LineParseError: If the line does not match its layout.
        """
        line = line.rstrip("\r\n")
        if self.is_ignored(line):
            return None

        if len(line) > RECORD_WIDTH:
            raise LineParseError(
                line_number,
                "line",
                f"line has {len(line)} characters, at most {RECORD_WIDTH} allowed",
                line.rstrip(),
            )
        line = line.ljust(RECORD_WIDTH)

        record_type = self._record_type(line, line_number)
        fields = FieldReader(line, line_number, LAYOUTS[record_type])
        territorial_date = fields.date(TERRITORIAL_DATE.name)

        record = _RECORD_PARSERS[record_type](fields, territorial_date)
        log.debug("Parsed record", line=line_number, kind=record.kind.value, key=str(record.key))
        return record

    def _record_type(self, line: str, line_number: int) -> RecordType:
        value = RECORD_TYPE.extract(line)
        if value.isascii() and value.isdigit() and int(value) in RecordType._value2member_map_:
            return RecordType(int(value))
        raise LineParseError(
            line_number,
            RECORD_TYPE.name,
            f"unknown record type {value!r}",
            line.rstrip(),
        )

    def iter_records(self, lines: Iterable[str]) -> Iterator[tuple[int, Record]]:
        """
        Parse lines lazily.

        Yields:
            (line number, record) for every data line.
        """
        for line_number, line in enumerate(lines, start=1):
            record = self.parse_line(line, line_number)
            if record is not None:
                yield line_number, record


def parse_line(
    line: str,
    line_number: int = 1,
    config: ParserConfig | None = None,
) -> Record | None:
    """Convenience function to parse a single line."""
    return LineParser(config).parse_line(line, line_number)
