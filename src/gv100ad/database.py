"""
In-memory GV100AD database.

The database is built in a single pass over the lines of a GV100AD file and
is immutable afterwards. It keeps one table per kind (key -> record) and a
parent -> children index over the strict hierarchy

    Land -> Regierungsbezirk -> Kreis -> Gemeinde

Lands without Regierungsbezirke use the digit 0 in that position (e.g. the
Kreise of Saarland are 10041, 10042, ...); records whose parent has no record
are attached to the nearest ancestor that has one, so the Kreise of Saarland
are direct children of the Land.

Example:
    db = Database.from_path("GV100AD3004/GV100AD_300421.txt")
    saarland = db.get(Kind.LAND, "10")
    for kreis in db.children(Kind.LAND, "10"):
        for gemeinde in db.children(Kind.KREIS, kreis.key):
            print(gemeinde.name, gemeinde.population_total)
"""

from bisect import bisect_left, bisect_right
from collections import defaultdict
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

from gv100ad.config.settings import DuplicatePolicy, Gv100adConfig, ParserConfig
from gv100ad.errors import (
    ConstructionError,
    DuplicateKeyError,
    Gv100adError,
    LineParseError,
    RecordNotFoundError,
)
from gv100ad.ingestion.parser import LineParser
from gv100ad.ingestion.source import decode_line, lines_from_bytes, lines_from_path
from gv100ad.model.keys import (
    GemeindeKey,
    Key,
    RegierungsbezirkKey,
    VerbandKey,
    can_contain,
    parse_key,
)
from gv100ad.model.kinds import Kind
from gv100ad.model.records import Gemeinde, Record
from gv100ad.utils.logging import get_logger, log_context

log = get_logger(__name__)

# Larger than any digit group, closes a prefix range in the sorted key lists.
_RANGE_END = 10**9


class _Builder:
    """Accumulates records and index buckets during construction."""

    def __init__(self, config: ParserConfig) -> None:
        self.config = config
        self.parser = LineParser(config)
        self.tables: dict[Kind, dict[Key, Record]] = {kind: {} for kind in Kind}
        self.origins: dict[Key, int] = {}
        self.buckets: defaultdict[Key | None, list[Key]] = defaultdict(list)
        self.members: defaultdict[VerbandKey, list[GemeindeKey]] = defaultdict(list)
        self.errors: list[Gv100adError] = []
        self.skipped: list[LineParseError] = []

    @property
    def failed(self) -> bool:
        return bool(self.errors) and not self.config.collect_all_errors

    def feed(self, lines: Iterable[str | bytes]) -> None:
        for line_number, raw in enumerate(lines, start=1):
            try:
                line = decode_line(raw, line_number, self.config.encoding)
                record = self.parser.parse_line(line, line_number)
            except LineParseError as e:
                self._reject(e)
            else:
                if record is not None:
                    self._insert(record, line_number)
            if self.failed:
                return

    def _reject(self, error: LineParseError) -> None:
        if self.config.lenient:
            log.warning(
                "Skipping malformed line",
                line=error.line_number,
                field=error.field,
                reason=error.reason,
            )
            self.skipped.append(error)
        else:
            self.errors.append(error)

    def _insert(self, record: Record, line_number: int) -> None:
        key = record.key
        table = self.tables[record.kind]

        if key in table:
            if self.config.on_duplicate is DuplicatePolicy.ERROR:
                self.errors.append(
                    DuplicateKeyError(record.kind, key, line_number, self.origins[key])
                )
                return
            log.warning(
                "Replacing duplicate key",
                kind=record.kind.value,
                key=str(key),
                line=line_number,
                first_line=self.origins[key],
            )
            previous = table[key]
            if isinstance(previous, Gemeinde):
                self.members[previous.verband_key].remove(key)
        elif record.kind.is_hierarchical:
            self.buckets[key.parent()].append(key)

        table[key] = record
        self.origins[key] = line_number
        if isinstance(record, Gemeinde):
            self.members[record.verband_key].append(key)

    def _nearest_present(self, key: Key | None) -> Key | None:
        while key is not None and key not in self.tables[key.kind]:
            key = key.parent()
        return key

    def build(self) -> "Database":
        if self.errors:
            raise ConstructionError(self.errors) from self.errors[0]

        children: defaultdict[Key | None, list[Key]] = defaultdict(list)
        for parent, keys in self.buckets.items():
            anchor = self._nearest_present(parent)
            if anchor != parent:
                # Regierungsbezirk 0 means the Land has none; anything else is an orphan.
                is_placeholder = (
                    isinstance(parent, RegierungsbezirkKey) and parent.regierungsbezirk == 0
                )
                (log.debug if is_placeholder else log.warning)(
                    "Attached records to nearest present ancestor",
                    missing_parent=str(parent),
                    ancestor=str(anchor) if anchor is not None else None,
                    records=len(keys),
                )
            children[anchor].extend(keys)

        return Database(
            tables={kind: dict(table) for kind, table in self.tables.items()},
            children={
                parent: tuple(sorted(keys, key=lambda k: k.parts))
                for parent, keys in children.items()
            },
            members={
                verband: tuple(sorted(keys)) for verband, keys in self.members.items() if keys
            },
            skipped=tuple(self.skipped),
        )


class Database:
    """
    Immutable, key-addressed GV100AD database.

    Build instances with from_path(), from_bytes() or from_lines(). Queries
    never mutate state, so a database can be shared between threads.
    """

    __slots__ = ("_tables", "_children", "_members", "_sorted", "_parts", "_skipped")

    def __init__(
        self,
        tables: Mapping[Kind, Mapping[Key, Record]],
        children: Mapping[Key | None, tuple[Key, ...]],
        members: Mapping[VerbandKey, tuple[GemeindeKey, ...]],
        skipped: tuple[LineParseError, ...] = (),
    ) -> None:
        """
        Initialize database from prebuilt structures.

        Args:
            tables: Records per kind, keyed by their key.
            children: Sorted child keys per parent key (None for top level).
            members: Sorted Gemeinde keys per Gemeindeverband key.
            skipped: Lines skipped in lenient mode.
        """
        self._tables = MappingProxyType(
            {kind: MappingProxyType(dict(tables.get(kind, {}))) for kind in Kind}
        )
        self._children = MappingProxyType(dict(children))
        self._members = MappingProxyType(dict(members))
        self._sorted = MappingProxyType(
            {kind: tuple(sorted(self._tables[kind])) for kind in Kind}
        )
        self._parts = MappingProxyType(
            {kind: tuple(key.parts for key in keys) for kind, keys in self._sorted.items()}
        )
        self._skipped = skipped

    # -- construction -----------------------------------------------------

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str | bytes],
        config: ParserConfig | None = None,
    ) -> "Database":
        """
        Build a database from lines.

        Args:
            lines: GV100AD lines as str, or as bytes in the configured encoding.
            config: Parser configuration, defaults apply if omitted.

        Returns:
            Fully built database.

        Raises:
            ConstructionError: If a line is malformed or a key is duplicated.
            TypeError: If `lines` is a single str or bytes object.
        """
        if isinstance(lines, (str, bytes, bytearray)):
            msg = (
                "from_lines() expects an iterable of lines, "
                "use Database.from_bytes() for raw file content"
            )
            raise TypeError(msg)
        config = config or ParserConfig()
        builder = _Builder(config)
        builder.feed(lines)
        db = builder.build()
        log.info(
            "Built database",
            records=len(db),
            skipped=len(db.skipped),
            **{kind.name.lower(): db.count(kind) for kind in Kind},
        )
        return db

    @classmethod
    def from_bytes(cls, data: bytes, config: ParserConfig | None = None) -> "Database":
        """Build a database from the raw content of a GV100AD file."""
        return cls.from_lines(lines_from_bytes(data), config)

    @classmethod
    def from_path(cls, path: Path | str, config: ParserConfig | None = None) -> "Database":
        """
        Build a database from a GV100AD text file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConstructionError: If a line is malformed or a key is duplicated.
        """
        with log_context(dataset=str(path)):
            return cls.from_lines(lines_from_path(path), config)

    @classmethod
    def from_config(cls, config: Gv100adConfig) -> "Database":
        """Build a database from the dataset configured in `data_paths`."""
        return cls.from_path(config.dataset_path, config.parser)

    # -- queries ----------------------------------------------------------

    def _resolve(self, kind: Kind | str, key: Key | str) -> tuple[Kind, Key]:
        if not isinstance(kind, Kind):
            kind = Kind.from_string(kind)
        if isinstance(key, str):
            return kind, parse_key(kind, key)
        if not isinstance(key, Key):
            msg = f"Key must be str or Key, got {type(key).__name__}"
            raise TypeError(msg)
        return kind, key.ancestor(kind)

    def get(self, kind: Kind | str, key: Key | str) -> Record:
        """
        Look up a record.

        Args:
            kind: Kind of the record.
            key: Key text, a key of `kind`, or a key of a deeper kind whose
                ancestor of `kind` is wanted (e.g. the Land of a Gemeinde key).

        Returns:
            The record.

        Raises:
            KeyFormatError: If key text is malformed.
            RecordNotFoundError: If no record has that key.
        """
        kind, key = self._resolve(kind, key)
        record = self._tables[kind].get(key)
        if record is None:
            raise RecordNotFoundError(kind, key)
        return record

    def find(self, kind: Kind | str, key: Key | str) -> Record | None:
        """Like get(), but returns None if no record has that key."""
        kind, key = self._resolve(kind, key)
        return self._tables[kind].get(key)

    def children(
        self,
        kind: Kind | str,
        key: Key | str,
        *,
        of: Kind | str | None = None,
    ) -> tuple[Record, ...]:
        """
        Records below a parent, ascending by key.

        Without `of`, returns the direct children in the strict hierarchy:
        the Regierungsbezirke of a Land (or its Kreise if it has none), the
        Kreise of a Regierungsbezirk, the Gemeinden of a Kreis. With `of`,
        returns every record of that kind contained in the parent at any
        depth, including the Land-scoped kinds Region and Gemeindeverband.

        Raises:
            KeyFormatError: If key text is malformed.
            RecordNotFoundError: If the parent has no record.
            ValueError: If records of kind `of` cannot lie within `kind`.
        """
        parent = self.get(kind, key)

        if of is None:
            return tuple(
                self._tables[child.kind][child]
                for child in self._children.get(parent.key, ())
            )

        if not isinstance(of, Kind):
            of = Kind.from_string(of)
        if not can_contain(parent.kind, of):
            msg = f"{of.value} records cannot lie within a {parent.kind.value}"
            raise ValueError(msg)

        # Every kind carries its Land (and Regierungsbezirk, Kreis where it has
        # them) as leading groups, so containment is a prefix range of parts.
        parts = self._parts[of]
        lo = bisect_left(parts, parent.key.parts)
        hi = bisect_right(parts, (*parent.key.parts, _RANGE_END))
        table = self._tables[of]
        return tuple(table[child] for child in self._sorted[of][lo:hi])

    def members(self, key: VerbandKey | str) -> tuple[Gemeinde, ...]:
        """
        Gemeinden belonging to a Gemeindeverband, ascending by key.

        Raises:
            RecordNotFoundError: If the Gemeindeverband has no record.
        """
        verband = self.get(Kind.VERBAND, key)
        table = self._tables[Kind.GEMEINDE]
        return tuple(table[member] for member in self._members.get(verband.key, ()))  # type: ignore[misc]

    def all(self, kind: Kind | str) -> tuple[Record, ...]:
        """All records of a kind, ascending by key."""
        if not isinstance(kind, Kind):
            kind = Kind.from_string(kind)
        table = self._tables[kind]
        return tuple(table[key] for key in self._sorted[kind])

    def roots(self) -> tuple[Record, ...]:
        """Top-level records: the Länder, plus records without any present ancestor."""
        return tuple(self._tables[key.kind][key] for key in self._children.get(None, ()))

    def count(self, kind: Kind | str) -> int:
        """Number of records of a kind."""
        if not isinstance(kind, Kind):
            kind = Kind.from_string(kind)
        return len(self._tables[kind])

    @property
    def skipped(self) -> tuple[LineParseError, ...]:
        """Lines skipped in lenient mode."""
        return self._skipped

    def __len__(self) -> int:
        return sum(len(table) for table in self._tables.values())

    def __repr__(self) -> str:
        counts = ", ".join(f"{kind.name.lower()}={self.count(kind)}" for kind in Kind)
        return f"Database({counts})"
