"""Tests for database construction and queries."""

import dataclasses
from collections.abc import Callable
from pathlib import Path

import pytest

from gv100ad.config import (
    DataPathsConfig,
    DuplicatePolicy,
    Gv100adConfig,
    ParserConfig,
)
from gv100ad.database import Database
from gv100ad.errors import (
    ConstructionError,
    DuplicateKeyError,
    KeyFormatError,
    LineParseError,
    RecordNotFoundError,
)
from gv100ad.model import (
    HIERARCHY,
    Gemeinde,
    GemeindeKey,
    Kind,
    LandKey,
    VerbandKey,
    contains,
)


def keys(records: tuple) -> list[str]:
    return [str(record.key) for record in records]


class TestConstruction:
    """Tests for building a database."""

    def test_counts(self, db: Database) -> None:
        """Test that every sample line becomes one record."""
        assert db.count(Kind.LAND) == 4
        assert db.count(Kind.REGIERUNGSBEZIRK) == 3
        assert db.count(Kind.REGION) == 2
        assert db.count(Kind.KREIS) == 5
        assert db.count(Kind.VERBAND) == 6
        assert db.count(Kind.GEMEINDE) == 8
        assert len(db) == 28
        assert db.skipped == ()

    def test_from_bytes_and_lines(self, sample_path: Path, sample_lines: list[str]) -> None:
        """Test that all construction entry points agree."""
        from_bytes = Database.from_bytes(sample_path.read_bytes())
        from_lines = Database.from_lines(sample_lines)
        assert len(from_bytes) == len(from_lines) == 28
        assert from_bytes.all(Kind.GEMEINDE) == from_lines.all(Kind.GEMEINDE)

    def test_from_lines_rejects_raw_content(self, sample_path: Path) -> None:
        """Test that a whole file buffer is not taken for an iterable of lines."""
        data = sample_path.read_bytes()
        with pytest.raises(TypeError, match="from_bytes"):
            Database.from_lines(data)
        with pytest.raises(TypeError, match="from_bytes"):
            Database.from_lines(data.decode("utf-8"))

    def test_from_config(self, test_data_dir: Path) -> None:
        """Test building from the configured dataset."""
        config = Gv100adConfig(
            data_paths=DataPathsConfig(
                data_root=test_data_dir, dataset=Path("GV100AD_sample.txt")
            )
        )
        assert len(Database.from_config(config)) == 28

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            Database.from_path(tmp_path / "GV100AD_missing.txt")

    def test_byte_order_mark(self, sample_path: Path) -> None:
        """Test that a leading BOM does not break the first line."""
        db = Database.from_bytes(b"\xef\xbb\xbf" + sample_path.read_bytes())
        assert db.get(Kind.LAND, "10").name == "Saarland"

    def test_blank_lines_are_skipped(self, sample_lines: list[str]) -> None:
        """Test that blank lines are not records."""
        db = Database.from_lines([sample_lines[0], "", "   ", sample_lines[11]])
        assert len(db) == 2

    def test_records_are_immutable(self, db: Database) -> None:
        """Test that records cannot be modified."""
        land = db.get(Kind.LAND, "10")
        with pytest.raises(dataclasses.FrozenInstanceError):
            land.name = "Saar"  # type: ignore[misc]

    def test_repr(self, db: Database) -> None:
        """Test the summary representation."""
        assert repr(db).startswith("Database(land=4, regierungsbezirk=3")


class TestConstructionErrors:
    """Tests for failing and lenient construction."""

    def test_malformed_line_fails(self, sample_lines: list[str]) -> None:
        """Test that a malformed line aborts construction."""
        lines = [*sample_lines[:3], "99 garbage", *sample_lines[3:]]
        with pytest.raises(ConstructionError) as exc_info:
            Database.from_lines(lines)
        error = exc_info.value
        assert len(error.errors) == 1
        assert isinstance(error.first, LineParseError)
        assert error.first.line_number == 4
        assert error.__cause__ is error.first

    def test_duplicate_key_fails(self, sample_lines: list[str]) -> None:
        """Test that a duplicate key aborts construction."""
        with pytest.raises(ConstructionError) as exc_info:
            Database.from_lines([*sample_lines, sample_lines[1]])
        error = exc_info.value.first
        assert isinstance(error, DuplicateKeyError)
        assert error.kind is Kind.KREIS
        assert str(error.key) == "10041"
        assert error.line_number == 29
        assert error.first_line_number == 2

    def test_duplicate_key_replace(self, sample_lines: list[str]) -> None:
        """Test that the replace policy keeps the later record."""
        renamed = sample_lines[0].replace("Saarland", "Saarlaend", 1)
        config = ParserConfig(on_duplicate=DuplicatePolicy.REPLACE)
        db = Database.from_lines([*sample_lines, renamed], config)
        assert db.get(Kind.LAND, "10").name == "Saarlaend"
        assert db.count(Kind.LAND) == 4
        assert keys(db.roots()) == ["08", "09", "10", "11"]

    def test_replaced_gemeinde_moves_between_verbaende(
        self, sample_lines: list[str]
    ) -> None:
        """Test that a replaced Gemeinde is indexed under its new Verband."""
        line = sample_lines[4]
        moved = line[:18] + "0511" + line[22:]
        config = ParserConfig(on_duplicate="replace")
        db = Database.from_lines([*sample_lines, moved], config)
        assert db.members("100410100") == ()
        assert keys(db.members("100410511")) == ["10041100", "10041511"]

    def test_collect_all_errors(self, sample_lines: list[str]) -> None:
        """Test that all errors are reported when configured."""
        lines = [*sample_lines, "70garbage", sample_lines[0], "10xx"]
        with pytest.raises(ConstructionError) as exc_info:
            Database.from_lines(lines, ParserConfig(collect_all_errors=True))
        errors = exc_info.value.errors
        assert [type(e) for e in errors] == [LineParseError, DuplicateKeyError, LineParseError]
        assert "3 errors" in str(exc_info.value)

    def test_lenient_skips_malformed_lines(self, sample_lines: list[str]) -> None:
        """Test that lenient mode skips and records malformed lines."""
        lines = [*sample_lines[:3], "70garbage", *sample_lines[3:]]
        db = Database.from_lines(lines, ParserConfig(lenient=True))
        assert len(db) == 28
        assert len(db.skipped) == 1
        assert db.skipped[0].line_number == 4
        assert db.skipped[0].field == "record_type"

    def test_lenient_still_rejects_duplicates(self, sample_lines: list[str]) -> None:
        """Test that lenient mode does not hide duplicate keys."""
        with pytest.raises(ConstructionError):
            Database.from_lines([*sample_lines, sample_lines[0]], ParserConfig(lenient=True))

    def test_undecodable_bytes(self, sample_path: Path) -> None:
        """Test that encoding errors name their line."""
        data = sample_path.read_bytes() + b"\xff\xfe\n"
        with pytest.raises(ConstructionError) as exc_info:
            Database.from_bytes(data)
        assert exc_info.value.first.field == "encoding"
        assert exc_info.value.first.line_number == 29


class TestGet:
    """Tests for key lookups."""

    def test_get_every_record(self, db: Database) -> None:
        """Test that every record is found under its own key."""
        for kind in Kind:
            for record in db.all(kind):
                assert db.get(kind, record.key) is record
                assert db.get(kind, str(record.key)) is record

    def test_get_by_kind_name(self, db: Database) -> None:
        """Test lookup with the kind given by name."""
        assert db.get("Gemeinde", "10041511").name == "Friedrichsthal, Stadt"

    def test_get_region_short_form(self, db: Database) -> None:
        """Test region lookup by its two-digit short form."""
        assert db.get(Kind.REGION, "11").name == "Stuttgart"

    def test_get_ancestor(self, db: Database) -> None:
        """Test lookup of an ancestor through a deeper key."""
        land = db.get(Kind.LAND, GemeindeKey(10, 0, 41, 100))
        assert land.key == LandKey(10)
        kreis = db.get(Kind.KREIS, VerbandKey(9, 1, 84, 113))
        assert kreis.name == "Muenchen"

    def test_not_found(self, db: Database) -> None:
        """Test that an absent well-formed key raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError) as exc_info:
            db.get(Kind.KREIS, "10099")
        assert exc_info.value.kind is Kind.KREIS
        assert db.find(Kind.KREIS, "10099") is None
        assert db.find(Kind.KREIS, "10041") is not None

    def test_not_found_is_lookup_error(self, db: Database) -> None:
        """Test that absence can be handled as LookupError."""
        with pytest.raises(LookupError):
            db.get(Kind.LAND, "01")

    def test_malformed_key(self, db: Database) -> None:
        """Test that malformed key text raises KeyFormatError."""
        with pytest.raises(KeyFormatError):
            db.get(Kind.KREIS, "1004")
        with pytest.raises(KeyFormatError):
            db.find(Kind.LAND, "AB")


class TestChildren:
    """Tests for hierarchy navigation."""

    def test_land_with_regierungsbezirke(self, db: Database) -> None:
        """Test children of a Land with Regierungsbezirke."""
        assert keys(db.children(Kind.LAND, "09")) == ["091", "092"]

    def test_land_without_regierungsbezirke(self, db: Database) -> None:
        """Test that Kreise of Saarland are children of the Land."""
        children = db.children(Kind.LAND, "10")
        assert keys(children) == ["10041", "10042"]
        assert all(child.kind is Kind.KREIS for child in children)

    def test_regierungsbezirk(self, db: Database) -> None:
        """Test children of a Regierungsbezirk."""
        assert keys(db.children(Kind.REGIERUNGSBEZIRK, "091")) == ["09162", "09184"]
        assert db.children(Kind.REGIERUNGSBEZIRK, "092") == ()

    def test_kreis(self, db: Database) -> None:
        """Test children of a Kreis."""
        assert keys(db.children(Kind.KREIS, "09184")) == ["09184113", "09184451"]
        assert keys(db.children(Kind.KREIS, "10042")) == ["10042111", "10042112"]

    def test_gemeinde_has_no_children(self, db: Database) -> None:
        """Test that leaves have no children."""
        assert db.children(Kind.GEMEINDE, "10041100") == ()

    def test_city_state(self, db: Database) -> None:
        """Test a Land without further records."""
        assert db.children(Kind.LAND, "11") == ()

    def test_scoped_kinds_not_in_chain(self, db: Database) -> None:
        """Test that Regionen are not children in the strict hierarchy."""
        assert keys(db.children(Kind.LAND, "08")) == ["081"]

    def test_unknown_parent(self, db: Database) -> None:
        """Test that children of an absent record raise."""
        with pytest.raises(RecordNotFoundError):
            db.children(Kind.KREIS, "10099")
        with pytest.raises(RecordNotFoundError):
            db.children(Kind.REGIERUNGSBEZIRK, "100")

    def test_children_are_contained_and_ascending(self, db: Database) -> None:
        """Test containment and ordering for every parent."""
        for kind in HIERARCHY:
            for parent in db.all(kind):
                children = db.children(kind, parent.key)
                assert all(contains(parent.key, child.key) for child in children)
                assert keys(children) == sorted(keys(children))
                assert len(set(keys(children))) == len(children)
                assert db.children(kind, parent.key) == children

    def test_every_hierarchical_record_reachable(self, db: Database) -> None:
        """Test that walking from the roots reaches every hierarchical record."""
        seen = set()
        pending = list(db.roots())
        while pending:
            record = pending.pop()
            seen.add(record.key)
            pending.extend(db.children(record.kind, record.key))
        expected = {record.key for kind in HIERARCHY for record in db.all(kind)}
        assert seen == expected

    def test_orphan_attached_to_nearest_ancestor(self, sample_lines: list[str]) -> None:
        """Test that a Gemeinde without its Kreis hangs below the Land."""
        db = Database.from_lines([sample_lines[0], sample_lines[4]])
        assert keys(db.children(Kind.LAND, "10")) == ["10041100"]

    def test_orphan_without_ancestors_is_root(self, sample_lines: list[str]) -> None:
        """Test that a record without any present ancestor is a root."""
        db = Database.from_lines([sample_lines[4]])
        assert keys(db.roots()) == ["10041100"]


class TestRangeQueries:
    """Tests for children of a given kind at any depth."""

    def test_gemeinden_of_land(self, db: Database) -> None:
        """Test all Gemeinden of a Land."""
        gemeinden = db.children(Kind.LAND, "10", of=Kind.GEMEINDE)
        assert keys(gemeinden) == ["10041100", "10041511", "10042111", "10042112"]

    def test_kreise_of_land(self, db: Database) -> None:
        """Test all Kreise of a Land across Regierungsbezirke."""
        assert keys(db.children(Kind.LAND, "09", of="Kreis")) == ["09162", "09184"]

    def test_regionen_of_land(self, db: Database) -> None:
        """Test the Land-scoped Regionen."""
        assert keys(db.children(Kind.LAND, "08", of=Kind.REGION)) == ["0811", "0812"]
        assert db.children(Kind.LAND, "09", of=Kind.REGION) == ()

    def test_verbaende_of_kreis(self, db: Database) -> None:
        """Test the Gemeindeverbände of a Kreis."""
        verbaende = db.children(Kind.KREIS, "10041", of=Kind.VERBAND)
        assert keys(verbaende) == ["100410100", "100410511"]

    def test_land_boundaries(self, db: Database) -> None:
        """Test that range queries do not leak into neighbouring Länder."""
        assert keys(db.children(Kind.LAND, "08", of=Kind.GEMEINDE)) == ["08111000"]
        assert keys(db.children(Kind.LAND, "11", of=Kind.GEMEINDE)) == []

    def test_impossible_containment(self, db: Database) -> None:
        """Test that kinds which cannot nest are rejected."""
        with pytest.raises(ValueError, match="cannot lie within"):
            db.children(Kind.REGION, "0811", of=Kind.KREIS)
        with pytest.raises(ValueError, match="cannot lie within"):
            db.children(Kind.KREIS, "10041", of=Kind.LAND)


class TestMembersAndAll:
    """Tests for association membership and enumeration."""

    def test_members(self, db: Database) -> None:
        """Test the Gemeinden of a Gemeindeverband."""
        members = db.members("091840113")
        assert [m.name for m in members] == ["Aying"]
        assert all(isinstance(m, Gemeinde) for m in members)

    def test_members_of_unknown_verband(self, db: Database) -> None:
        """Test that an absent Gemeindeverband raises."""
        with pytest.raises(RecordNotFoundError):
            db.members(VerbandKey(9, 1, 84, 9999))

    def test_gemeinde_without_verband_record(self, db: Database) -> None:
        """Test that a Gemeinde may reference an absent Gemeindeverband."""
        gemeinde = db.get(Kind.GEMEINDE, "09184451")
        assert gemeinde.verband_key == VerbandKey(9, 1, 84, 9999)
        assert db.find(Kind.VERBAND, gemeinde.verband_key) is None

    def test_all_ascending(self, db: Database) -> None:
        """Test enumeration of a kind in key order."""
        assert keys(db.all(Kind.KREIS)) == ["08111", "09162", "09184", "10041", "10042"]

    def test_roots(self, db: Database) -> None:
        """Test that the Länder are the roots."""
        assert keys(db.roots()) == ["08", "09", "10", "11"]

    def test_absent_population(self, db: Database) -> None:
        """Test that an all-blank population is None."""
        assert db.get(Kind.GEMEINDE, "09184451").population_total is None
