"""
Hierarchical keys (Schlüssel) for the six GV100AD kinds.

Every key is a tuple of fixed-width digit groups, written without separators:

    Land              LL          e.g. 10        (Saarland)
    Regierungsbezirk  LLR         e.g. 091       (Oberbayern)
    Region            LLRG        e.g. 0811      (Stuttgart, Baden-Württemberg only)
    Kreis             LLRKK       e.g. 10041     (Regionalverband Saarbrücken)
    Gemeindeverband   LLRKKVVVV   e.g. 100410100
    Gemeinde          LLRKKGGG    e.g. 10041100  (Saarbrücken)

Keys of one kind order by their digit groups, most significant first.
"""

from dataclasses import dataclass
from typing import Callable, ClassVar, TypeVar

from gv100ad.errors import KeyErrorReason, KeyFormatError
from gv100ad.model.kinds import Kind

# Official state keys run from 01 (Schleswig-Holstein) to 16 (Thüringen).
LAND_MIN = 1
LAND_MAX = 16

# Regions only exist in Baden-Württemberg.
REGION_LAND = 8

K = TypeVar("K", bound="Key")


class Key:
    """Base class for all keys. Subclasses are frozen, ordered dataclasses."""

    kind: ClassVar[Kind]
    groups: ClassVar[tuple[tuple[str, int], ...]]

    def __post_init__(self) -> None:
        self._check_ranges(self.parts, text=self._unchecked_text())

    @property
    def parts(self) -> tuple[int, ...]:
        """Digit groups, most significant first."""
        return tuple(getattr(self, name) for name, _ in self.groups)

    def __str__(self) -> str:
        return "".join(
            f"{value:0{width}d}" for value, (_, width) in zip(self.parts, self.groups)
        )

    def _unchecked_text(self) -> str:
        return "".join(str(value) for value in self.parts)

    @classmethod
    def parse(cls: type[K], text: str) -> K:
        """
        Parse the canonical key text.

        Args:
            text: Concatenated, zero-padded digit groups without separators.

        Returns:
            Parsed key.

        Raises:
            KeyFormatError: On wrong length, non-digits or out-of-range groups.
        """
        if not isinstance(text, str):
            msg = f"Key text must be str, got {type(text).__name__}"
            raise TypeError(msg)

        expected = cls.kind.key_length
        if len(text) != expected:
            raise KeyFormatError(
                text,
                cls.kind,
                KeyErrorReason.INVALID_LENGTH,
                f"expected {expected} digits, got {len(text)}",
            )
        if not (text.isascii() and text.isdigit()):
            raise KeyFormatError(
                text, cls.kind, KeyErrorReason.INVALID_DIGITS, "keys must be numeric"
            )

        parts = []
        offset = 0
        for _, width in cls.groups:
            parts.append(int(text[offset : offset + width]))
            offset += width

        cls._check_ranges(tuple(parts), text=text)
        return cls(*parts)

    @classmethod
    def _check_ranges(cls, parts: tuple[int, ...], *, text: str) -> None:
        for value, (name, width) in zip(parts, cls.groups):
            if not isinstance(value, int) or isinstance(value, bool):
                msg = f"Key group '{name}' must be int, got {type(value).__name__}"
                raise TypeError(msg)
            upper = 10**width - 1
            if not 0 <= value <= upper:
                raise KeyFormatError(
                    text,
                    cls.kind,
                    KeyErrorReason.OUT_OF_RANGE,
                    f"group '{name}' must be within 0..{upper}, got {value}",
                )
        land = parts[0]
        if not LAND_MIN <= land <= LAND_MAX:
            raise KeyFormatError(
                text,
                cls.kind,
                KeyErrorReason.OUT_OF_RANGE,
                f"land must be within {LAND_MIN:02d}..{LAND_MAX:02d}, got {land:02d}",
            )

    def parent(self) -> "Key | None":
        """Key of the parent entity, or None for a Land."""
        raise NotImplementedError

    def ancestor(self, kind: Kind) -> "Key":
        """
        Truncate this key to a shallower kind.

        A Gemeinde key yields its Kreis, Regierungsbezirk or Land; a
        Gemeindeverband key its Kreis and above; a Region key its
        Regierungsbezirk and Land.

        Raises:
            ValueError: If `kind` is not an ancestor of this key's kind.
        """
        target = KEY_TYPES[kind]
        if target is type(self):
            return self
        size = len(target.groups)
        if size >= len(self.groups) or self.groups[:size] != target.groups:
            msg = f"{kind.value} is not an ancestor of {self.kind.value} key {self}"
            raise ValueError(msg)
        return target(*self.parts[:size])


@dataclass(frozen=True, order=True)
class LandKey(Key):
    """Key of a Land (state)."""

    kind: ClassVar[Kind] = Kind.LAND
    groups: ClassVar[tuple[tuple[str, int], ...]] = (("land", 2),)

    land: int

    def parent(self) -> None:
        return None


@dataclass(frozen=True, order=True)
class RegierungsbezirkKey(Key):
    """Key of a Regierungsbezirk (government district)."""

    kind: ClassVar[Kind] = Kind.REGIERUNGSBEZIRK
    groups: ClassVar[tuple[tuple[str, int], ...]] = (
        ("land", 2),
        ("regierungsbezirk", 1),
    )

    land: int
    regierungsbezirk: int

    def parent(self) -> LandKey:
        return LandKey(self.land)


@dataclass(frozen=True, order=True)
class RegionKey(Key):
    """
    Key of a Region.

    Regions only exist in Baden-Württemberg, so the two-digit short form
    (Regierungsbezirk and Region) is accepted as well and implies Land 08.
    """

    kind: ClassVar[Kind] = Kind.REGION
    groups: ClassVar[tuple[tuple[str, int], ...]] = (
        ("land", 2),
        ("regierungsbezirk", 1),
        ("region", 1),
    )

    land: int
    regierungsbezirk: int
    region: int

    @classmethod
    def parse(cls, text: str) -> "RegionKey":
        if isinstance(text, str) and len(text) == 2:
            text = f"{REGION_LAND:02d}{text}"
        return super().parse(text)

    @classmethod
    def _check_ranges(cls, parts: tuple[int, ...], *, text: str) -> None:
        super()._check_ranges(parts, text=text)
        if parts[0] != REGION_LAND:
            raise KeyFormatError(
                text,
                cls.kind,
                KeyErrorReason.OUT_OF_RANGE,
                f"regions only exist in land {REGION_LAND:02d}, got {parts[0]:02d}",
            )

    def parent(self) -> LandKey:
        return LandKey(self.land)


@dataclass(frozen=True, order=True)
class KreisKey(Key):
    """Key of a Kreis (district)."""

    kind: ClassVar[Kind] = Kind.KREIS
    groups: ClassVar[tuple[tuple[str, int], ...]] = (
        ("land", 2),
        ("regierungsbezirk", 1),
        ("kreis", 2),
    )

    land: int
    regierungsbezirk: int
    kreis: int

    def parent(self) -> RegierungsbezirkKey:
        return RegierungsbezirkKey(self.land, self.regierungsbezirk)


@dataclass(frozen=True, order=True)
class VerbandKey(Key):
    """
    Key of a Gemeindeverband (association of municipalities).

    The association number is only unique within its Kreis. Associations are
    scoped within their Land rather than nested below a Kreis record.
    """

    kind: ClassVar[Kind] = Kind.VERBAND
    groups: ClassVar[tuple[tuple[str, int], ...]] = (
        ("land", 2),
        ("regierungsbezirk", 1),
        ("kreis", 2),
        ("verband", 4),
    )

    land: int
    regierungsbezirk: int
    kreis: int
    verband: int

    @property
    def kreis_key(self) -> KreisKey:
        return KreisKey(self.land, self.regierungsbezirk, self.kreis)

    def parent(self) -> LandKey:
        return LandKey(self.land)


@dataclass(frozen=True, order=True)
class GemeindeKey(Key):
    """Key of a Gemeinde (municipality), the 8-digit Amtlicher Gemeindeschlüssel."""

    kind: ClassVar[Kind] = Kind.GEMEINDE
    groups: ClassVar[tuple[tuple[str, int], ...]] = (
        ("land", 2),
        ("regierungsbezirk", 1),
        ("kreis", 2),
        ("gemeinde", 3),
    )

    land: int
    regierungsbezirk: int
    kreis: int
    gemeinde: int

    @property
    def kreis_key(self) -> KreisKey:
        return KreisKey(self.land, self.regierungsbezirk, self.kreis)

    def verband_key(self, verband: int) -> VerbandKey:
        """Key of the Gemeindeverband with number `verband` in this Kreis."""
        return VerbandKey(self.land, self.regierungsbezirk, self.kreis, verband)

    def ars(self, verband: int) -> str:
        """12-digit Amtlicher Regionalschlüssel (Kreis, Verband, Gemeinde)."""
        return f"{self.verband_key(verband)}{self.gemeinde:03d}"

    def parent(self) -> KreisKey:
        return self.kreis_key


KEY_TYPES: dict[Kind, type[Key]] = {
    Kind.LAND: LandKey,
    Kind.REGIERUNGSBEZIRK: RegierungsbezirkKey,
    Kind.REGION: RegionKey,
    Kind.KREIS: KreisKey,
    Kind.VERBAND: VerbandKey,
    Kind.GEMEINDE: GemeindeKey,
}


def parse_key(kind: Kind | str, text: str) -> Key:
    """
    Parse key text for a kind.

    Args:
        kind: Kind (or its name) the text is a key of.
        text: Canonical key text.

    Returns:
        Typed key.

    Raises:
        KeyFormatError: If the text is not a valid key of that kind.
    """
    if not isinstance(kind, Kind):
        kind = Kind.from_string(kind)
    return KEY_TYPES[kind].parse(text)


def _prefix(parent: Key, child: Key) -> bool:
    return child.parts[: len(parent.parts)] == parent.parts


def _same_land(parent: Key, child: Key) -> bool:
    return child.parts[0] == parent.parts[0]


def _same_regierungsbezirk(parent: Key, child: Key) -> bool:
    return child.parts[:2] == parent.parts[:2]


def _same_kreis(parent: Key, child: Key) -> bool:
    return child.kreis_key == parent  # type: ignore[attr-defined]


# Region and Gemeindeverband are scoped by their Land (and below it by the
# components they share with their parent), never by structural prefix.
_CONTAINMENT: dict[tuple[Kind, Kind], Callable[[Key, Key], bool]] = {
    (Kind.LAND, Kind.REGIERUNGSBEZIRK): _prefix,
    (Kind.LAND, Kind.KREIS): _prefix,
    (Kind.LAND, Kind.GEMEINDE): _prefix,
    (Kind.REGIERUNGSBEZIRK, Kind.KREIS): _prefix,
    (Kind.REGIERUNGSBEZIRK, Kind.GEMEINDE): _prefix,
    (Kind.KREIS, Kind.GEMEINDE): _prefix,
    (Kind.LAND, Kind.VERBAND): _same_land,
    (Kind.REGIERUNGSBEZIRK, Kind.VERBAND): _same_regierungsbezirk,
    (Kind.KREIS, Kind.VERBAND): _same_kreis,
    (Kind.LAND, Kind.REGION): _same_land,
    (Kind.REGIERUNGSBEZIRK, Kind.REGION): _same_regierungsbezirk,
}


def contains(parent: Key, child: Key) -> bool:
    """Whether `child` lies within `parent`."""
    rule = _CONTAINMENT.get((parent.kind, child.kind))
    return rule is not None and rule(parent, child)


def can_contain(parent: Kind, child: Kind) -> bool:
    """Whether any key of kind `parent` can contain keys of kind `child`."""
    return (parent, child) in _CONTAINMENT
