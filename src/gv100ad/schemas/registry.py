"""
Schema registry for tabular exports.

Maps each kind to the pandera model its exported frame must satisfy.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import pandera.pandas as pa

from gv100ad.model.kinds import Kind
from gv100ad.schemas.records import (
    AreaUnitSchema,
    GemeindeSchema,
    KreisSchema,
    VerbandSchema,
)

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class SchemaInfo:
    """Metadata about a registered schema."""

    kind: Kind
    schema: type[pa.DataFrameModel]
    version: str
    description: str


class SchemaRegistry:
    """Centralized lookup of export schemas by kind."""

    _schemas: ClassVar[dict[Kind, SchemaInfo]] = {
        Kind.LAND: SchemaInfo(
            kind=Kind.LAND,
            schema=AreaUnitSchema,
            version="1.0.0",
            description="Länder with seat of government",
        ),
        Kind.REGIERUNGSBEZIRK: SchemaInfo(
            kind=Kind.REGIERUNGSBEZIRK,
            schema=AreaUnitSchema,
            version="1.0.0",
            description="Regierungsbezirke with seat of administration",
        ),
        Kind.REGION: SchemaInfo(
            kind=Kind.REGION,
            schema=AreaUnitSchema,
            version="1.0.0",
            description="Regions of Baden-Württemberg",
        ),
        Kind.KREIS: SchemaInfo(
            kind=Kind.KREIS,
            schema=KreisSchema,
            version="1.0.0",
            description="Kreise with Textkennzeichen",
        ),
        Kind.VERBAND: SchemaInfo(
            kind=Kind.VERBAND,
            schema=VerbandSchema,
            version="1.0.0",
            description="Gemeindeverbände with Textkennzeichen",
        ),
        Kind.GEMEINDE: SchemaInfo(
            kind=Kind.GEMEINDE,
            schema=GemeindeSchema,
            version="1.0.0",
            description="Gemeinden with area, population and districts",
        ),
    }

    @classmethod
    def get(cls, kind: Kind | str) -> type[pa.DataFrameModel]:
        """
        Get the schema for a kind.

        Args:
            kind: Kind or kind name.

        Returns:
            The Pandera DataFrameModel class.
        """
        return cls.get_info(kind).schema

    @classmethod
    def get_info(cls, kind: Kind | str) -> SchemaInfo:
        """Get full schema info for a kind."""
        if not isinstance(kind, Kind):
            kind = Kind.from_string(kind)
        return cls._schemas[kind]

    @classmethod
    def list_kinds(cls) -> list[Kind]:
        """List all kinds with a registered schema."""
        return list(cls._schemas.keys())

    @classmethod
    def validate(cls, df: "pd.DataFrame", kind: Kind | str) -> "pd.DataFrame":
        """
        Validate a DataFrame against the schema of a kind.

        Raises:
            pandera.errors.SchemaError: If validation fails.
        """
        return cls.get(kind).validate(df)
