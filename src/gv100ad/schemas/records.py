"""
Pandera schemas for tabular GV100AD exports.

One row per record. Keys are canonical zero-padded strings; measures that
are blank in the source are <NA>.
"""

import pandas as pd
import pandera.pandas as pa
from pandera.typing import Series


class AreaUnitSchema(pa.DataFrameModel):
    """
    Schema for Land, Regierungsbezirk and Region exports.

    These record types only carry a key, a name and a seat.
    """

    key: Series[str] = pa.Field(
        description="Land (2), Regierungsbezirk (3) or Region (4) key",
        str_matches=r"^\d{2,4}$",
    )
    name: Series[str] = pa.Field(
        description="Official name",
    )
    seat: Series[str] = pa.Field(
        description="Seat of government or administration",
        nullable=True,
    )
    territorial_date: Series[pa.DateTime] = pa.Field(
        description="Gebietsstand",
    )

    class Config:
        """Schema configuration."""

        name = "AreaUnitSchema"
        strict = True
        coerce = True


class KreisSchema(pa.DataFrameModel):
    """Schema for Kreis (district) exports."""

    key: Series[str] = pa.Field(
        description="Kreis key (5 digits)",
        str_matches=r"^\d{5}$",
    )
    name: Series[str] = pa.Field(
        description="Official name",
    )
    seat: Series[str] = pa.Field(
        description="Seat of administration",
        nullable=True,
    )
    classification_code: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        le=99,
        description="Textkennzeichen (41-45 documented)",
        nullable=True,
    )
    territorial_date: Series[pa.DateTime] = pa.Field(
        description="Gebietsstand",
    )

    class Config:
        """Schema configuration."""

        name = "KreisSchema"
        strict = True
        coerce = True


class VerbandSchema(pa.DataFrameModel):
    """Schema for Gemeindeverband (association) exports."""

    key: Series[str] = pa.Field(
        description="Gemeindeverband key (Kreis key + 4 digits)",
        str_matches=r"^\d{9}$",
    )
    kreis_key: Series[str] = pa.Field(
        description="Key of the enclosing Kreis",
        str_matches=r"^\d{5}$",
    )
    name: Series[str] = pa.Field(
        description="Official name",
    )
    seat: Series[str] = pa.Field(
        description="Seat of administration",
        nullable=True,
    )
    classification_code: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        le=99,
        description="Textkennzeichen (raw code)",
        nullable=True,
    )
    territorial_date: Series[pa.DateTime] = pa.Field(
        description="Gebietsstand",
    )

    class Config:
        """Schema configuration."""

        name = "VerbandSchema"
        strict = True
        coerce = True


class GemeindeSchema(pa.DataFrameModel):
    """
    Schema for Gemeinde (municipality) exports.

    Contains the area and population figures along with the postal code and
    the administrative districts a Gemeinde belongs to.
    """

    key: Series[str] = pa.Field(
        description="Amtlicher Gemeindeschlüssel (8 digits)",
        str_matches=r"^\d{8}$",
    )
    ars: Series[str] = pa.Field(
        description="Amtlicher Regionalschlüssel (12 digits)",
        str_matches=r"^\d{12}$",
    )
    verband_key: Series[str] = pa.Field(
        description="Key of the Gemeindeverband",
        str_matches=r"^\d{9}$",
    )
    name: Series[str] = pa.Field(
        description="Official name",
    )
    classification_code: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        le=99,
        description="Textkennzeichen (60-67 documented)",
        nullable=True,
    )
    area_ha: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        description="Area in hectares",
        nullable=True,
    )
    population_total: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        description="Population, total",
        nullable=True,
    )
    population_male: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        description="Population, male",
        nullable=True,
    )
    population_female: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        description="Population, female (total minus male)",
        nullable=True,
    )
    postal_code: Series[str] = pa.Field(
        description="Postal code of the administrative seat",
        str_matches=r"^\d{5}$",
        nullable=True,
    )
    postal_code_unambiguous: Series[bool] = pa.Field(
        description="False if the Gemeinde has several postal codes",
    )
    tax_office_district: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        description="Finanzamtbezirk",
        nullable=True,
    )
    court_districts: Series[str] = pa.Field(
        description="Oberlandesgericht, Landgericht and Amtsgericht codes",
        str_length={"min_value": 4, "max_value": 4},
        nullable=True,
    )
    employment_agency_district: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        description="Arbeitsagenturbezirk",
        nullable=True,
    )
    electoral_district_first: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        description="Bundestag electoral district (first of range)",
        nullable=True,
    )
    electoral_district_last: Series[pd.Int64Dtype] = pa.Field(
        ge=0,
        description="Last electoral district, if the Gemeinde spans several",
        nullable=True,
    )
    territorial_date: Series[pa.DateTime] = pa.Field(
        description="Gebietsstand",
    )

    class Config:
        """Schema configuration."""

        name = "GemeindeSchema"
        strict = True
        coerce = True
