"""
Tabular export of GV100AD records.

Converts the records of one kind into a pandas DataFrame validated against
the kind's pandera schema, and writes it as CSV.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pandas as pd

from gv100ad.model.kinds import Kind
from gv100ad.model.records import Gemeinde, Kreis, Land, Record, Verband
from gv100ad.schemas.registry import SchemaRegistry
from gv100ad.utils.logging import get_logger

if TYPE_CHECKING:
    from gv100ad.database import Database

log = get_logger(__name__)

_INTEGER_COLUMNS = (
    "classification_code",
    "area_ha",
    "population_total",
    "population_male",
    "population_female",
    "tax_office_district",
    "employment_agency_district",
    "electoral_district_first",
    "electoral_district_last",
)


def _row(record: Record) -> dict[str, Any]:
    row: dict[str, Any] = {"key": str(record.key)}

    if isinstance(record, Gemeinde):
        courts = record.court_districts
        electoral = record.electoral_districts
        row.update(
            ars=record.ars,
            verband_key=str(record.verband_key),
            name=record.name,
            classification_code=record.classification_code,
            area_ha=record.area_ha,
            population_total=record.population_total,
            population_male=record.population_male,
            population_female=record.population_female,
            postal_code=record.postal_code,
            postal_code_unambiguous=record.postal_code_unambiguous,
            tax_office_district=record.tax_office_district,
            court_districts=(
                f"{courts.oberlandesgericht}{courts.landgericht}{courts.amtsgericht}"
                if courts is not None
                else None
            ),
            employment_agency_district=record.employment_agency_district,
            electoral_district_first=electoral.first if electoral is not None else None,
            electoral_district_last=electoral.last if electoral is not None else None,
        )
    else:
        if isinstance(record, Verband):
            row["kreis_key"] = str(record.key.kreis_key)
        row["name"] = record.name
        row["seat"] = (
            record.seat_of_government
            if isinstance(record, Land)
            else record.seat_of_administration  # type: ignore[attr-defined]
        )
        if isinstance(record, (Kreis, Verband)):
            row["classification_code"] = record.classification_code

    row["territorial_date"] = record.territorial_date
    return row


def to_frame(db: "Database", kind: Kind | str) -> pd.DataFrame:
    """
    Convert all records of a kind into a validated DataFrame.

    Args:
        db: Database to export from.
        kind: Kind of records to export.

    Returns:
        DataFrame with one row per record, ascending by key. Absent measures
        are <NA>.

    Raises:
        pandera.errors.SchemaError: If the frame violates the kind's schema.
    """
    if not isinstance(kind, Kind):
        kind = Kind.from_string(kind)

    schema = SchemaRegistry.get(kind)
    columns = list(schema.to_schema().columns)
    df = pd.DataFrame([_row(record) for record in db.all(kind)], columns=columns)
    for column in _INTEGER_COLUMNS:
        if column in df.columns:
            df[column] = df[column].astype("Int64")
    df["territorial_date"] = pd.to_datetime(df["territorial_date"])

    validated = SchemaRegistry.validate(df, kind)
    log.debug("Exported records", kind=kind.value, rows=len(validated))
    return validated


def write_csv(db: "Database", kind: Kind | str, path: Path | str) -> Path:
    """
    Export all records of a kind to a CSV file.

    Returns:
        Path of the written file.
    """
    path = Path(path)
    df = to_frame(db, kind)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, date_format="%Y-%m-%d")
    log.info("Wrote CSV export", path=str(path), rows=len(df))
    return path
