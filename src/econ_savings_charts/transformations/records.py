"""
Record normalization: raw rows -> typed, immutable country-year records.

- One Record per input row, same order; nothing is dropped here.
- Numeric cells that are empty, unparseable or non-finite become NaN.
- population is derived as gdp_usd / gdp_per_capita_usd when both are
  present and the per-capita value is non-zero; NaN otherwise.

Filtering is left to the views so each one can apply its own validity rule
over the same base data.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from ..config import ColumnMapping

NAN = float("nan")

NUMERIC_FIELDS = (
    "domestic_savings_pct",
    "gross_savings_pct",
    "gdp_usd",
    "gdp_per_capita_usd",
    "gdp_per_capita_ppp",
    "growth_pct",
    "population",
)


@dataclass(frozen=True)
class Record:
    """One normalized country-year observation."""

    name: str
    code: str
    year: Optional[int]
    domestic_savings_pct: float
    gross_savings_pct: float
    gdp_usd: float
    gdp_per_capita_usd: float
    gdp_per_capita_ppp: float
    growth_pct: float
    population: float

    def gdp_per_capita(self, use_ppp: bool) -> float:
        return self.gdp_per_capita_ppp if use_ppp else self.gdp_per_capita_usd

    def to_dict(self) -> dict:
        return asdict(self)


def to_float(value: Any) -> float:
    """Coerce a cell to a finite float, or NaN. Never raises."""
    if value is None or isinstance(value, bool):
        return NAN
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return NAN
        try:
            number = float(text)
        except ValueError:
            return NAN
    return number if math.isfinite(number) else NAN


def to_year(value: Any) -> Optional[int]:
    """Parse a year cell ("2019", "2019.0", 2019); None when it is not a whole number."""
    number = to_float(value)
    if math.isnan(number) or not number.is_integer():
        return None
    return int(number)


def _to_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    return str(value)


def derive_population(gdp_usd: float, gdp_per_capita_usd: float) -> float:
    if math.isnan(gdp_usd) or math.isnan(gdp_per_capita_usd) or gdp_per_capita_usd == 0:
        return NAN
    population = gdp_usd / gdp_per_capita_usd
    return population if math.isfinite(population) else NAN


def normalize_row(row: Mapping[str, Any], columns: ColumnMapping) -> Record:
    gdp_usd = to_float(row.get(columns.gdp_usd))
    gdp_per_capita_usd = to_float(row.get(columns.gdp_per_capita_usd))

    return Record(
        name=_to_text(row.get(columns.name)),
        code=_to_text(row.get(columns.code)),
        year=to_year(row.get(columns.year)),
        domestic_savings_pct=to_float(row.get(columns.domestic_savings_pct)),
        gross_savings_pct=to_float(row.get(columns.gross_savings_pct)),
        gdp_usd=gdp_usd,
        gdp_per_capita_usd=gdp_per_capita_usd,
        gdp_per_capita_ppp=to_float(row.get(columns.gdp_per_capita_ppp)),
        growth_pct=to_float(row.get(columns.growth_pct)),
        population=derive_population(gdp_usd, gdp_per_capita_usd),
    )


def normalize_rows(
    rows: Iterable[Mapping[str, Any]],
    columns: Optional[ColumnMapping] = None,
) -> List[Record]:
    columns = columns or ColumnMapping()
    records = [normalize_row(row, columns) for row in rows]

    unparsed_years = sum(1 for r in records if r.year is None)
    if unparsed_years:
        print(f"[normalize] {unparsed_years} rows have no usable year and will not be charted.")
    return records


def records_to_dataframe(records: Sequence[Record]) -> pd.DataFrame:
    """Tabular view of the records (one column per Record field, NaN kept)."""
    columns = ["name", "code", "year", *NUMERIC_FIELDS]
    if not records:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([r.to_dict() for r in records], columns=columns)
    df["year"] = pd.to_numeric(df["year"], errors="coerce").astype("Int64")
    for col in NUMERIC_FIELDS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("float64")
    return df


__all__ = [
    "NUMERIC_FIELDS",
    "Record",
    "to_float",
    "to_year",
    "derive_population",
    "normalize_row",
    "normalize_rows",
    "records_to_dataframe",
]
