"""
Per-year aggregation of the two savings series.

For every distinct year present in the records (ascending) we compute the
arithmetic mean of domestic and gross savings across countries. NaN inputs
are left out of the mean; a year with no valid value for a series keeps the
year and marks that mean as missing (None).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import pandas as pd

from .records import Record, records_to_dataframe


@dataclass(frozen=True)
class YearAggregate:
    year: int
    mean_domestic_savings_pct: Optional[float]
    mean_gross_savings_pct: Optional[float]

    @property
    def stacked_total(self) -> float:
        """Bar height with missing parts counted as 0."""
        return (self.mean_domestic_savings_pct or 0.0) + (self.mean_gross_savings_pct or 0.0)


def _missing_if_nan(value: float) -> Optional[float]:
    value = float(value)
    return None if math.isnan(value) else value


def aggregate_by_year(records: Sequence[Record]) -> List[YearAggregate]:
    """
    Mean savings per year, ascending by year.

    Pure: the input is not modified and identical input gives identical
    output, ordering included.
    """
    df = records_to_dataframe(records)
    df = df.dropna(subset=["year"])
    if df.empty:
        return []

    # groupby(...).mean() skips NaN and yields NaN for all-NaN groups
    means = (
        df.groupby("year", sort=True)[["domestic_savings_pct", "gross_savings_pct"]]
        .mean()
    )

    return [
        YearAggregate(
            year=int(year),
            mean_domestic_savings_pct=_missing_if_nan(row["domestic_savings_pct"]),
            mean_gross_savings_pct=_missing_if_nan(row["gross_savings_pct"]),
        )
        for year, row in means.iterrows()
    ]


def aggregates_to_dataframe(aggregates: Sequence[YearAggregate]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "year": a.year,
                "mean_domestic_savings_pct": a.mean_domestic_savings_pct,
                "mean_gross_savings_pct": a.mean_gross_savings_pct,
            }
            for a in aggregates
        ],
        columns=["year", "mean_domestic_savings_pct", "mean_gross_savings_pct"],
    )
    df["year"] = df["year"].astype("int64")
    for col in ("mean_domestic_savings_pct", "mean_gross_savings_pct"):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("float64")
    return df


__all__ = ["YearAggregate", "aggregate_by_year", "aggregates_to_dataframe"]
