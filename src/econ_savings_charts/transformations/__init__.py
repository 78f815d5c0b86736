"""
Transformations layer
---------------------

Raw input rows -> typed Records -> per-year savings aggregates.
"""

from .aggregates import (  # noqa: F401
    YearAggregate,
    aggregate_by_year,
    aggregates_to_dataframe,
)
from .records import (  # noqa: F401
    Record,
    normalize_rows,
    records_to_dataframe,
)
from .source import (  # noqa: F401
    DataLoadError,
    load_rows,
)

__all__ = [
    "Record",
    "YearAggregate",
    "DataLoadError",
    "load_rows",
    "normalize_rows",
    "records_to_dataframe",
    "aggregate_by_year",
    "aggregates_to_dataframe",
]
