"""
econ_savings_charts
-------------------

Country savings and GDP-growth indicators rendered as two linked charts:
mean savings per year as stacked bars, and GDP per capita against growth as
a bubble scatter, both driven by one interactive year / PPP selection.
"""

from .config import ChartConfig, ColumnMapping  # noqa: F401
from .dashboard import Dashboard  # noqa: F401
from .transformations import DataLoadError  # noqa: F401

__version__ = "0.1.0"

__all__ = ["ChartConfig", "ColumnMapping", "Dashboard", "DataLoadError", "__version__"]
