"""
Chart configuration
-------------------

One parameterized pipeline instead of a copy per visual variant: palette,
domain bounds, highlight style and sizes all live in `ChartConfig`, and the
exact input header names live in `ColumnMapping`.

Values can be overridden from the environment (see `ChartConfig.from_env`),
optionally seeded from a local `.env` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Optional, Tuple

from .env_loader import load_dotenv_if_present

INPUT_ENV = "CHARTS_INPUT"
OUTPUT_DIR_ENV = "CHARTS_OUTPUT_DIR"
PALETTE_ENV = "CHARTS_PALETTE"
SCATTER_X_FLOOR_ENV = "CHARTS_SCATTER_X_FLOOR"
STACKED_Y_MAX_ENV = "CHARTS_STACKED_Y_MAX"
S3_BUCKET_ENV = "CHARTS_S3_BUCKET"
S3_BASE_PREFIX_ENV = "CHARTS_S3_BASE_PREFIX"

DEFAULT_INPUT = "economy-and-growth.csv"
DEFAULT_OUTPUT_DIR = Path("output")


@dataclass(frozen=True)
class ColumnMapping:
    """Exact (case- and whitespace-sensitive) header name for each field."""

    name: str = "Country Name"
    code: str = "Country Code"
    year: str = "Year"
    domestic_savings_pct: str = "Gross domestic savings (% of GDP)"
    gross_savings_pct: str = "Gross savings (% of GDP)"
    gdp_usd: str = "GDP (current US$)"
    gdp_per_capita_usd: str = "GDP per capita (current US$)"
    gdp_per_capita_ppp: str = "GDP per capita, PPP (current international $)"
    growth_pct: str = "GDP growth (annual %)"

    def as_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "code": self.code,
            "year": self.year,
            "domestic_savings_pct": self.domestic_savings_pct,
            "gross_savings_pct": self.gross_savings_pct,
            "gdp_usd": self.gdp_usd,
            "gdp_per_capita_usd": self.gdp_per_capita_usd,
            "gdp_per_capita_ppp": self.gdp_per_capita_ppp,
            "growth_pct": self.growth_pct,
        }


@dataclass(frozen=True)
class Margins:
    top: float = 40.0
    right: float = 30.0
    bottom: float = 50.0
    left: float = 70.0


@dataclass(frozen=True)
class HighlightStyle:
    stroke: str = "#f8fafc"
    stroke_width: float = 2.0
    padding: float = 2.0
    dash: Optional[str] = None


@dataclass(frozen=True)
class ChartConfig:
    input_source: str = DEFAULT_INPUT
    output_dir: Path = DEFAULT_OUTPUT_DIR
    columns: ColumnMapping = field(default_factory=ColumnMapping)

    stacked_size: Tuple[float, float] = (720.0, 420.0)
    scatter_size: Tuple[float, float] = (720.0, 480.0)
    margins: Margins = field(default_factory=Margins)

    # Stacked bars
    bar_padding: float = 0.1
    nice_ticks: int = 10
    stacked_y_max: Optional[float] = None
    domestic_color: str = "#38bdf8"
    gross_color: str = "#f59e0b"
    highlight: HighlightStyle = field(default_factory=HighlightStyle)

    # Scatter
    palette: str = "turbo"
    scatter_x_floor: Optional[float] = None
    radius_range: Tuple[float, float] = (3.0, 28.0)
    missing_fill: str = "#94a3b8"
    point_opacity: float = 0.8
    transition_ms: int = 750

    # Shared
    background: str = "#0f172a"
    text_color: str = "#cbd5e1"
    axis_color: str = "#64748b"

    @classmethod
    def from_env(cls, *, dotenv_path: str | Path | None = None, **overrides) -> "ChartConfig":
        """
        Build a config from CHARTS_* environment variables.

        Keyword overrides win over the environment, which wins over defaults.
        """
        load_dotenv_if_present(dotenv_path)

        values: Dict[str, object] = {}
        if os.getenv(INPUT_ENV):
            values["input_source"] = os.environ[INPUT_ENV]
        if os.getenv(OUTPUT_DIR_ENV):
            values["output_dir"] = Path(os.environ[OUTPUT_DIR_ENV])
        if os.getenv(PALETTE_ENV):
            values["palette"] = os.environ[PALETTE_ENV]

        x_floor = _optional_float_env(SCATTER_X_FLOOR_ENV)
        if x_floor is not None:
            if x_floor <= 0:
                raise ValueError(f"{SCATTER_X_FLOOR_ENV} must be positive for a log axis, got {x_floor}")
            values["scatter_x_floor"] = x_floor

        y_max = _optional_float_env(STACKED_Y_MAX_ENV)
        if y_max is not None:
            if y_max <= 0:
                raise ValueError(f"{STACKED_Y_MAX_ENV} must be positive, got {y_max}")
            values["stacked_y_max"] = y_max

        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **overrides) -> "ChartConfig":
        return replace(self, **overrides)


def _optional_float_env(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name!r} is not a number: {raw!r}") from exc


__all__ = [
    "INPUT_ENV",
    "OUTPUT_DIR_ENV",
    "PALETTE_ENV",
    "SCATTER_X_FLOOR_ENV",
    "STACKED_Y_MAX_ENV",
    "S3_BUCKET_ENV",
    "S3_BASE_PREFIX_ENV",
    "ColumnMapping",
    "Margins",
    "HighlightStyle",
    "ChartConfig",
]
