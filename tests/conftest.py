import math

import matplotlib

matplotlib.use("Agg")

import pytest

from econ_savings_charts.config import ChartConfig, ColumnMapping
from econ_savings_charts.transformations.records import Record
from econ_savings_charts.views import ScatterRenderer, StackedBarRenderer, Surface

COLS = ColumnMapping()
NAN = float("nan")


def _row(name, code, year, domestic="", gross="", gdp="", gdp_pc="", ppp="", growth=""):
    return {
        COLS.name: name,
        COLS.code: code,
        COLS.year: str(year),
        COLS.domestic_savings_pct: str(domestic),
        COLS.gross_savings_pct: str(gross),
        COLS.gdp_usd: str(gdp),
        COLS.gdp_per_capita_usd: str(gdp_pc),
        COLS.gdp_per_capita_ppp: str(ppp),
        COLS.growth_pct: str(growth),
    }


def _record(
    code,
    year,
    *,
    name=None,
    gdp_pc=1000.0,
    ppp=NAN,
    growth=2.0,
    population=1e6,
    domestic=NAN,
    gross=20.0,
):
    gdp = gdp_pc * population if math.isfinite(population) else NAN
    return Record(
        name=name or f"Country {code}",
        code=code,
        year=year,
        domestic_savings_pct=domestic,
        gross_savings_pct=gross,
        gdp_usd=gdp,
        gdp_per_capita_usd=gdp_pc,
        gdp_per_capita_ppp=ppp,
        growth_pct=growth,
        population=population,
    )


@pytest.fixture
def make_row():
    return _row


@pytest.fixture
def make_record():
    return _record


@pytest.fixture
def config():
    return ChartConfig()


@pytest.fixture
def surface(config):
    return Surface({"stacked": config.stacked_size, "scatter": config.scatter_size})


@pytest.fixture
def stacked(surface, config):
    return StackedBarRenderer(surface, config)


@pytest.fixture
def scatter(surface, config):
    return ScatterRenderer(surface, config)


def write_csv(path, rows):
    header = list(COLS.as_dict().values())
    lines = [",".join(f'"{h}"' for h in header)]
    for row in rows:
        lines.append(",".join(f'"{row.get(h, "")}"' for h in header))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def sample_csv(tmp_path):
    rows = [
        _row("Aland", "ALA", 2019, 10, 15, 5e9, 5000, 7000, 2.5),
        _row("Aland", "ALA", 2020, 12, 18, 4.8e9, 4800, 6900, -1.0),
        _row("Borduria", "BOR", 2019, 20, 25, 2e11, 20000, 25000, 1.2),
        _row("Borduria", "BOR", 2020, "", 22, 2.1e11, 21000, 26000, 0.8),
        _row("Carpania", "CAR", 2020, 5, "..", 1e9, 500, 900, 6.3),
    ]
    return write_csv(tmp_path / "economy-and-growth.csv", rows)
