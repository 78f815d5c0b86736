import math

import pytest

from econ_savings_charts.adapters import LocalStorageAdapter
from econ_savings_charts.config import ColumnMapping
from econ_savings_charts.transformations import DataLoadError, load_rows, normalize_rows
from econ_savings_charts.transformations.source import missing_columns, parse_table

COLS = ColumnMapping()


def test_load_rows_from_path_keeps_file_order(sample_csv):
    rows = load_rows(sample_csv)

    assert len(rows) == 5
    assert [r[COLS.code] for r in rows] == ["ALA", "ALA", "BOR", "BOR", "CAR"]
    # cells stay raw text
    assert rows[4][COLS.gross_savings_pct] == ".."
    assert rows[3][COLS.domestic_savings_pct] == ""


def test_load_rows_from_storage_key(tmp_path, sample_csv):
    storage = LocalStorageAdapter(tmp_path / "store")
    storage.write_raw("input/data.csv", sample_csv.read_bytes())

    rows = load_rows("input/data.csv", storage=storage)
    assert len(rows) == 5


def test_missing_file_raises(tmp_path):
    with pytest.raises(DataLoadError, match="not found"):
        load_rows(tmp_path / "nope.csv")


def test_missing_storage_key_raises(tmp_path):
    with pytest.raises(DataLoadError):
        load_rows("input/nope.csv", storage=LocalStorageAdapter(tmp_path))


def test_empty_file_raises(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_bytes(b"")
    with pytest.raises(DataLoadError, match="empty"):
        load_rows(path)


def test_ragged_file_raises(tmp_path):
    path = tmp_path / "ragged.csv"
    path.write_text("a,b\n1,2\n1,2,3,4\n", encoding="utf-8")
    with pytest.raises(DataLoadError, match="malformed"):
        load_rows(path)


def test_header_names_are_matched_exactly(tmp_path, capsys):
    path = tmp_path / "partial.csv"
    path.write_text(
        '"Country Name","Country Code","Year"," GDP growth (annual %)"\n"Aland","ALA","2019","3.1"\n',
        encoding="utf-8",
    )

    rows = load_rows(path)
    assert "Column 'GDP growth (annual %)' not found" in capsys.readouterr().out

    (record,) = normalize_rows(rows)
    assert record.year == 2019
    assert math.isnan(record.growth_pct)
    assert math.isnan(record.domestic_savings_pct)


def test_byte_order_mark_is_stripped():
    df = parse_table(b"\xef\xbb\xbf" + b"\"Country Name\",\"Year\"\n\"Aland\",\"2019\"\n")
    assert list(df.columns) == ["Country Name", "Year"]


def test_missing_columns():
    header = ["Country Name", "Country Code", "Year"]
    absent = missing_columns(header, COLS)
    assert "Country Name" not in absent
    assert COLS.growth_pct in absent


def test_url_source_goes_through_http(monkeypatch, sample_csv):
    calls = []

    def fake_get(url, **kwargs):
        calls.append(url)
        return sample_csv.read_bytes()

    monkeypatch.setattr("econ_savings_charts.transformations.source.http_get_with_retries", fake_get)

    rows = load_rows("https://example.org/economy.csv")

    assert calls == ["https://example.org/economy.csv"]
    assert len(rows) == 5


def test_url_failure_becomes_data_load_error(monkeypatch):
    import requests

    def failing_get(url, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr("econ_savings_charts.transformations.source.http_get_with_retries", failing_get)

    with pytest.raises(DataLoadError, match="offline"):
        load_rows("https://example.org/economy.csv")
