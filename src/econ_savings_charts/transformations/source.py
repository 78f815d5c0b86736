"""
Input loading: delimited file -> list of raw rows (header name -> cell text).

The file may come from a local path, an http(s) URL or a key in a
StorageAdapter. Cells are returned untouched as strings; numeric coercion is
the normalizer's job. Failing to obtain or parse the file is the one fatal
condition of the chart pipeline and surfaces as `DataLoadError`.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd
import requests

from ..adapters import StorageAdapter
from ..common.retry import http_get_with_retries
from ..config import ColumnMapping


class DataLoadError(RuntimeError):
    """The input table is absent, unreadable or malformed."""


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def _read_source_bytes(source: str | Path, storage: Optional[StorageAdapter]) -> bytes:
    text_source = str(source)
    try:
        if _is_url(text_source):
            return http_get_with_retries(text_source)
        if storage is not None:
            if not storage.exists(text_source):
                raise FileNotFoundError(storage.location(text_source))
            return storage.read_raw(text_source)
        return Path(source).read_bytes()
    except FileNotFoundError as exc:
        raise DataLoadError(f"Input file not found: {text_source}") from exc
    except (OSError, requests.RequestException) as exc:
        raise DataLoadError(f"Could not read input {text_source}: {exc}") from exc


def parse_table(content: bytes, *, source: str = "<bytes>", sep: str = ",") -> pd.DataFrame:
    """
    Parse delimited bytes into an all-string DataFrame.

    Every cell stays a string (empty cells are ""), header names are kept
    byte-for-byte. Raises DataLoadError for empty or ragged input.
    """
    try:
        df = pd.read_csv(
            io.BytesIO(content),
            sep=sep,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError as exc:
        raise DataLoadError(f"Input {source} is empty (no header row)") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"Input {source} is malformed: {exc}") from exc

    return df


def missing_columns(header: Iterable[str], columns: ColumnMapping) -> List[str]:
    """Mapped header names that do not appear (exactly) in `header`."""
    present = set(header)
    return [name for name in columns.as_dict().values() if name not in present]


def load_rows(
    source: str | Path,
    *,
    storage: Optional[StorageAdapter] = None,
    columns: Optional[ColumnMapping] = None,
    sep: str = ",",
) -> List[Dict[str, str]]:
    """
    Load the input table as a list of row dicts, in file order.

    A mapped column missing from the header is reported but not fatal: the
    normalizer turns it into NaN for every row.
    """
    content = _read_source_bytes(source, storage)
    df = parse_table(content, source=str(source), sep=sep)

    absent = missing_columns(df.columns, columns or ColumnMapping())
    for name in absent:
        print(f"[load] Column {name!r} not found in {source}; its field will be missing for every row.")

    print(f"[load] {len(df)} rows read from {source}")
    return df.to_dict(orient="records")


__all__ = ["DataLoadError", "parse_table", "missing_columns", "load_rows"]
