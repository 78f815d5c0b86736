"""
Local entrypoint: input table -> linked charts -> PNG.

Runs, in order:

1. Load the input table (local path, URL or key in the artefact storage)
2. Normalize rows into Records
3. Aggregate savings per year and persist them (Parquet)
4. Build both charts and apply the requested selection
5. Export the surface as PNG

Intended usage:

    python -m econ_savings_charts.local_pipeline --input economy-and-growth.csv --year 2019 --ppp

Artefacts go to CHARTS_OUTPUT_DIR (default ./output), or to S3 when
CHARTS_S3_BUCKET is set.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .adapters import LocalStorageAdapter, S3StorageAdapter, StorageAdapter
from .config import S3_BASE_PREFIX_ENV, S3_BUCKET_ENV, ChartConfig
from .dashboard import Dashboard
from .export import DEFAULT_EXPORT_NAME
from .transformations import aggregates_to_dataframe, load_rows, normalize_rows

AGGREGATES_KEY = "processed/year_aggregates.parquet"


def build_storage(config: ChartConfig) -> StorageAdapter:
    bucket = os.getenv(S3_BUCKET_ENV)
    if bucket:
        return S3StorageAdapter(bucket=bucket, base_prefix=os.getenv(S3_BASE_PREFIX_ENV) or None)
    return LocalStorageAdapter(config.output_dir)


def input_storage(source: str, storage: StorageAdapter) -> Optional[StorageAdapter]:
    """Storage to read `source` through: None for URLs and existing local files, else `storage` (source is a key)."""
    if source.startswith(("http://", "https://")) or Path(source).is_file():
        return None
    return storage


def run_local_pipeline(
    *,
    config: Optional[ChartConfig] = None,
    storage: Optional[StorageAdapter] = None,
    year: Optional[int] = None,
    year_range: Optional[Tuple[int, int]] = None,
    use_ppp: bool = False,
    export_name: str = DEFAULT_EXPORT_NAME,
) -> Dict[str, List[str]]:
    """
    Run the chart pipeline end-to-end and return the written artefacts.

    Raises DataLoadError when the input cannot be read.
    """
    cfg = config or ChartConfig.from_env()
    storage = storage or build_storage(cfg)
    artefacts: Dict[str, List[str]] = {}

    print(f"[1/5] Loading {cfg.input_source}...")
    rows = load_rows(cfg.input_source, storage=input_storage(cfg.input_source, storage), columns=cfg.columns)

    print("[2/5] Normalizing rows...")
    records = normalize_rows(rows, cfg.columns)
    print(f"      {len(records)} records.")

    print("[3/5] Aggregating savings per year...")
    dashboard = Dashboard(
        records, config=cfg, selected_year=year, year_range=year_range, use_ppp=use_ppp,
    )
    location = storage.write_parquet(aggregates_to_dataframe(dashboard.aggregates), AGGREGATES_KEY)
    artefacts["aggregates"] = [location]
    print(f"      {len(dashboard.aggregates)} years -> {location}")

    print(f"[4/5] Charts built for {dashboard.state.describe()} (PPP={'on' if dashboard.state.use_ppp else 'off'}).")
    if dashboard.scatter.geometry is None:
        print("      Scatter has no plottable country for this selection; it is left empty.")

    print("[5/5] Exporting PNG...")
    artefacts["export"] = [dashboard.export_png(storage, name=export_name)]

    print("\nPipeline completed successfully.")
    return artefacts


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Render the savings and GDP-growth linked charts to PNG.",
    )
    parser.add_argument("--input", type=str, default=None, help="Input CSV path, URL or storage key (default: CHARTS_INPUT).")
    parser.add_argument("--output-dir", type=str, default=None, help="Artefact directory (default: CHARTS_OUTPUT_DIR).")
    parser.add_argument("--year", type=int, default=None, help="Selected year (default: latest year in the data).")
    parser.add_argument("--start-year", type=int, default=None, help="Inclusive range start; needs --end-year.")
    parser.add_argument("--end-year", type=int, default=None, help="Inclusive range end; needs --start-year.")
    parser.add_argument("--ppp", action="store_true", help="Use PPP-adjusted GDP per capita on the x axis.")
    parser.add_argument("--x-floor", type=float, default=None, help="Fixed floor for the log x axis.")
    parser.add_argument("--export-name", type=str, default=DEFAULT_EXPORT_NAME, help="PNG file name, without extension.")

    args = parser.parse_args()
    if (args.start_year is None) != (args.end_year is None):
        parser.error("--start-year and --end-year must be given together")

    overrides = {}
    if args.input:
        overrides["input_source"] = args.input
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if args.x_floor is not None:
        overrides["scatter_x_floor"] = args.x_floor

    run_local_pipeline(
        config=ChartConfig.from_env(**overrides),
        year=args.year,
        year_range=(args.start_year, args.end_year) if args.start_year is not None else None,
        use_ppp=args.ppp,
        export_name=args.export_name,
    )


__all__ = ["AGGREGATES_KEY", "build_storage", "input_storage", "run_local_pipeline"]
