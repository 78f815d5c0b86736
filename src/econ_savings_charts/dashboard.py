"""
The two linked charts wired together.

Loads and normalizes the input once, aggregates it, builds the stacked
chart, paints the initial selection and then exposes the UI entry points
(`on_year_change`, `on_ppp_toggle`, range/brush and bubble click) and PNG
export.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .adapters import StorageAdapter
from .config import ChartConfig
from .export import DEFAULT_EXPORT_NAME, export_png
from .interaction import InteractionController
from .transformations import (
    Record,
    YearAggregate,
    aggregate_by_year,
    load_rows,
    normalize_rows,
)
from .views import ScatterRenderer, StackedBarRenderer, Surface, ViewState
from .views.scatter import TARGET_NAME as SCATTER_TARGET
from .views.stacked import TARGET_NAME as STACKED_TARGET


class Dashboard:
    def __init__(
        self,
        records: Sequence[Record],
        *,
        config: Optional[ChartConfig] = None,
        selected_year: Optional[int] = None,
        year_range: Optional[Tuple[int, int]] = None,
        use_ppp: bool = False,
    ) -> None:
        self.config = config or ChartConfig()
        self.records: Tuple[Record, ...] = tuple(records)
        self.aggregates: Tuple[YearAggregate, ...] = tuple(aggregate_by_year(self.records))

        self.surface = Surface(
            {
                STACKED_TARGET: self.config.stacked_size,
                SCATTER_TARGET: self.config.scatter_size,
            }
        )
        self.stacked = StackedBarRenderer(self.surface, self.config)
        self.scatter = ScatterRenderer(self.surface, self.config)
        self.stacked.build(self.aggregates)

        if selected_year is None:
            if self.aggregates:
                selected_year = self.aggregates[-1].year
            else:
                print("[dashboard] No year found in the data; charts stay empty.")
                selected_year = 0

        state = ViewState(selected_year=int(selected_year), year_range=year_range, use_ppp=use_ppp)
        self.controller = InteractionController(self.records, self.scatter, self.stacked, state)
        self.controller.refresh()

    @classmethod
    def load(
        cls,
        source: Optional[str | Path] = None,
        *,
        config: Optional[ChartConfig] = None,
        storage: Optional[StorageAdapter] = None,
        **state,
    ) -> "Dashboard":
        """Load `source` (default: config.input_source) and build the charts. Raises DataLoadError."""
        cfg = config or ChartConfig()
        rows = load_rows(source or cfg.input_source, storage=storage, columns=cfg.columns)
        return cls(normalize_rows(rows, cfg.columns), config=cfg, **state)

    @property
    def state(self) -> ViewState:
        return self.controller.state

    @property
    def years(self) -> List[int]:
        return [a.year for a in self.aggregates]

    def on_year_change(self, year: int) -> List[str]:
        return self.controller.on_year_change(year)

    def on_ppp_toggle(self, use_ppp: bool) -> List[str]:
        return self.controller.on_ppp_toggle(use_ppp)

    def on_year_range_change(self, year_range: Optional[Tuple[int, int]]) -> List[str]:
        return self.controller.on_year_range_change(year_range)

    def on_brush(self, x0: float, x1: float) -> List[str]:
        return self.controller.on_brush(x0, x1)

    def on_bubble_click(self, px: float, py: float) -> List[str]:
        return self.controller.on_bubble_click(px, py)

    def tooltip_at(self, target: str, px: float, py: float) -> Optional[str]:
        """Tooltip text for a pointer position on one of the targets."""
        if target == SCATTER_TARGET:
            point = self.scatter.point_at(px, py)
            return point.tooltip if point is not None else None

        for element in reversed(self.surface.target(target).elements()):
            a = element.attrs
            if (
                element.kind == "rect"
                and element.title
                and a["x"] <= px <= a["x"] + a["width"]
                and a["y"] <= py <= a["y"] + a["height"]
            ):
                return element.title
        return None

    def export_png(self, storage: StorageAdapter, *, name: str = DEFAULT_EXPORT_NAME) -> str:
        return export_png(self.surface, storage, name=name, config=self.config)


__all__ = ["Dashboard"]
