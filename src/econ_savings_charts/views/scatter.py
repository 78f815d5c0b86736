"""
Bubble scatter: GDP per capita (log x) vs GDP growth (linear y).

Selection: every record inside the year range when one is set, otherwise
exactly the selected year. Records with a non-finite or non-positive x, or a
non-finite growth, are left out. An empty result leaves the chart as it is.

Scales are recomputed from the plotted subset on every render; bubble radius
follows sqrt(population) so area tracks population, fill follows gross
savings on a sequential palette.

Circles are keyed by country code. Re-rendering moves an existing circle
(recording a transition) instead of replacing it; a code that shows up more
than once in the subset gets "#2", "#3", ... suffixes and is drawn as several
overlapping circles.

The clicked country (`ViewState.selected_code`) is outlined with the
highlight stroke on every render until the selection is cleared.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config import ChartConfig
from ..transformations.records import Record
from .axes import draw_bottom_axis, draw_left_axis, format_number
from .scales import LinearScale, LogScale, SequentialColorScale, SqrtScale, extent
from .state import ViewState
from .surface import Element, JoinResult, Surface

TARGET_NAME = "scatter"
LEGEND_TITLE = "Gross savings (% of GDP)"
LEGEND_WIDTH = 180.0
LEGEND_STOPS = 11


@dataclass(frozen=True)
class ScatterPoint:
    key: str
    code: str
    name: str
    year: int
    x_value: float
    growth_pct: float
    population: float
    gross_savings_pct: float
    cx: float
    cy: float
    r: float
    fill: str
    tooltip: str
    selected: bool = False


@dataclass(frozen=True)
class ScatterGeometry:
    points: Tuple[ScatterPoint, ...]
    x_scale: LogScale
    y_scale: LinearScale
    r_scale: Optional[SqrtScale]
    color_scale: Optional[SequentialColorScale]
    join: JoinResult

    def point(self, key: str) -> Optional[ScatterPoint]:
        return next((p for p in self.points if p.key == key), None)


def valid_subset(records: Sequence[Record], state: ViewState) -> List[Record]:
    """Records selected by `state` that can be placed on a log-x / linear-y plot."""
    subset: List[Record] = []
    for record in records:
        if not state.selects(record):
            continue
        x = state.x_value(record)
        if not (math.isfinite(x) and x > 0 and math.isfinite(record.growth_pct)):
            continue
        subset.append(record)
    return subset


def point_keys(records: Sequence[Record]) -> List[str]:
    seen: Counter = Counter()
    keys: List[str] = []
    for record in records:
        base = record.code or record.name or "?"
        seen[base] += 1
        keys.append(base if seen[base] == 1 else f"{base}#{seen[base]}")
    return keys


def _fmt(value: float, template: str) -> str:
    return "n/a" if not math.isfinite(value) else template.format(value)


def tooltip_text(record: Record, x_value: float, use_ppp: bool) -> str:
    gdp_label = "GDP per capita, PPP" if use_ppp else "GDP per capita"
    return "\n".join(
        [
            f"{record.name} ({record.code}), {record.year}",
            f"{gdp_label}: {_fmt(x_value, '${:,.0f}')}",
            f"Growth: {_fmt(record.growth_pct, '{:.1f}%')}",
            f"Population: {format_number(record.population) if math.isfinite(record.population) else 'n/a'}",
            f"Gross savings: {_fmt(record.gross_savings_pct, '{:.1f}%')}",
        ]
    )


class ScatterRenderer:
    def __init__(self, surface: Surface, config: Optional[ChartConfig] = None) -> None:
        self.config = config or ChartConfig()
        self.target = surface.target(TARGET_NAME)
        self._geometry: Optional[ScatterGeometry] = None

    @property
    def geometry(self) -> Optional[ScatterGeometry]:
        return self._geometry

    def _x_domain(self, values: Sequence[float]) -> Tuple[float, float]:
        lo, hi = extent(values)
        floor = self.config.scatter_x_floor
        if floor is not None and 0 < floor < hi:
            lo = floor
        return lo, hi

    def render(self, records: Sequence[Record], state: ViewState) -> Optional[ScatterGeometry]:
        """
        Draw the records selected by `state`.

        Returns None, leaving the previous circles on screen, when nothing in
        the selection can be plotted.
        """
        subset = valid_subset(records, state)
        if not subset:
            return None

        cfg = self.config
        m = cfg.margins
        target = self.target
        target.resize(*cfg.scatter_size)
        # Creation order is paint order: axes under points under legend.
        axes, points_layer, legend = target.layer("axes"), target.layer("points"), target.layer("legend")

        x_values = [state.x_value(r) for r in subset]
        x = LogScale(self._x_domain(x_values), (m.left, target.width - m.right))
        y = LinearScale(extent([r.growth_pct for r in subset]), (target.height - m.bottom, m.top))

        pop_extent = extent([r.population for r in subset])
        r_scale = SqrtScale(pop_extent, cfg.radius_range) if pop_extent else None
        savings_extent = extent([r.gross_savings_pct for r in subset])
        color = SequentialColorScale(savings_extent, cfg.palette) if savings_extent else None

        points: List[ScatterPoint] = []
        for key, record, x_value in zip(point_keys(subset), subset, x_values):
            radius = r_scale(record.population) if r_scale is not None else float("nan")
            if not math.isfinite(radius):
                radius = cfg.radius_range[0]
            fill = (color(record.gross_savings_pct) if color is not None else None) or cfg.missing_fill
            points.append(
                ScatterPoint(
                    key=key, code=record.code, name=record.name, year=int(record.year),
                    x_value=x_value, growth_pct=record.growth_pct,
                    population=record.population, gross_savings_pct=record.gross_savings_pct,
                    cx=x(x_value), cy=y(record.growth_pct), r=radius, fill=fill,
                    tooltip=tooltip_text(record, x_value, state.use_ppp),
                    selected=state.is_selected_code(record.code),
                )
            )

        # Big bubbles first so small ones stay visible (and hoverable) on top;
        # the clicked country is painted last.
        points.sort(key=lambda p: (p.selected, -p.r))
        elements = [
            Element(
                "circle",
                {"cx": p.cx, "cy": p.cy, "r": p.r, "fill": p.fill, "opacity": cfg.point_opacity,
                 **self._stroke(p.selected)},
                key=p.key,
                title=p.tooltip,
            )
            for p in points
        ]
        result = points_layer.join(elements, duration_ms=cfg.transition_ms, enter_from={"r": 0.0})
        target.start_transitions(result.transitions)

        axes.clear()
        self._draw_axes(axes, x, y, state)
        legend.clear()
        if color is not None:
            self._draw_legend(legend, color)

        self._geometry = ScatterGeometry(tuple(points), x, y, r_scale, color, result)
        return self._geometry

    def _stroke(self, selected: bool) -> dict:
        if selected:
            style = self.config.highlight
            return {"stroke": style.stroke, "stroke_width": style.stroke_width, "dash": style.dash}
        return {"stroke": self.config.background, "stroke_width": 0.5, "dash": None}

    def _draw_axes(self, layer, x: LogScale, y: LinearScale, state: ViewState) -> None:
        cfg = self.config
        m = cfg.margins
        bottom = self.target.height - m.bottom
        draw_bottom_axis(
            layer, [(x(t), format_number(t)) for t in x.ticks()],
            y=bottom, x_range=(m.left, self.target.width - m.right),
            color=cfg.axis_color, text_color=cfg.text_color,
            title=f"{state.x_label}, {state.describe()} (log scale)",
        )
        draw_left_axis(
            layer, [(y(t), format_number(t)) for t in y.ticks(6)],
            x=m.left, y_range=(bottom, m.top),
            color=cfg.axis_color, text_color=cfg.text_color,
            title="GDP growth (annual %)",
        )

    def _draw_legend(self, layer, color: SequentialColorScale) -> None:
        cfg = self.config
        x0 = self.target.width - cfg.margins.right - LEGEND_WIDTH
        seg = LEGEND_WIDTH / LEGEND_STOPS
        layer.append("text", x=x0, y=12, text=LEGEND_TITLE, fill=cfg.text_color, size=10, anchor="start")
        for i, (_offset, stop) in enumerate(color.stops(LEGEND_STOPS)):
            layer.append("rect", x=x0 + i * seg, y=16, width=seg, height=10, fill=stop)
        layer.append(
            "rect", x=x0, y=16, width=LEGEND_WIDTH, height=10,
            fill="none", stroke="#333333", stroke_width=1.0,
        )
        lo, hi = color.domain
        layer.append("text", x=x0, y=38, text=f"Low ({lo:.0f})", fill=cfg.text_color, size=9, anchor="start")
        layer.append("text", x=x0 + LEGEND_WIDTH, y=38, text=f"High ({hi:.0f})", fill=cfg.text_color, size=9, anchor="end")

    def point_at(self, px: float, py: float) -> Optional[ScatterPoint]:
        """Topmost bubble under the pointer, for hover tooltips."""
        if self._geometry is None:
            return None
        for point in reversed(self._geometry.points):
            if math.hypot(point.cx - px, point.cy - py) <= point.r:
                return point
        return None


__all__ = [
    "TARGET_NAME",
    "ScatterPoint",
    "ScatterGeometry",
    "valid_subset",
    "point_keys",
    "tooltip_text",
    "ScatterRenderer",
]
