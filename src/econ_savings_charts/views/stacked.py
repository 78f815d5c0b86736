"""
Stacked bar chart of mean savings per year.

Two layers per year, domestic savings at the bottom and gross savings on
top, built with a running cumulative sum:

    domestic: [0, d]
    gross:    [d, d + g]

Missing means stack as 0 but keep showing as "n/a" in tooltips. The y axis
runs from 0 to the largest stacked total rounded up to a nice bound (or to a
configured fixed bound). Bars keep ascending year order whatever their height.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import ChartConfig
from ..transformations.aggregates import YearAggregate
from .axes import draw_bottom_axis, draw_left_axis, format_number
from .scales import BandScale, LinearScale, nice_domain
from .surface import Surface

TARGET_NAME = "stacked"

# (layer key, label, YearAggregate attribute), bottom layer first
SERIES: Tuple[Tuple[str, str, str], ...] = (
    ("domestic", "Gross domestic savings", "mean_domestic_savings_pct"),
    ("gross", "Gross savings", "mean_gross_savings_pct"),
)

MAX_YEAR_LABELS = 12


@dataclass(frozen=True)
class StackSegment:
    year: int
    value: Optional[float]
    y0: float
    y1: float
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class StackLayer:
    key: str
    label: str
    color: str
    segments: Tuple[StackSegment, ...]

    def segment(self, year: int) -> Optional[StackSegment]:
        return next((s for s in self.segments if s.year == year), None)


@dataclass(frozen=True)
class StackedGeometry:
    years: Tuple[int, ...]
    x_scale: BandScale
    y_scale: LinearScale
    layers: Tuple[StackLayer, ...]

    def layer(self, key: str) -> StackLayer:
        for layer in self.layers:
            if layer.key == key:
                return layer
        raise KeyError(key)


@dataclass(frozen=True)
class HighlightDelta:
    year: int
    x: float
    y: float
    width: float
    height: float


def _fmt_pct(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.1f}%"


def tooltip_text(aggregate: YearAggregate) -> str:
    lines = [str(aggregate.year)]
    for _key, label, attr in SERIES:
        lines.append(f"{label}: {_fmt_pct(getattr(aggregate, attr))}")
    return "\n".join(lines)


class StackedBarRenderer:
    def __init__(self, surface: Surface, config: Optional[ChartConfig] = None) -> None:
        self.config = config or ChartConfig()
        self.target = surface.target(TARGET_NAME)
        self._geometry: Optional[StackedGeometry] = None
        self._highlighted: Optional[int] = None

    @property
    def geometry(self) -> Optional[StackedGeometry]:
        return self._geometry

    @property
    def highlighted_year(self) -> Optional[int]:
        return self._highlighted

    def _colors(self) -> Dict[str, str]:
        return {"domestic": self.config.domestic_color, "gross": self.config.gross_color}

    def _y_upper(self, aggregates: Sequence[YearAggregate]) -> float:
        if self.config.stacked_y_max is not None:
            return float(self.config.stacked_y_max)
        max_total = max((a.stacked_total for a in aggregates), default=0.0)
        if max_total <= 0:
            return 1.0
        return nice_domain(0.0, max_total, count=self.config.nice_ticks)[1]

    def build(self, aggregates: Sequence[YearAggregate]) -> StackedGeometry:
        """Size and clear the target, then draw the bars, axes and legend from scratch."""
        cfg = self.config
        m = cfg.margins
        target = self.target
        target.clear()
        target.resize(*cfg.stacked_size)

        x = BandScale(
            tuple(a.year for a in aggregates),
            (m.left, target.width - m.right),
            padding=cfg.bar_padding,
        )
        y = LinearScale((0.0, self._y_upper(aggregates)), (target.height - m.bottom, m.top))
        bandwidth = x.bandwidth
        colors = self._colors()

        running: Dict[int, float] = {a.year: 0.0 for a in aggregates}
        layers: List[StackLayer] = []
        for key, label, attr in SERIES:
            bars = target.layer(f"bars-{key}")
            segments: List[StackSegment] = []
            for agg in aggregates:
                value = getattr(agg, attr)
                y0 = running[agg.year]
                y1 = y0 + (value if value is not None else 0.0)
                running[agg.year] = y1

                px = x(agg.year)
                top, bottom = y(y1), y(y0)
                segment = StackSegment(
                    year=agg.year, value=value, y0=y0, y1=y1,
                    x=px, y=top, width=bandwidth, height=bottom - top,
                )
                segments.append(segment)
                bars.append(
                    "rect",
                    key=f"{key}-{agg.year}",
                    title=tooltip_text(agg),
                    x=segment.x, y=segment.y, width=segment.width, height=segment.height,
                    fill=colors[key],
                )
            layers.append(StackLayer(key, label, colors[key], tuple(segments)))

        self._draw_axes(x, y)
        self._draw_legend()

        self._geometry = StackedGeometry(tuple(x.domain), x, y, tuple(layers))

        # A rebuild drops the outline; put it back if its year survived.
        previous, self._highlighted = self._highlighted, None
        if previous is not None:
            self.highlight(previous)
        return self._geometry

    def _draw_axes(self, x: BandScale, y: LinearScale) -> None:
        cfg = self.config
        m = cfg.margins
        axes = self.target.layer("axes")

        every = max(1, -(-len(x.domain) // MAX_YEAR_LABELS))
        year_ticks = [
            (x(year) + x.bandwidth / 2, str(year))
            for i, year in enumerate(x.domain)
            if i % every == 0
        ]
        draw_bottom_axis(
            axes, year_ticks,
            y=y(0.0), x_range=(m.left, self.target.width - m.right),
            color=cfg.axis_color, text_color=cfg.text_color, title="Year",
        )
        draw_left_axis(
            axes, [(y(t), format_number(t)) for t in y.ticks(5)],
            x=m.left, y_range=(self.target.height - m.bottom, m.top),
            color=cfg.axis_color, text_color=cfg.text_color,
            title="Savings, % of GDP (mean across countries)",
        )

    def _draw_legend(self) -> None:
        cfg = self.config
        legend = self.target.layer("legend")
        x0 = cfg.margins.left + 8
        for i, (key, label, _attr) in enumerate(reversed(SERIES)):
            y0 = 8 + i * 14
            legend.append("rect", x=x0, y=y0, width=10, height=10, fill=self._colors()[key])
            legend.append("text", x=x0 + 16, y=y0 + 9, text=label, fill=cfg.text_color, size=10, anchor="start")

    def highlight(self, year: int) -> Optional[HighlightDelta]:
        """
        Outline the band of `year`.

        Unknown years (or no chart built yet) change nothing and return None.
        """
        geometry = self._geometry
        if geometry is None or year not in geometry.x_scale:
            return None

        cfg = self.config
        m = cfg.margins
        pad = cfg.highlight.padding
        delta = HighlightDelta(
            year=year,
            x=geometry.x_scale(year) - pad,
            y=m.top - pad,
            width=geometry.x_scale.bandwidth + 2 * pad,
            height=(self.target.height - m.bottom) - m.top + 2 * pad,
        )

        layer = self.target.layer("highlight")
        layer.clear()
        layer.append(
            "rect", key="highlight",
            x=delta.x, y=delta.y, width=delta.width, height=delta.height,
            fill="none", stroke=cfg.highlight.stroke,
            stroke_width=cfg.highlight.stroke_width, dash=cfg.highlight.dash,
        )
        self._highlighted = year
        return delta

    def years_in_extent(self, x0: float, x1: float) -> List[int]:
        """Years whose bar centre lies inside the brushed pixel extent."""
        if self._geometry is None:
            return []
        return [int(y) for y in self._geometry.x_scale.invert_extent(x0, x1)]


__all__ = [
    "TARGET_NAME",
    "SERIES",
    "StackSegment",
    "StackLayer",
    "StackedGeometry",
    "HighlightDelta",
    "tooltip_text",
    "StackedBarRenderer",
]
