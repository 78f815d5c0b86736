"""
PNG export of the drawing surface.

Every target is painted with matplotlib in surface pixel coordinates (origin
top-left, y growing downwards), stacked vertically in one image, and the PNG
bytes are written through a StorageAdapter.
"""

from __future__ import annotations

import io
from typing import Optional

import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Rectangle

from .adapters import StorageAdapter
from .config import ChartConfig
from .views.surface import Element, Surface, Target

EXPORTS_PREFIX = "exports"
DEFAULT_EXPORT_NAME = "savings_growth_charts"

# 1 surface pixel at 100 dpi is 0.72 pt
_PX_TO_PT = 0.72
_ANCHORS = {"start": "left", "middle": "center", "end": "right"}


def _color(value: Optional[str]) -> str:
    return "none" if value in (None, "none") else value


def _draw_element(ax, el: Element) -> None:
    a = el.attrs
    linestyle = "--" if a.get("dash") else "-"
    if el.kind == "rect":
        ax.add_patch(
            Rectangle(
                (a["x"], a["y"]), a["width"], a["height"],
                facecolor=_color(a.get("fill")),
                edgecolor=_color(a.get("stroke")),
                linewidth=a.get("stroke_width", 0.0) * _PX_TO_PT,
                linestyle=linestyle,
                alpha=a.get("opacity"),
            )
        )
    elif el.kind == "circle":
        ax.add_patch(
            Circle(
                (a["cx"], a["cy"]), a["r"],
                facecolor=_color(a.get("fill")),
                edgecolor=_color(a.get("stroke")),
                linewidth=a.get("stroke_width", 0.0) * _PX_TO_PT,
                linestyle=linestyle,
                alpha=a.get("opacity"),
            )
        )
    elif el.kind == "line":
        ax.plot(
            [a["x1"], a["x2"]], [a["y1"], a["y2"]],
            color=_color(a.get("stroke")),
            linewidth=a.get("stroke_width", 1.0) * _PX_TO_PT,
            linestyle=linestyle,
        )
    elif el.kind == "text":
        ax.text(
            a["x"], a["y"], a["text"],
            color=_color(a.get("fill")),
            fontsize=a.get("size", 10) * _PX_TO_PT,
            ha=_ANCHORS.get(a.get("anchor", "start"), "left"),
            va="baseline",
            rotation=a.get("rotate", 0),
        )
    else:
        raise ValueError(f"Cannot rasterize element kind {el.kind!r}")


def _draw_target(ax, target: Target, background: str) -> None:
    ax.set_xlim(0, target.width)
    ax.set_ylim(target.height, 0)
    ax.set_aspect("equal")
    ax.set_facecolor(background)
    ax.axis("off")
    for element in target.elements():
        _draw_element(ax, element)


def render_surface_png(surface: Surface, *, config: Optional[ChartConfig] = None, dpi: int = 100) -> bytes:
    cfg = config or ChartConfig()
    targets = surface.targets()
    if not targets:
        raise ValueError("Surface has no drawing targets to export")

    width = max(t.width for t in targets)
    height = sum(t.height for t in targets)

    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    fig.patch.set_facecolor(cfg.background)
    try:
        top = height
        for target in targets:
            top -= target.height
            ax = fig.add_axes((0, top / height, target.width / width, target.height / height))
            _draw_target(ax, target, cfg.background)

        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=dpi, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)
    return buf.getvalue()


def export_png(
    surface: Surface,
    storage: StorageAdapter,
    *,
    name: str = DEFAULT_EXPORT_NAME,
    config: Optional[ChartConfig] = None,
) -> str:
    """Rasterize the surface and store it as exports/<name>.png; returns the location."""
    png = render_surface_png(surface, config=config)
    key = f"{EXPORTS_PREFIX}/{name}.png"
    location = storage.write_raw(key, png)
    print(f"[export] PNG written to {location} ({len(png)} bytes)")
    return location


__all__ = ["EXPORTS_PREFIX", "DEFAULT_EXPORT_NAME", "render_surface_png", "export_png"]
