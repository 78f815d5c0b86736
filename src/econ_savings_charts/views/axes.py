from __future__ import annotations

from typing import Sequence, Tuple

from .surface import Layer

TICK_SIZE = 6.0
FONT_SIZE = 10.0


def format_number(value: float) -> str:
    """Compact tick label: 1500 -> "1.5k", 2e6 -> "2M", 12.5 -> "12.5"."""
    magnitude = abs(value)
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "k")):
        if magnitude >= threshold:
            return f"{value / threshold:g}{suffix}"
    return f"{value:g}"


def draw_bottom_axis(
    layer: Layer,
    ticks: Sequence[Tuple[float, str]],
    *,
    y: float,
    x_range: Tuple[float, float],
    color: str,
    text_color: str,
    title: str = "",
) -> None:
    layer.append("line", x1=x_range[0], y1=y, x2=x_range[1], y2=y, stroke=color, stroke_width=1.0)
    for x, label in ticks:
        layer.append("line", x1=x, y1=y, x2=x, y2=y + TICK_SIZE, stroke=color, stroke_width=1.0)
        layer.append(
            "text", x=x, y=y + TICK_SIZE + FONT_SIZE + 2, text=label,
            fill=text_color, size=FONT_SIZE, anchor="middle",
        )
    if title:
        layer.append(
            "text", x=(x_range[0] + x_range[1]) / 2, y=y + TICK_SIZE + 2 * FONT_SIZE + 14,
            text=title, fill=text_color, size=FONT_SIZE + 1, anchor="middle",
        )


def draw_left_axis(
    layer: Layer,
    ticks: Sequence[Tuple[float, str]],
    *,
    x: float,
    y_range: Tuple[float, float],
    color: str,
    text_color: str,
    title: str = "",
) -> None:
    layer.append("line", x1=x, y1=y_range[0], x2=x, y2=y_range[1], stroke=color, stroke_width=1.0)
    for y, label in ticks:
        layer.append("line", x1=x - TICK_SIZE, y1=y, x2=x, y2=y, stroke=color, stroke_width=1.0)
        layer.append(
            "text", x=x - TICK_SIZE - 3, y=y + FONT_SIZE / 3, text=label,
            fill=text_color, size=FONT_SIZE, anchor="end",
        )
    if title:
        layer.append(
            "text", x=x - 52, y=(y_range[0] + y_range[1]) / 2, text=title,
            fill=text_color, size=FONT_SIZE + 1, anchor="middle", rotate=90,
        )


__all__ = ["format_number", "draw_bottom_axis", "draw_left_axis"]
