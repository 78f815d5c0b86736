"""
Views layer
-----------

View state, scales, the in-memory drawing surface and the two linked
renderers (stacked savings bars, GDP/growth bubble scatter).
"""

from .scatter import ScatterGeometry, ScatterPoint, ScatterRenderer  # noqa: F401
from .stacked import HighlightDelta, StackedBarRenderer, StackedGeometry  # noqa: F401
from .state import ViewState  # noqa: F401
from .surface import Element, Surface, Target, Transition  # noqa: F401

__all__ = [
    "ViewState",
    "Surface",
    "Target",
    "Element",
    "Transition",
    "StackedBarRenderer",
    "StackedGeometry",
    "HighlightDelta",
    "ScatterRenderer",
    "ScatterGeometry",
    "ScatterPoint",
]
