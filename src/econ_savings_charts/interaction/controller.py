"""
Interaction controller: UI events -> ViewState mutation -> re-render.

It is the only writer of the ViewState. Each state field declares which
renders it invalidates; after swapping in the new state the controller runs
exactly those renders, always in the order scatter -> highlight. Nothing here
computes chart data.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..transformations.records import Record
from ..views.scatter import ScatterRenderer
from ..views.stacked import StackedBarRenderer
from ..views.state import ViewState

SCATTER = "scatter"
HIGHLIGHT = "highlight"
RENDER_ORDER: Tuple[str, ...] = (SCATTER, HIGHLIGHT)

INVALIDATES: Dict[str, FrozenSet[str]] = {
    "selected_year": frozenset({SCATTER, HIGHLIGHT}),
    "year_range": frozenset({SCATTER}),
    "use_ppp": frozenset({SCATTER}),
    "selected_code": frozenset({SCATTER}),
}


class InteractionController:
    def __init__(
        self,
        records: Sequence[Record],
        scatter: ScatterRenderer,
        stacked: StackedBarRenderer,
        state: ViewState,
    ) -> None:
        self._records: Tuple[Record, ...] = tuple(records)
        self._scatter = scatter
        self._stacked = stacked
        self._state = state
        self.last_results: Dict[str, Any] = {}

    @property
    def state(self) -> ViewState:
        return self._state

    def _render(self, name: str) -> Any:
        if name == SCATTER:
            return self._scatter.render(self._records, self._state)
        return self._stacked.highlight(self._state.selected_year)

    def _run(self, dirty: FrozenSet[str]) -> List[str]:
        called: List[str] = []
        for name in RENDER_ORDER:
            if name in dirty:
                self.last_results[name] = self._render(name)
                called.append(name)
        return called

    def _apply(self, **changes: Any) -> List[str]:
        new_state = replace(self._state, **changes)
        changed = [name for name in changes if getattr(new_state, name) != getattr(self._state, name)]
        self._state = new_state

        dirty: FrozenSet[str] = frozenset()
        for name in changed:
            dirty |= INVALIDATES[name]
        return self._run(dirty)

    def refresh(self) -> List[str]:
        """Draw everything that depends on the state (initial paint)."""
        return self._run(frozenset(RENDER_ORDER))

    def on_year_change(self, year: int) -> List[str]:
        return self._apply(selected_year=int(year))

    def on_ppp_toggle(self, use_ppp: bool) -> List[str]:
        return self._apply(use_ppp=bool(use_ppp))

    def on_year_range_change(self, year_range: Optional[Tuple[int, int]]) -> List[str]:
        """Set an inclusive (start, end) range, or None to go back to single-year mode."""
        if year_range is not None:
            start, end = (int(y) for y in year_range)
            year_range = (min(start, end), max(start, end))
        return self._apply(year_range=year_range)

    def on_brush(self, x0: float, x1: float) -> List[str]:
        """Turn a brush over the bars into a year range; an empty brush clears it."""
        years = self._stacked.years_in_extent(x0, x1)
        return self.on_year_range_change((min(years), max(years)) if years else None)

    def on_bubble_click(self, px: float, py: float) -> List[str]:
        """Outline the country under the pointer; a click on empty space clears it."""
        point = self._scatter.point_at(px, py)
        return self._apply(selected_code=point.code if point is not None else None)


__all__ = ["SCATTER", "HIGHLIGHT", "RENDER_ORDER", "INVALIDATES", "InteractionController"]
