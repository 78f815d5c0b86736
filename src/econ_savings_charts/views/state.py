from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..transformations.records import Record


@dataclass(frozen=True)
class ViewState:
    """
    The interactive selection shared by both charts.

    Frozen: renderers read it, only the interaction controller replaces it
    (with `dataclasses.replace`), so a render never sees a half-applied change.
    """

    selected_year: int
    year_range: Optional[Tuple[int, int]] = None
    use_ppp: bool = False
    selected_code: Optional[str] = None

    def __post_init__(self) -> None:
        if self.year_range is not None:
            start, end = (int(y) for y in self.year_range)
            if start > end:
                start, end = end, start
            object.__setattr__(self, "year_range", (start, end))

    @property
    def is_range_mode(self) -> bool:
        return self.year_range is not None

    def includes_year(self, year: Optional[int]) -> bool:
        if year is None:
            return False
        if self.year_range is not None:
            start, end = self.year_range
            return start <= year <= end
        return year == self.selected_year

    def selects(self, record: Record) -> bool:
        return self.includes_year(record.year)

    def is_selected_code(self, code: str) -> bool:
        return self.selected_code is not None and code == self.selected_code

    def x_value(self, record: Record) -> float:
        return record.gdp_per_capita(self.use_ppp)

    @property
    def x_label(self) -> str:
        if self.use_ppp:
            return "GDP per capita, PPP (current international $)"
        return "GDP per capita (current US$)"

    def describe(self) -> str:
        if self.year_range is not None:
            return f"{self.year_range[0]}–{self.year_range[1]}"
        return str(self.selected_year)


__all__ = ["ViewState"]
