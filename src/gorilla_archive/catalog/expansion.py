"""Expand/collapse state for year groups."""

from typing import Iterable, Set

# Years expanded on load when auto-expand is on.
RECENT_YEARS = (2025, 2024)


class YearExpansion:
    """Which year groups are expanded."""

    def __init__(self, years: Iterable[int] = ()) -> None:
        self._expanded: Set[int] = set(years)

    @classmethod
    def initial(cls, auto_expand: bool) -> "YearExpansion":
        """State on first load: the recent years when auto-expand is on."""
        return cls(RECENT_YEARS if auto_expand else ())

    @property
    def expanded(self) -> Set[int]:
        return set(self._expanded)

    def is_expanded(self, year: int) -> bool:
        return year in self._expanded

    def toggle(self, year: int) -> bool:
        """Flip one year and return its new state."""
        if year in self._expanded:
            self._expanded.discard(year)
            return False
        self._expanded.add(year)
        return True

    def expand_all(self, years: Iterable[int]) -> None:
        """Expand exactly the given years."""
        self._expanded = set(years)

    def collapse_all(self) -> None:
        self._expanded.clear()
