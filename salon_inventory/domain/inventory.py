from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..errors import InvalidSortCriterion

PAGE_SIZE = 15

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)", re.ASCII)


def depth_value(depth: str) -> int:
    """Numeric reading of a depth string: leading integer, 0 when none.

    Matches SQLite's CAST(depth AS INTEGER) so in-memory and paged sorts agree.
    """
    m = _LEADING_INT.match(depth or "")
    return int(m.group(1)) if m else 0


class SortCriterion(str, Enum):
    DEPTH = "depth"
    TONE = "tone"


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(frozen=True)
class SortOrder:
    criterion: SortCriterion
    direction: SortDirection

    @classmethod
    def parse(cls, criterion, direction) -> "SortOrder":
        try:
            return cls(SortCriterion(criterion), SortDirection(direction))
        except ValueError:
            raise InvalidSortCriterion("sort_colors", f"{criterion!r}/{direction!r}") from None


class Color:
    def __init__(self, line: str, depth: str, tone: str, count: int):
        self.line = line
        self.depth = depth
        self.tone = tone
        self.count = count

    def __str__(self):
        return f"{self.line}_{self.depth}_{self.tone}"

    def __repr__(self):
        return f"Color({self.line!r}, {self.depth!r}, {self.tone!r}, {self.count!r})"

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return (self.line, self.depth, self.tone, self.count) == (
            other.line, other.depth, other.tone, other.count
        )

    def to_dict(self) -> dict:
        return {"line": self.line, "depth": self.depth, "tone": self.tone, "count": self.count}


# ascending sort keys; descending reverses the ascending result
_SORT_KEYS = {
    SortCriterion.DEPTH: lambda c: depth_value(c.depth),
    SortCriterion.TONE: lambda c: c.tone,
}


class Inventory:
    """Colors grouped by line name. Group order is load order until sorted."""

    def __init__(self, lines: dict[str, list[Color]]):
        self.lines = lines

    def sort_colors(self, criterion, direction=None) -> None:
        """Sort every line's colors in place, each line independently."""
        order = criterion if isinstance(criterion, SortOrder) else SortOrder.parse(criterion, direction)
        key = _SORT_KEYS[order.criterion]
        for colors in self.lines.values():
            colors.sort(key=key)
            if order.direction is SortDirection.DESCENDING:
                colors.reverse()

    def line_names(self) -> list[str]:
        return list(self.lines)

    def to_dict(self) -> dict:
        return {name: [c.to_dict() for c in colors] for name, colors in self.lines.items()}


def count_pages(rows: int) -> int:
    full_pages, remaining_rows = divmod(rows, PAGE_SIZE)
    if remaining_rows:
        full_pages += 1
    return full_pages


def page_offset(page: int) -> int:
    if page < 1:
        raise ValueError("page must be >= 1")
    return (page - 1) * PAGE_SIZE
