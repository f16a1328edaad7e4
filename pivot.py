# pivot.py

"""
pivot.py - Category extraction, aggregation and text rendering for pivot tables.

A pivot table is built in three steps:
1. Every commit record is mapped to an x label and a y label by a
   CategorySelector, and to a signed contribution by a StatisticSelector.
2. Contributions are summed into a sparse AggregationTable keyed by
   (x label, y label).
3. The labels to show on each axis are resolved and the table is rendered
   as a right-aligned monospaced grid.
"""

from collections import defaultdict
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

import pandas as pd

from git_records import CommitRecord

WILDCARD = "*"
UNKNOWN_AUTHOR = "<UNKNOWN>"
UNKNOWN_EMAIL = "<UNKNOWN EMAIL>"
INVALID_DATE = "<INVALID DATE>"

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
HOURS = [str(hour) for hour in range(24)]


class CategorySelector(Enum):
    NONE = "none"
    DATE = "date"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    DAY_OF_WEEK = "day-of-week"
    DAY_OF_MONTH = "day-of-month"
    HOUR = "hour"
    AUTHOR = "author"
    AUTHOR_EMAIL = "author-email"
    # Declared but not extracted: per-file data is not part of a CommitRecord.
    FILE = "file"
    DIRECTORY = "directory"

    @property
    def variant_name(self) -> str:
        """CamelCase name, e.g. DayOfWeek."""
        return "".join(part.capitalize() for part in self.name.split("_"))


class StatisticSelector(Enum):
    COMMITS = "commits"
    ADDITIONS = "additions"
    DELETIONS = "deletions"

    @property
    def variant_name(self) -> str:
        return self.name.capitalize()


DATE_FORMATS = {
    CategorySelector.DATE: "%Y-%m-%d",
    # Year followed by the day-of-week index (0=Sunday), not the ISO week.
    CategorySelector.WEEK: "%Y-%w",
    CategorySelector.MONTH: "%Y-%m",
    CategorySelector.YEAR: "%Y",
    CategorySelector.DAY_OF_MONTH: "%d",
}

STATIC_AXES = {
    CategorySelector.HOUR: HOURS,
    CategorySelector.DAY_OF_WEEK: WEEKDAY_NAMES,
}


# ============================================================================
# CATEGORY & STATISTIC EXTRACTION
# ============================================================================


def extract_category(
    record: CommitRecord, selector: Optional[CategorySelector] = None
) -> str:
    """
    Maps a commit record to its label along one pivot axis.

    Never raises: missing author data and unrepresentable commit times become
    placeholders, and selectors without an extraction rule return their
    variant name.
    """
    if selector is None or selector is CategorySelector.NONE:
        return WILDCARD

    if selector in DATE_FORMATS or selector in STATIC_AXES:
        local = record.local_datetime
        if local is None:
            return INVALID_DATE
        if selector is CategorySelector.DAY_OF_WEEK:
            return WEEKDAY_NAMES[local.weekday()]
        if selector is CategorySelector.HOUR:
            return str(local.hour)
        return local.strftime(DATE_FORMATS[selector])
    if selector is CategorySelector.AUTHOR:
        return record.author_name or UNKNOWN_AUTHOR
    if selector is CategorySelector.AUTHOR_EMAIL:
        return record.author_email or UNKNOWN_EMAIL

    return selector.variant_name


def evaluate_statistic(
    record: CommitRecord, selector: StatisticSelector = StatisticSelector.COMMITS
) -> int:
    """
    Maps a commit record to its contribution for a statistic.

    ADDITIONS and DELETIONS are placeholders that contribute a constant;
    they are not computed from the commit's diff.
    """
    if selector is StatisticSelector.ADDITIONS:
        return 1
    if selector is StatisticSelector.DELETIONS:
        return -1
    return 1


# ============================================================================
# AGGREGATION
# ============================================================================


class AggregationTable:
    """Sparse running sums keyed by (x label, y label)."""

    SIDES = ("x", "y")

    def __init__(self):
        self._cells: Dict[Tuple[str, str], int] = defaultdict(int)

    def accumulate(self, x_label: str, y_label: str, delta: int) -> None:
        self._cells[(x_label, y_label)] += delta

    def get(self, x_label: str, y_label: str, default: int = 0) -> int:
        return self._cells.get((x_label, y_label), default)

    def labels(self, side: str) -> Set[str]:
        """All labels observed on one side ("x" or "y") of the keys."""
        if side not in self.SIDES:
            raise ValueError(f"side must be one of {self.SIDES}, got {side!r}")
        index = self.SIDES.index(side)
        return {key[index] for key in self._cells}

    def items(self) -> Iterator[Tuple[Tuple[str, str], int]]:
        return iter(self._cells.items())

    def total(self) -> int:
        return sum(self._cells.values())

    def to_dataframe(self, x_axis: List[str], y_axis: List[str]) -> pd.DataFrame:
        """The table as a DataFrame: one row per x label, one column per y label."""
        data = [[self.get(x, y) for y in y_axis] for x in x_axis]
        return pd.DataFrame(data, index=x_axis, columns=y_axis, dtype="int64")

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._cells

    def __len__(self) -> int:
        return len(self._cells)


# ============================================================================
# AXIS RESOLUTION
# ============================================================================


def resolve_axis(
    selector: Optional[CategorySelector], table: AggregationTable, side: str
) -> List[str]:
    """
    Returns the ordered labels to display along one axis.

    Bounded categories (hour, weekday) are always fully enumerated, no
    category gives the single wildcard label, and every other category shows
    the sorted distinct labels observed in the table.
    """
    if selector in STATIC_AXES:
        return list(STATIC_AXES[selector])
    if selector is None or selector is CategorySelector.NONE:
        return [WILDCARD]
    return sorted(table.labels(side))


# ============================================================================
# RENDERING
# ============================================================================


def render_table(
    x_axis: List[str], y_axis: List[str], table: AggregationTable
) -> str:
    """Renders the table as right-aligned columns separated by ' | '."""
    rows = [[""] + list(y_axis)]
    for x_label in x_axis:
        rows.append([x_label] + [str(table.get(x_label, y)) for y in y_axis])

    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]

    lines = [
        " | ".join(cell.rjust(width) for cell, width in zip(row, widths))
        for row in rows
    ]
    lines.insert(1, "-+-".join("-" * width for width in widths))
    return "\n".join(lines)
