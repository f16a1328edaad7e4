# commit_statistics.py

"""
Per-commit statistics.

Every statistic consumes commit records one at a time through
`process_commit` and prints its result once the history has been walked.
Several statistics can therefore share a single pass over the commits.
"""

import logging
import sys
from abc import ABC, abstractmethod
from collections import Counter
from typing import Iterable, List, Optional, TextIO

import pandas as pd

from git_records import CommitRecord
from pivot import (
    HOURS,
    UNKNOWN_AUTHOR,
    WEEKDAY_NAMES,
    AggregationTable,
    CategorySelector,
    StatisticSelector,
    evaluate_statistic,
    extract_category,
    render_table,
    resolve_axis,
)

logger = logging.getLogger(__name__)


class PerCommitStatistic(ABC):
    """A statistic accumulated over a stream of commit records."""

    @abstractmethod
    def process_commit(self, record: CommitRecord) -> None:
        ...

    @abstractmethod
    def render(self) -> str:
        ...

    def print_result(self, stream: Optional[TextIO] = None) -> None:
        print(self.render(), file=stream or sys.stdout)


class CommitCountByAuthor(PerCommitStatistic):
    """Number of commits per author, keyed by email."""

    def __init__(self):
        self.commits_by_author = Counter()

    def process_commit(self, record: CommitRecord) -> None:
        author = record.author_email or record.author_name or UNKNOWN_AUTHOR
        self.commits_by_author[author] += 1

    def ranking(self) -> List[tuple]:
        """(author, count) pairs, most commits first, ties by author."""
        return sorted(
            self.commits_by_author.items(), key=lambda item: (-item[1], item[0])
        )

    def render(self) -> str:
        return "\n".join(f"{author}: {count}" for author, count in self.ranking())


class Punchcard(PerCommitStatistic):
    """Commit counts on a fixed weekday x hour grid."""

    CELL_WIDTH = 5

    def __init__(self):
        self.punches = [[0] * 24 for _ in WEEKDAY_NAMES]

    def process_commit(self, record: CommitRecord) -> None:
        local = record.local_datetime
        if local is None:
            logger.debug(
                f"Skipping commit with unrepresentable time {record.timestamp} "
                f"{record.utc_offset_minutes:+d}min on the punchcard"
            )
            return
        self.punches[local.weekday()][local.hour] += 1

    def count(self, weekday: int, hour: int) -> int:
        """Commits on `weekday` (0=Monday) during `hour`."""
        return self.punches[weekday][hour]

    def total(self) -> int:
        return sum(sum(hours) for hours in self.punches)

    def render(self) -> str:
        width = self.CELL_WIDTH
        header = [hour.rjust(width) for hour in HOURS]
        lines = [
            "Punchcard",
            "=========",
            "",
            f"    | {' | '.join(header)} |",
            f"----+-{'-+-'.join(['-' * width] * len(HOURS))}-+",
        ]
        for day, hours in zip(WEEKDAY_NAMES, self.punches):
            cells = [str(count).rjust(width) for count in hours]
            lines.append(f"{day} | {' | '.join(cells)} |")
        return "\n".join(lines)


class PivotStatistic(PerCommitStatistic):
    """A two-dimensional pivot table of one statistic over two categories."""

    def __init__(
        self,
        x_category: CategorySelector = CategorySelector.NONE,
        y_category: CategorySelector = CategorySelector.NONE,
        statistic: StatisticSelector = StatisticSelector.COMMITS,
    ):
        self.x_category = x_category
        self.y_category = y_category
        self.statistic = statistic
        self.table = AggregationTable()

    def process_commit(self, record: CommitRecord) -> None:
        self.table.accumulate(
            extract_category(record, self.x_category),
            extract_category(record, self.y_category),
            evaluate_statistic(record, self.statistic),
        )

    def x_axis(self) -> List[str]:
        return resolve_axis(self.x_category, self.table, "x")

    def y_axis(self) -> List[str]:
        return resolve_axis(self.y_category, self.table, "y")

    def to_dataframe(self) -> pd.DataFrame:
        return self.table.to_dataframe(self.x_axis(), self.y_axis())

    def render(self) -> str:
        table = render_table(self.x_axis(), self.y_axis(), self.table)
        return f"Statistic for {self.statistic.variant_name}\n{table}"


# ============================================================================
# DRIVER
# ============================================================================


def run_statistics(
    records: Iterable[CommitRecord],
    statistics: List[PerCommitStatistic],
    progress_interval: int = 0,
) -> int:
    """Feeds every record to every statistic once. Returns the record count."""
    processed = 0
    for record in records:
        for statistic in statistics:
            statistic.process_commit(record)
        processed += 1
        if progress_interval and processed % progress_interval == 0:
            logger.debug(f"Processed {processed:,} commits...")
    return processed


def print_results(
    statistics: List[PerCommitStatistic], stream: Optional[TextIO] = None
) -> None:
    for statistic in statistics:
        statistic.print_result(stream)
