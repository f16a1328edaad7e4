#!/usr/bin/env python3
"""
git-stats - Commit statistics for a Git repository.

Walks the history of a repository once and prints:
- the number of commits per author,
- a weekday x hour punchcard,
- optionally, a pivot table of a statistic over two categories.

Usage:
    git-stats --path ../repo --from 2023-01-01 --until 2023-12-31
    git-stats -x author -y month -s commits --csv authors_by_month.csv
"""

import argparse
import logging
import sys
from typing import List, Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from commit_statistics import (
    CommitCountByAuthor,
    PerCommitStatistic,
    PivotStatistic,
    Punchcard,
    print_results,
    run_statistics,
)
from git_records import filter_by_date, iter_commit_records, load_repository, parse_date
from pivot import CategorySelector, StatisticSelector

logger = logging.getLogger(__name__)


class Config:
    """Default configuration settings, overridden by command-line flags."""

    DEFAULT_PATH = "."
    DEFAULT_REV = "HEAD"
    DATE_FORMAT = "%Y-%m-%d"
    PROGRESS_INTERVAL = 1000
    LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def date_argument(value: str):
    """argparse type for --from/--until."""
    try:
        return parse_date(value, Config.DATE_FORMAT)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid date {value!r}, expected format YYYY-MM-DD"
        ) from None


def build_parser() -> argparse.ArgumentParser:
    categories = [c.value for c in CategorySelector]
    parser = argparse.ArgumentParser(
        prog="git-stats",
        description="Print commit statistics for a Git repository.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--path", default=Config.DEFAULT_PATH, help="Path to the repository."
    )
    parser.add_argument(
        "--from",
        dest="since",
        type=date_argument,
        help="Start date (YYYY-MM-DD); commits from 00:00 UTC of that date.",
    )
    parser.add_argument(
        "--until",
        type=date_argument,
        help="End date (YYYY-MM-DD); commits up to 00:00 UTC of that date.",
    )
    parser.add_argument(
        "--rev", default=Config.DEFAULT_REV, help="Revision to walk back from."
    )
    parser.add_argument(
        "-x",
        "--x-category",
        choices=categories,
        help="Category for the pivot table rows.",
    )
    parser.add_argument(
        "-y",
        "--y-category",
        choices=categories,
        help="Category for the pivot table columns.",
    )
    parser.add_argument(
        "-s",
        "--statistic",
        choices=[s.value for s in StatisticSelector],
        help="Statistic summed in the pivot table (default: commits).",
    )
    parser.add_argument("--csv", help="Also write the pivot table to this CSV file.")
    parser.add_argument(
        "--no-authors", action="store_true", help="Skip commit counts by author."
    )
    parser.add_argument(
        "--no-punchcard", action="store_true", help="Skip the punchcard."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging."
    )
    return parser


def build_statistics(args: argparse.Namespace) -> List[PerCommitStatistic]:
    """The statistics selected on the command line, in output order."""
    statistics: List[PerCommitStatistic] = []
    if not args.no_authors:
        statistics.append(CommitCountByAuthor())
    if not args.no_punchcard:
        statistics.append(Punchcard())

    wants_pivot = any(
        value is not None
        for value in (args.x_category, args.y_category, args.statistic, args.csv)
    )
    if wants_pivot:
        statistics.append(
            PivotStatistic(
                x_category=CategorySelector(args.x_category or "none"),
                y_category=CategorySelector(args.y_category or "none"),
                statistic=StatisticSelector(args.statistic or "commits"),
            )
        )
    return statistics


def export_csv(statistics: List[PerCommitStatistic], path: str) -> None:
    for statistic in statistics:
        if isinstance(statistic, PivotStatistic):
            statistic.to_dataframe().to_csv(path)
            logger.info(f"Pivot table written to {path}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format=Config.LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    statistics = build_statistics(args)

    try:
        repo = load_repository(args.path)
        records = filter_by_date(
            iter_commit_records(repo, args.rev), since=args.since, until=args.until
        )
        processed = run_statistics(
            records, statistics, progress_interval=Config.PROGRESS_INTERVAL
        )
    except (InvalidGitRepositoryError, NoSuchPathError, GitCommandError) as e:
        logger.error(f"Could not load repository at {args.path}: {e}")
        return 1
    except RuntimeError as e:
        logger.error(f"Error walking history: {e}")
        return 1

    logger.debug(f"Processed {processed:,} commits in total")
    print_results(statistics)

    if args.csv:
        export_csv(statistics, args.csv)
    return 0


if __name__ == "__main__":
    sys.exit(main())
