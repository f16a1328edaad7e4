# git_records.py
"""
Commit record extraction for git-stats.

Walks a Git repository's history with a single batched `git log` call and
turns every commit into a lightweight, immutable CommitRecord. The records
only carry what the statistics need: the committer timestamp with its UTC
offset, and the author's name and email.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Iterator, Optional, Tuple

from git import Repo, GitCommandError

logger = logging.getLogger(__name__)

# ASCII unit separator, never present in names or emails
FIELD_SEPARATOR = "\x1f"
LOG_FORMAT = FIELD_SEPARATOR.join(["%H", "%cd", "%an", "%ae"])


@dataclass(frozen=True)
class CommitRecord:
    """A single commit, reduced to the fields the statistics use."""

    timestamp: int
    utc_offset_minutes: int = 0
    author_name: Optional[str] = None
    author_email: Optional[str] = None

    @property
    def local_datetime(self) -> Optional[datetime]:
        """
        The commit time in the commit's own timezone.

        None when the offset or timestamp cannot be represented, e.g. a
        corrupt "+9959" timezone in the commit header.
        """
        try:
            tz = timezone(timedelta(minutes=self.utc_offset_minutes))
            return datetime.fromtimestamp(self.timestamp, tz=tz)
        except (ValueError, OverflowError, OSError):
            return None


# ============================================================================
# REPOSITORY LOADING
# ============================================================================


def load_repository(repo_path: str) -> Repo:
    """
    Loads a Git repository from a given path.

    Raises InvalidGitRepositoryError or NoSuchPathError; callers report them.
    """
    return Repo(repo_path, search_parent_directories=True)


# ============================================================================
# HISTORY WALKING
# ============================================================================


def parse_raw_date(raw: str) -> Tuple[int, int]:
    """
    Parses a `--date=raw` value such as "1700000000 +0130".

    Returns the epoch seconds and the UTC offset in minutes.
    """
    seconds_str, _, offset_str = raw.strip().partition(" ")
    seconds = int(seconds_str)
    if not offset_str:
        return seconds, 0

    sign = -1 if offset_str[0] == "-" else 1
    digits = offset_str.lstrip("+-")
    offset_minutes = int(digits[:2]) * 60 + int(digits[2:4])
    return seconds, sign * offset_minutes


def parse_log_line(line: str) -> Optional[CommitRecord]:
    """Turns one formatted `git log` line into a CommitRecord."""
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) < 4:
        logger.debug(f"Skipping malformed log line: {line!r}")
        return None

    try:
        seconds, offset_minutes = parse_raw_date(parts[1])
    except ValueError:
        logger.debug(f"Skipping commit {parts[0][:7]} with unreadable date")
        return None

    return CommitRecord(
        timestamp=seconds,
        utc_offset_minutes=offset_minutes,
        author_name=parts[2] or None,
        author_email=parts[3] or None,
    )


def iter_commit_records(repo: Repo, rev: str = "HEAD") -> Iterator[CommitRecord]:
    """
    Yields a CommitRecord for every commit reachable from `rev`, newest first.

    An empty repository (no valid HEAD) yields nothing.
    """
    if not repo.head.is_valid():
        logger.info("Repository is empty. No commits to process.")
        return

    args = [f"--pretty=format:{LOG_FORMAT}", "--date=raw", rev]
    logger.debug(f"Running git log {' '.join(args)}")
    start_time = datetime.now()
    try:
        output = repo.git.log(*args)
    except GitCommandError as e:
        raise RuntimeError(f"git log failed: {e}") from e

    logger.debug(
        f"git log completed in {(datetime.now() - start_time).total_seconds():.2f}s"
    )

    for line in output.splitlines():
        if not line.strip():
            continue
        record = parse_log_line(line)
        if record is not None:
            yield record


# ============================================================================
# DATE FILTERING
# ============================================================================


def parse_date(value: str, date_format: str = "%Y-%m-%d") -> datetime:
    """Parses a date string into a UTC midnight datetime."""
    return datetime.strptime(value, date_format).replace(tzinfo=timezone.utc)


def filter_by_date(
    records: Iterable[CommitRecord],
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
) -> Iterator[CommitRecord]:
    """Keeps records whose timestamp lies within [since, until]."""
    since_ts = since.timestamp() if since else None
    until_ts = until.timestamp() if until else None

    for record in records:
        if since_ts is not None and record.timestamp < since_ts:
            continue
        if until_ts is not None and record.timestamp > until_ts:
            continue
        yield record
