"""
Pytest fixtures for the entire test suite.

This file defines:
1. Session-scoped fixtures to generate test repositories once.
2. Function-scoped fixtures to provide Repo objects to tests.
3. Helpers to build in-memory commit records.
"""
import pytest
from datetime import datetime, timezone
from git import Repo
from tests.fixtures.create_test_repos import create_simple_repo, create_team_repo

from git_records import CommitRecord


@pytest.fixture(scope="session")
def test_repos_dir(tmp_path_factory):
    """
    Creates all test repositories once per test session in a temporary directory.
    """
    repos_dir = tmp_path_factory.mktemp("git_repos")

    repo_paths = {
        "simple": repos_dir / "simple",
        "team": repos_dir / "team",
    }

    create_simple_repo(repo_paths["simple"])
    create_team_repo(repo_paths["team"])

    return repo_paths


@pytest.fixture
def simple_repo(test_repos_dir) -> Repo:
    """Provides a Repo object for the simple, single-author repository."""
    return Repo(test_repos_dir["simple"])


@pytest.fixture
def team_repo(test_repos_dir) -> Repo:
    """Provides a Repo object for the multi-author, multi-timezone repository."""
    return Repo(test_repos_dir["team"])


@pytest.fixture
def empty_repo(tmp_path) -> Repo:
    """Provides an empty, newly initialized repository."""
    return Repo.init(tmp_path)


@pytest.fixture
def make_record():
    """Factory for CommitRecords from a UTC datetime and author details."""

    def _make(when=None, offset_minutes=0, name="alice", email=None):
        when = when or datetime(2021, 2, 2, 14, 0, tzinfo=timezone.utc)
        return CommitRecord(
            timestamp=int(when.timestamp()),
            utc_offset_minutes=offset_minutes,
            author_name=name,
            author_email=email,
        )

    return _make
