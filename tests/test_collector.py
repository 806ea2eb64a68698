"""Tests for commit collection."""
from unittest.mock import Mock

import pytest
from git import Repo
from rich.console import Console

from gitcommitcheck.collector import CommitCollector
from gitcommitcheck.errors import HistoryQueryError
from gitcommitcheck.models import CommitRange


@pytest.fixture
def mock_console():
    console = Mock(spec=Console)
    console.print = Mock()
    return console


def make_range(from_ref, to_ref="HEAD"):
    return CommitRange(from_ref=from_ref, to_ref=to_ref, base_branch="main")


def test_collect_returns_most_recent_first(temp_git_repo, commit, mock_console):
    repo = Repo(temp_git_repo)
    root = repo.head.commit
    first = commit(repo, "feat: first")
    second = commit(repo, "fix: second")
    third = commit(repo, "docs: third")

    records = CommitCollector(repo, mock_console).collect(make_range(root.hexsha))

    assert [r.sha for r in records] == [third.hexsha, second.hexsha, first.hexsha]
    assert [r.message for r in records] == ["docs: third", "fix: second", "feat: first"]


def test_collect_excludes_from_and_includes_to(temp_git_repo, commit, mock_console):
    repo = Repo(temp_git_repo)
    root = repo.head.commit
    first = commit(repo, "feat: first")
    commit(repo, "feat: second")

    records = CommitCollector(repo, mock_console).collect(make_range(root.hexsha, first.hexsha))

    assert [r.sha for r in records] == [first.hexsha]


def test_collect_keeps_subject_and_body(temp_git_repo, commit, mock_console):
    repo = Repo(temp_git_repo)
    root = repo.head.commit
    commit(repo, "feat: add login\n\nUsers can sign in now.\n")

    records = CommitCollector(repo, mock_console).collect(make_range(root.hexsha))

    assert records[0].message == "feat: add login\n\nUsers can sign in now."


def test_collect_short_sha(temp_git_repo, commit, mock_console):
    repo = Repo(temp_git_repo)
    root = repo.head.commit
    created = commit(repo, "feat: first")

    record = CommitCollector(repo, mock_console).collect(make_range(root.hexsha))[0]

    assert record.sha == created.hexsha
    assert len(record.sha) == 40
    assert record.short_sha == created.hexsha[:8]


def test_collect_empty_range(temp_git_repo, mock_console):
    repo = Repo(temp_git_repo)

    records = CommitCollector(repo, mock_console).collect(make_range("HEAD"))

    assert records == []


def test_collect_unknown_revision_is_fatal(temp_git_repo, mock_console):
    repo = Repo(temp_git_repo)

    with pytest.raises(HistoryQueryError, match="does-not-exist..HEAD"):
        CommitCollector(repo, mock_console).collect(make_range("does-not-exist"))
