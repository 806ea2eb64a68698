"""Collect the commits of a resolved range."""
from typing import List, Optional

from git import GitCommandError, Repo
from rich.console import Console

from .errors import HistoryQueryError
from .models import CommitRange, CommitRecord


class CommitCollector:
    """Reads commit records for a range from git history.

    The collector only gathers data; it never validates messages.
    """

    def __init__(self, repo: Repo, console: Optional[Console] = None):
        self.repo = repo
        self.console = console or Console()

    def collect(self, commit_range: CommitRange) -> List[CommitRecord]:
        """Return the commits after ``from`` up to and including ``to``.

        Commits come back in git's traversal order, most recent first. An
        empty list is a normal outcome.

        Raises:
            HistoryQueryError: if git cannot read the history for the range
        """
        rev = f"{commit_range.from_ref}..{commit_range.to_ref}"
        try:
            commits = [
                CommitRecord(sha=commit.hexsha, message=_message_text(commit.message))
                for commit in self.repo.iter_commits(rev)
            ]
        except (GitCommandError, ValueError) as e:
            raise HistoryQueryError(f"Failed to read commits for range {rev}: {e}") from e

        if commits:
            self.console.print(f"Found {len(commits)} commit(s) to validate.")
        else:
            self.console.print("[yellow]No commits found in range. Nothing to validate.[/yellow]")
        return commits


def _message_text(message) -> str:
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    return message.rstrip()
