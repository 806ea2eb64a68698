"""Resolve the boundaries of the commit range to validate."""
from typing import Callable, List, Optional, Tuple

from git import GitCommandError, Repo
from rich.console import Console

from .errors import RangeResolutionError
from .models import SHORT_SHA_LENGTH, CommitRange

DEFAULT_TO_REF = "HEAD"


class RangeResolver:
    """Determines the ``(from, to)`` boundary of the commits to inspect.

    When no explicit start is given the resolver walks a fallback chain:

    1. merge-base of ``to`` and ``<remote>/<base_branch>``
    2. the immediate predecessor ``<to>~1``
    3. the root commit of ``to``

    Each step is tried only after the previous one failed, and a failing
    step never stops the next one from running. A shallow clone missing the
    merge-base and an absent base branch both count as a step 1 failure.

    Attributes:
        repo (Repo): The git repository to inspect
        remote_name (str): Remote that holds the base branch
        console (Console): Rich console for output
    """

    def __init__(self, repo: Repo, remote_name: str = "origin", console: Optional[Console] = None):
        self.repo = repo
        self.remote_name = remote_name
        self.console = console or Console()

    def resolve(
        self,
        explicit_from: Optional[str] = None,
        explicit_to: Optional[str] = None,
        base_branch: str = "main",
    ) -> CommitRange:
        """Resolve the range, falling back step by step for the start.

        Raises:
            RangeResolutionError: if no explicit start was given and every
                fallback failed
        """
        to_ref = explicit_to or DEFAULT_TO_REF
        from_ref = explicit_from or self._resolve_from(to_ref, base_branch)
        self.console.print(f"Range: {from_ref[:SHORT_SHA_LENGTH]}..{to_ref}")
        return CommitRange(from_ref=from_ref, to_ref=to_ref, base_branch=base_branch)

    def fallbacks(self, to_ref: str, base_branch: str) -> List[Tuple[str, Callable[[], str]]]:
        """Ordered ``(description, resolver)`` pairs for the range start."""
        upstream = f"{self.remote_name}/{base_branch}"
        return [
            (f"merge-base with {upstream}", lambda: self.merge_base(to_ref, upstream)),
            (f"{to_ref}~1", lambda: self.predecessor(to_ref)),
            ("root commit", lambda: self.root_commit(to_ref)),
        ]

    def _resolve_from(self, to_ref: str, base_branch: str) -> str:
        failures = []
        for position, (description, resolver) in enumerate(self.fallbacks(to_ref, base_branch)):
            try:
                sha = resolver()
            except GitCommandError as e:
                failures.append(f"{description}: {_stderr(e)}")
                continue

            if position == 0:
                self.console.print(f"Merge-base with {self.remote_name}/{base_branch}: {sha[:SHORT_SHA_LENGTH]}")
            else:
                self.console.print(f"[yellow]Could not find merge-base. Falling back to {description}.[/yellow]")
            return sha

        raise RangeResolutionError(
            "Could not resolve the start of the commit range:\n  " + "\n  ".join(failures)
        )

    def merge_base(self, to_ref: str, upstream: str) -> str:
        return self.repo.git.merge_base(to_ref, upstream).strip()

    def predecessor(self, to_ref: str) -> str:
        return self.repo.git.rev_parse("--verify", f"{to_ref}~1").strip()

    def root_commit(self, to_ref: str) -> str:
        roots = self.repo.git.rev_list("--max-parents=0", to_ref).split()
        if not roots:
            raise GitCommandError(["git", "rev-list", "--max-parents=0", to_ref], 1, "no root commit")
        # Histories joined from unrelated roots list the oldest last
        return roots[-1]


def _stderr(error: GitCommandError) -> str:
    return (error.stderr or str(error)).strip()
