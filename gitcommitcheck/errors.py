"""Fatal errors raised while preparing a validation run.

Invalid commit messages are never raised; they are recorded in the report.
Everything here means the validation process itself could not proceed.
"""


class CommitCheckError(Exception):
    """Base class for fatal git-commit-check errors."""


class RepositoryNotFoundError(CommitCheckError):
    """The given path is not inside a git repository."""


class RangeResolutionError(CommitCheckError):
    """No boundary could be resolved for the commit range."""


class HistoryQueryError(CommitCheckError):
    """The git history for a range could not be read."""
