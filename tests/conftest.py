import pytest
import tempfile
from pathlib import Path
from git import Repo

from gitcommitcheck.config import Config

CI_ENVIRONMENT = (
    "BASE_BRANCH",
    "QA_OUTPUT_DIR",
    "GITHUB_OUTPUT",
    "GITHUB_ACTIONS",
    "DEBUG",
    "GIT_COMMIT_CHECK_LOG_FILE",
    "GIT_COMMIT_CHECK_REMOTE_NAME",
)


def make_commit(repo: Repo, message: str, filename: str = "test.txt"):
    """Change a file and commit it with ``message``."""
    path = Path(repo.working_tree_dir) / filename
    previous = path.read_text() if path.exists() else ""
    path.write_text(previous + message + "\n")
    repo.index.add([filename])
    return repo.index.commit(message)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep CI variables of the machine running the tests out of the way."""
    for name in CI_ENVIRONMENT:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def temp_git_repo():
    """Create a temporary git repository with a single initial commit."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        repo = Repo.init(tmp_dir)
        make_commit(repo, "Initial commit")
        yield tmp_dir


@pytest.fixture
def empty_git_repo():
    """Create a temporary git repository without any commits."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        Repo.init(tmp_dir)
        yield tmp_dir


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "qa-output"


@pytest.fixture
def config(output_dir):
    return Config(output_dir=str(output_dir))


@pytest.fixture
def commit():
    """Return a helper that commits a change with the given message."""
    return make_commit
