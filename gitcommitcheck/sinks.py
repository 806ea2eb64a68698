"""Output sinks that persist a finished report."""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from rich.console import Console

from .config import REPORT_FILENAME
from .models import Report

GHA_DELIMITER = "__GHA_EOF__"


class OutputSink(ABC):
    """Abstract base class for report sinks."""

    @abstractmethod
    def write(self, report: Report) -> None:
        """Persist ``report``."""
        pass


class JsonReportSink(OutputSink):
    """Writes the report as pretty-printed JSON.

    Attributes:
        path (Path): File the report is written to
    """

    def __init__(self, output_dir: str, console: Optional[Console] = None):
        self.path = Path(output_dir) / REPORT_FILENAME
        self.console = console or Console()

    def write(self, report: Report) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(report.to_json() + "\n", encoding="utf-8")
        self.console.print(f"[dim]Report written to: {self.path}[/dim]")


class GitHubOutputSink(OutputSink):
    """Appends step outputs to the GitHub Actions ``GITHUB_OUTPUT`` file.

    Each key is written as a multi-line block::

        commits_valid<<__GHA_EOF__
        true
        __GHA_EOF__
    """

    def __init__(self, output_file: str, report_path: Path):
        self.output_file = Path(output_file)
        self.report_path = report_path

    def outputs(self, report: Report) -> Dict[str, str]:
        return {
            "commits_valid": "true" if report.commits_valid else "false",
            "total_count": str(report.total_count),
            "invalid_count": str(report.invalid_count),
            "output_file": str(self.report_path),
        }

    def write(self, report: Report) -> None:
        with self.output_file.open("a", encoding="utf-8") as f:
            for key, value in self.outputs(report).items():
                f.write(f"{key}<<{GHA_DELIMITER}\n{value}\n{GHA_DELIMITER}\n")
