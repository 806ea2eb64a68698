"""Observer pattern for validation runs."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from .models import Report, ValidationResult


def _header(message: str) -> str:
    return message.split("\n", 1)[0]


class ValidationObserver(ABC):
    """Abstract base class for validation observers.

    Observers are notified; they never influence results or the report.
    """

    @abstractmethod
    async def on_commit_validated(self, result: ValidationResult) -> None:
        """Called after the result for a commit is built."""
        pass

    @abstractmethod
    async def on_validation_completed(self, report: Report) -> None:
        """Called once the report for the run is built."""
        pass


class ConsoleLogObserver(ValidationObserver):
    """Observer that logs validation results to the console."""

    def __init__(self, console: Optional[Console] = None, debug: bool = False):
        self.console = console or Console()
        self.debug = debug

    async def on_commit_validated(self, result: ValidationResult) -> None:
        header = escape(_header(result.message))
        label = escape(f"[{result.short_sha}]")
        if not result.valid:
            self.console.print(f"[yellow]INVALID {label} {header}[/yellow]")
            for error in result.errors:
                self.console.print(f"[red]  → {escape(error)}[/red]")
        elif self.debug:
            self.console.print(f"[dim]  valid {label} {header}[/dim]")

        for warning in result.warnings:
            if self.debug or not result.valid:
                self.console.print(f"[dim yellow]  ⚠ {escape(warning)}[/dim yellow]")

    async def on_validation_completed(self, report: Report) -> None:
        if report.commits_valid:
            self.console.print(f"[green]✓ All {report.total_count} commit(s) are valid.[/green]")
        else:
            self.console.print(
                f"[yellow]{report.invalid_count} of {report.total_count} commit(s) are invalid.[/yellow]"
            )
            self.console.print("Enforcement (block/info) is handled by the calling workflow.")


class GitHubAnnotationObserver(ValidationObserver):
    """Observer that emits GitHub Actions workflow annotations.

    One ``::warning`` line is printed per error of an invalid commit, so the
    problems show up on the workflow run summary.
    """

    TITLE = "Invalid Commit"

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    @staticmethod
    def escape_data(value: str) -> str:
        return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")

    async def on_commit_validated(self, result: ValidationResult) -> None:
        if result.valid:
            return
        for error in result.errors:
            text = self.escape_data(f"{result.short_sha}: {_header(result.message)} - {error}")
            self.console.print(
                f"::warning title={self.TITLE}::{text}",
                markup=False,
                highlight=False,
                soft_wrap=True,
            )

    async def on_validation_completed(self, report: Report) -> None:
        pass


class FileLogObserver(ValidationObserver):
    """Observer that logs validation results to a file."""

    def __init__(self, log_file: str):
        self.log_file = Path(log_file)
        # Ensure the parent directory exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    async def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with self.log_file.open("a") as f:
            f.write(f"{timestamp} - {message}\n")

    async def on_commit_validated(self, result: ValidationResult) -> None:
        status = "valid" if result.valid else "INVALID"
        await self._log(f"{status} {result.short_sha} {_header(result.message)}")
        for error in result.errors:
            await self._log(f"  error: {error}")
        for warning in result.warnings:
            await self._log(f"  warning: {warning}")

    async def on_validation_completed(self, report: Report) -> None:
        await self._log(
            f"Validated {report.total_count} commit(s) in "
            f"{report.range.from_ref}..{report.range.to_ref}, {report.invalid_count} invalid"
        )
