"""Core functionality for git-commit-check."""
from pathlib import Path
from typing import List, Optional, Union

from git import InvalidGitRepositoryError, NoSuchPathError, Repo
from rich.console import Console
from rich.markup import escape

from .collector import CommitCollector
from .config import Config
from .errors import RepositoryNotFoundError
from .models import Report
from .observers import (
    ConsoleLogObserver,
    FileLogObserver,
    GitHubAnnotationObserver,
    ValidationObserver,
)
from .orchestrator import ValidationOrchestrator
from .range_resolver import RangeResolver
from .report import ReportBuilder
from .rules import ConventionalRuleEngine, RuleConfig, RuleEngine
from .sinks import GitHubOutputSink, JsonReportSink, OutputSink


def open_repo(repo_path: Union[str, Path]) -> Repo:
    """Open the repository containing ``repo_path``."""
    try:
        return Repo(repo_path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise RepositoryNotFoundError(f"Not a git repository: {repo_path}") from e


class CommitRangeValidator:
    """Validates the commit messages of a range and reports the outcome.

    Wires range resolution, commit collection, validation and reporting
    together. Fatal problems (no resolvable range, unreadable history) raise
    before any sink is written; invalid commits only ever end up in the
    report.
    """

    def __init__(
        self,
        repo_path: Union[str, Path],
        config: Config,
        rule_config: Optional[RuleConfig] = None,
        rule_engine: Optional[RuleEngine] = None,
        console: Optional[Console] = None,
    ):
        self.repo = open_repo(repo_path)
        self.config = config
        self.rule_config = rule_config or RuleConfig()
        self.rule_engine = rule_engine or ConventionalRuleEngine()
        self.console = console or Console()

        self.resolver = RangeResolver(self.repo, config.remote_name, self.console)
        self.collector = CommitCollector(self.repo, self.console)
        self.orchestrator = ValidationOrchestrator(self.console)
        self.report_builder = ReportBuilder()
        self.sinks: List[OutputSink] = []

    def add_observer(self, observer: ValidationObserver) -> None:
        """Add an observer to be notified of results and the finished report."""
        self.orchestrator.add_observer(observer)

    def remove_observer(self, observer: ValidationObserver) -> None:
        self.orchestrator.remove_observer(observer)

    def add_sink(self, sink: OutputSink) -> None:
        """Add a sink that receives the finished report."""
        self.sinks.append(sink)

    def _step(self, title: str) -> None:
        self.console.print(f"\n[blue]▶ {title}[/blue]")

    async def run(self, from_sha: Optional[str] = None, to_sha: Optional[str] = None) -> Report:
        """Validate the range and hand the report to every sink.

        Args:
            from_sha: Exclusive start of the range; resolved when omitted
            to_sha: Inclusive end of the range; ``HEAD`` when omitted

        Returns:
            Report: The report handed to the sinks
        """
        self._step("Resolving commit range")
        commit_range = self.resolver.resolve(from_sha, to_sha, self.config.base_branch)

        self._step("Collecting commits")
        commits = self.collector.collect(commit_range)

        self._step("Validating commits")
        results = await self.orchestrator.validate(commits, self.rule_config, self.rule_engine)
        report = self.report_builder.build(commit_range, results)

        for sink in self.sinks:
            sink.write(report)

        for observer in self.orchestrator.observers:
            try:
                await observer.on_validation_completed(report)
            except Exception as e:
                self.console.print(
                    f"[yellow]Warning: {type(observer).__name__} failed: {escape(str(e))}[/yellow]"
                )
        return report


def create_validator(
    repo_path: Union[str, Path],
    config: Config,
    rule_config: Optional[RuleConfig] = None,
    console: Optional[Console] = None,
) -> CommitRangeValidator:
    """Create a validator with the observers and sinks ``config`` asks for."""
    console = console or Console()
    validator = CommitRangeValidator(repo_path, config, rule_config=rule_config, console=console)

    validator.add_observer(ConsoleLogObserver(console, debug=config.debug))
    if config.annotations:
        validator.add_observer(GitHubAnnotationObserver(console))
    if config.log_file:
        validator.add_observer(FileLogObserver(config.log_file))

    json_sink = JsonReportSink(config.output_dir, console)
    validator.add_sink(json_sink)
    if config.github_output:
        validator.add_sink(GitHubOutputSink(config.github_output, json_sink.path))
    elif config.debug:
        console.print("[dim]GITHUB_OUTPUT not set, skipping step outputs[/dim]")

    return validator
