"""Drive a rule engine over a sequence of commits."""
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from .models import CommitRecord, ValidationOutcome, ValidationResult
from .observers import ValidationObserver
from .rules import RuleConfig, RuleEngine


class ValidationOrchestrator:
    """Validates commits one at a time and keeps every result.

    Commits are awaited strictly in sequence, so ``results[i]`` always
    belongs to ``commits[i]``. An invalid commit never stops the run, and a
    rule engine that raises for one message produces an invalid result for
    that commit instead of aborting.

    Attributes:
        console (Console): Rich console for output
        observers (List[ValidationObserver]): Notified after each result
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.observers: List[ValidationObserver] = []

    def add_observer(self, observer: ValidationObserver) -> None:
        """Add an observer to be notified of each validation result."""
        self.observers.append(observer)

    def remove_observer(self, observer: ValidationObserver) -> None:
        """Remove an observer from the notification list."""
        self.observers.remove(observer)

    async def validate(
        self,
        commits: Sequence[CommitRecord],
        rule_config: RuleConfig,
        rule_engine: RuleEngine,
    ) -> List[ValidationResult]:
        """Evaluate every commit and return results in input order."""
        results: List[ValidationResult] = []
        for commit in commits:
            result = await self._evaluate(commit, rule_config, rule_engine)
            results.append(result)
            await self._notify(result)
        return results

    async def _evaluate(
        self,
        commit: CommitRecord,
        rule_config: RuleConfig,
        rule_engine: RuleEngine,
    ) -> ValidationResult:
        try:
            outcome = await rule_engine.evaluate(commit.message, rule_config)
            if not isinstance(outcome, ValidationOutcome):
                raise TypeError(
                    f"{type(rule_engine).__name__} returned {type(outcome).__name__}, "
                    "expected ValidationOutcome"
                )
            return ValidationResult.from_outcome(commit, outcome)
        except Exception as e:
            self.console.print(
                f"[red]Rule engine failed on {commit.short_sha}: {escape(str(e))}[/red]"
            )
            return ValidationResult.from_outcome(commit, ValidationOutcome(
                valid=False,
                errors=[f"Rule engine failed: {type(e).__name__}: {e}"],
            ))

    async def _notify(self, result: ValidationResult) -> None:
        for observer in self.observers:
            try:
                await observer.on_commit_validated(result)
            except Exception as e:
                self.console.print(
                    f"[yellow]Warning: {type(observer).__name__} failed: {escape(str(e))}[/yellow]"
                )
