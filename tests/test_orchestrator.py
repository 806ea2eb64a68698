"""Tests for the validation orchestrator."""
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from rich.console import Console

from gitcommitcheck.models import CommitRecord, ValidationOutcome
from gitcommitcheck.observers import ValidationObserver
from gitcommitcheck.orchestrator import ValidationOrchestrator
from gitcommitcheck.rules import ConventionalRuleEngine, RuleConfig, RuleEngine


class ScriptedRuleEngine(RuleEngine):
    """Rule engine double: messages starting with "bad" are invalid."""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.calls = []

    async def evaluate(self, message, config):
        self.calls.append(message)
        if message in self.fail_on:
            raise RuntimeError(f"cannot parse {message!r}")
        if message.startswith("bad"):
            return ValidationOutcome(valid=False, errors=[f"{message} is bad"])
        return ValidationOutcome(valid=True, warnings=["looks fine"])


class SlowRuleEngine(RuleEngine):
    """Suspends during evaluation and records overlapping calls."""

    def __init__(self):
        self.in_flight = 0
        self.max_in_flight = 0

    async def evaluate(self, message, config):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        # Earlier commits sleep longer
        await asyncio.sleep(0.01 / (int(message) + 1))
        self.in_flight -= 1
        return ValidationOutcome(valid=True)


class NoOutcomeRuleEngine(RuleEngine):
    """Returns nothing instead of an outcome."""

    async def evaluate(self, message, config):
        return None


def record(index, message):
    return CommitRecord(sha=f"{index:040x}", message=message)


@pytest.fixture
def mock_console():
    console = Mock(spec=Console)
    console.print = Mock()
    return console


@pytest.fixture
def orchestrator(mock_console):
    return ValidationOrchestrator(mock_console)


@pytest.mark.asyncio
async def test_results_follow_commit_order(orchestrator):
    commits = [record(i, f"feat: change {i}") for i in range(5)]
    engine = ScriptedRuleEngine()

    results = await orchestrator.validate(commits, RuleConfig(), engine)

    assert [r.sha for r in results] == [c.sha for c in commits]
    assert engine.calls == [c.message for c in commits]


@pytest.mark.asyncio
async def test_invalid_commit_does_not_stop_the_run(orchestrator):
    commits = [record(1, "feat: one"), record(2, "bad two"), record(3, "feat: three")]
    engine = ScriptedRuleEngine()

    results = await orchestrator.validate(commits, RuleConfig(), engine)

    assert len(results) == 3
    assert [r.valid for r in results] == [True, False, True]
    assert results[1].errors == ("bad two is bad",)
    assert results[0].errors == () and results[2].errors == ()


@pytest.mark.asyncio
async def test_engine_exception_becomes_invalid_result(orchestrator, mock_console):
    commits = [record(1, "feat: one"), record(2, "boom"), record(3, "feat: three")]
    engine = ScriptedRuleEngine(fail_on=["boom"])

    results = await orchestrator.validate(commits, RuleConfig(), engine)

    assert [r.valid for r in results] == [True, False, True]
    assert results[1].errors == ("Rule engine failed: RuntimeError: cannot parse 'boom'",)
    assert results[1].warnings == ()
    assert engine.calls == ["feat: one", "boom", "feat: three"]
    mock_console.print.assert_called()


@pytest.mark.asyncio
async def test_missing_outcome_becomes_invalid_result(orchestrator, mock_console):
    commits = [record(1, "feat: one"), record(2, "feat: two")]

    results = await orchestrator.validate(commits, RuleConfig(), NoOutcomeRuleEngine())

    assert [r.sha for r in results] == [c.sha for c in commits]
    assert [r.valid for r in results] == [False, False]
    assert results[0].errors == (
        "Rule engine failed: TypeError: NoOutcomeRuleEngine returned NoneType, "
        "expected ValidationOutcome",
    )
    assert mock_console.print.call_count == 2


@pytest.mark.asyncio
async def test_results_carry_commit_identity(orchestrator):
    commit = CommitRecord(sha="0123456789abcdef0123456789abcdef01234567", message="bad one")

    [result] = await orchestrator.validate([commit], RuleConfig(), ScriptedRuleEngine())

    assert result.sha == commit.sha
    assert result.short_sha == "01234567"
    assert result.message == "bad one"


@pytest.mark.asyncio
async def test_evaluations_run_one_at_a_time(orchestrator):
    commits = [record(i, str(i)) for i in range(4)]
    engine = SlowRuleEngine()

    results = await orchestrator.validate(commits, RuleConfig(), engine)

    assert engine.max_in_flight == 1
    assert [r.message for r in results] == ["0", "1", "2", "3"]


@pytest.mark.asyncio
async def test_no_commits(orchestrator):
    engine = ScriptedRuleEngine()
    assert await orchestrator.validate([], RuleConfig(), engine) == []
    assert engine.calls == []


@pytest.mark.asyncio
async def test_rule_config_passed_unchanged(orchestrator):
    rule_config = RuleConfig(ignores=["^WIP"])
    engine = Mock(spec=RuleEngine)
    engine.evaluate = AsyncMock(return_value=ValidationOutcome(valid=True))

    await orchestrator.validate([record(1, "WIP")], rule_config, engine)

    engine.evaluate.assert_awaited_once_with("WIP", rule_config)


@pytest.mark.asyncio
async def test_observers_notified_in_order(orchestrator):
    observer = Mock(spec=ValidationObserver)
    observer.on_commit_validated = AsyncMock()
    orchestrator.add_observer(observer)

    results = await orchestrator.validate(
        [record(1, "feat: one"), record(2, "bad two")], RuleConfig(), ScriptedRuleEngine()
    )

    awaited = [c.args[0] for c in observer.on_commit_validated.await_args_list]
    assert awaited == results


@pytest.mark.asyncio
async def test_failing_observer_does_not_change_results(orchestrator):
    broken = Mock(spec=ValidationObserver)
    broken.on_commit_validated = AsyncMock(side_effect=OSError("disk full"))
    orchestrator.add_observer(broken)

    results = await orchestrator.validate(
        [record(1, "feat: one"), record(2, "feat: two")], RuleConfig(), ScriptedRuleEngine()
    )

    assert [r.valid for r in results] == [True, True]
    assert broken.on_commit_validated.await_count == 2


@pytest.mark.asyncio
async def test_remove_observer(orchestrator):
    observer = Mock(spec=ValidationObserver)
    observer.on_commit_validated = AsyncMock()
    orchestrator.add_observer(observer)
    orchestrator.remove_observer(observer)

    await orchestrator.validate([record(1, "feat: one")], RuleConfig(), ScriptedRuleEngine())

    observer.on_commit_validated.assert_not_awaited()


@pytest.mark.asyncio
async def test_three_commits_with_conventional_engine(orchestrator):
    commits = [record(1, "feat: add login"), record(2, "fixed bug"), record(3, "docs: explain setup")]

    results = await orchestrator.validate(commits, RuleConfig(), ConventionalRuleEngine())

    assert [r.valid for r in results] == [True, False, True]
    assert results[1].errors
    assert all(error for error in results[1].errors)
