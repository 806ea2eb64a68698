"""Rule configuration for the conventional commit rule engine.

Rules are configured the way commitlint configures them: each rule name maps
to ``[level, applicable, value]`` where level is 0 (disabled), 1 (warning) or
2 (error) and applicable is ``"always"`` or ``"never"``. The defaults follow
the conventional commit preset.

Example ``.gitcommitcheck.toml``::

    ignores = ["^WIP"]

    [rules]
    header-max-length = [2, "always", 72]
    scope-case = [0]
"""
import re
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli
import tomli_w
from pydantic import BaseModel, Field, field_validator, model_validator
from rich.console import Console
from rich.markup import escape

from ..config import DEFAULT_CONFIG_FILENAME


class Level(IntEnum):
    DISABLED = 0
    WARNING = 1
    ERROR = 2


class RuleSetting(BaseModel):
    level: Level = Level.ERROR
    applicable: str = "always"
    value: Any = None

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data: Any) -> Any:
        """Accept the ``[level, applicable, value]`` shorthand."""
        if isinstance(data, (list, tuple)):
            if not data:
                raise ValueError("Rule setting needs at least a level")
            keys = ("level", "applicable", "value")
            return dict(zip(keys, data))
        return data

    @field_validator("applicable")
    @classmethod
    def _check_applicable(cls, value: str) -> str:
        if value not in ("always", "never"):
            raise ValueError(f"applicable must be 'always' or 'never', got '{value}'")
        return value

    def as_list(self) -> List[Any]:
        if self.value is None:
            return [int(self.level), self.applicable]
        return [int(self.level), self.applicable, self.value]


CONVENTIONAL_TYPES = [
    "build",
    "chore",
    "ci",
    "docs",
    "feat",
    "fix",
    "perf",
    "refactor",
    "revert",
    "style",
    "test",
]

CONVENTIONAL_RULES: Dict[str, list] = {
    "body-leading-blank": [1, "always"],
    "body-max-line-length": [2, "always", 100],
    "footer-leading-blank": [1, "always"],
    "footer-max-line-length": [2, "always", 100],
    "header-max-length": [2, "always", 100],
    "header-trim": [2, "always"],
    "scope-case": [2, "always", "lower-case"],
    "subject-case": [2, "never", ["sentence-case", "start-case", "pascal-case", "upper-case"]],
    "subject-empty": [2, "never"],
    "subject-full-stop": [2, "never", "."],
    "type-case": [2, "always", "lower-case"],
    "type-empty": [2, "never"],
    "type-enum": [2, "always", CONVENTIONAL_TYPES],
}


def _default_rules() -> Dict[str, RuleSetting]:
    return {name: RuleSetting.model_validate(setting) for name, setting in CONVENTIONAL_RULES.items()}


class RuleConfig(BaseModel):
    """Rule set handed unchanged to a rule engine."""

    rules: Dict[str, RuleSetting] = Field(
        default_factory=_default_rules,
        description="Rule name to setting"
    )

    default_ignores: bool = Field(
        default=True,
        description="Skip merge, revert and fixup style messages"
    )

    ignores: List[str] = Field(
        default_factory=list,
        description="Extra regular expressions; matching messages are not validated"
    )

    @field_validator("ignores", mode="before")
    @classmethod
    def _single_pattern(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("ignores")
    @classmethod
    def _check_patterns(cls, value: List[str]) -> List[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid ignore pattern '{pattern}': {e}") from None
        return value

    def get(self, name: str) -> Optional[RuleSetting]:
        return self.rules.get(name)

    def with_overrides(self, overrides: Dict[str, Any]) -> "RuleConfig":
        """Return a copy with ``overrides`` merged over the current rules."""
        rules = dict(self.rules)
        for name, setting in overrides.items():
            rules[name] = RuleSetting.model_validate(setting)
        return self.model_copy(update={"rules": rules})

    @classmethod
    def load(cls, repo_path: Path, console: Optional[Console] = None) -> "RuleConfig":
        """Load rule overrides from the config file on top of the defaults.

        Args:
            repo_path: Path to the git repository

        Returns:
            RuleConfig: Conventional defaults merged with the file's ``[rules]``
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME
        base = cls()

        if not config_path.exists():
            return base

        try:
            with config_path.open('rb') as f:
                config_data = tomli.load(f)

            rules = config_data.get('rules', {})
            if not isinstance(rules, dict):
                raise ValueError(f"'rules' must be a table, got {type(rules).__name__}")

            return cls(
                rules=base.with_overrides(rules).rules,
                default_ignores=config_data.get('default_ignores', base.default_ignores),
                ignores=config_data.get('ignores', base.ignores),
            )
        except (OSError, tomli.TOMLDecodeError, ValueError) as e:
            (console or Console(stderr=True)).print(
                f"[yellow]Warning: Error reading rule configuration: {escape(str(e))}[/yellow]"
            )
            return base

    def save(self, repo_path: Path) -> None:
        """Write the rules into the config file, keeping its other tables."""
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        data: Dict[str, Any] = {}
        if config_path.exists():
            with config_path.open('rb') as f:
                data = tomli.load(f)

        data['rules'] = {name: setting.as_list() for name, setting in self.rules.items()}
        data['ignores'] = list(self.ignores)
        data['default_ignores'] = self.default_ignores

        with config_path.open('wb') as f:
            tomli_w.dump(data, f)
