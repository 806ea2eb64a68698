"""Rule engines that decide whether a commit message conforms."""
import re
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

from ..models import ValidationOutcome
from .config import Level, RuleConfig
from .parser import parse_message
from .validation import ValidationHandler, create_validation_chain

DEFAULT_IGNORE_PATTERNS: Sequence[str] = (
    r"^Merge pull request #\d+",
    r"^Merge (remote-tracking )?branch\s",
    r"^Merge tag\s",
    r"^Merge [0-9a-f]+ into [0-9a-f]+",
    r"^Merge .+ into .+",
    r"^Revert \".*\"",
    r"^revert: \".*\"",
    r"^(amend|fixup|squash)! ",
    r"^Automatic merge",
    r"^Auto-merged .+ into .+",
)


class RuleEngine(ABC):
    """Abstract base class for rule engines.

    Implementations must be side-effect free: the same message and config
    always produce the same outcome.
    """

    @abstractmethod
    async def evaluate(self, message: str, config: RuleConfig) -> ValidationOutcome:
        """Evaluate a single commit message against ``config``."""
        pass


class ConventionalRuleEngine(RuleEngine):
    """Checks messages against the conventional commit rule set."""

    def __init__(self, chain: Optional[ValidationHandler] = None):
        self.chain = chain or create_validation_chain()

    def is_ignored(self, message: str, config: RuleConfig) -> bool:
        patterns: Iterable[str] = list(config.ignores)
        if config.default_ignores:
            patterns = [*DEFAULT_IGNORE_PATTERNS, *patterns]
        return any(re.search(pattern, message) for pattern in patterns)

    async def evaluate(self, message: str, config: RuleConfig) -> ValidationOutcome:
        return self.check(message, config)

    def check(self, message: str, config: RuleConfig) -> ValidationOutcome:
        if self.is_ignored(message, config):
            return ValidationOutcome(valid=True)

        problems = self.chain.handle(parse_message(message), config)
        errors = [p.message for p in problems if p.level == Level.ERROR]
        warnings = [p.message for p in problems if p.level == Level.WARNING]
        return ValidationOutcome(valid=not errors, errors=errors, warnings=warnings)
