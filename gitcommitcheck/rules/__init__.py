"""Conventional commit rule engine package."""

from .config import CONVENTIONAL_RULES, Level, RuleConfig, RuleSetting
from .engine import ConventionalRuleEngine, RuleEngine
from .parser import ParsedMessage, parse_message
from .validation import ValidationHandler, create_validation_chain

__all__ = [
    'CONVENTIONAL_RULES',
    'Level',
    'RuleConfig',
    'RuleSetting',
    'RuleEngine',
    'ConventionalRuleEngine',
    'ParsedMessage',
    'parse_message',
    'ValidationHandler',
    'create_validation_chain',
]
