"""Commit message rules using Chain of Responsibility pattern.

Unlike a fail-fast chain, every handler runs: each one reports its own
problem (if any) and then passes the message on, so a single evaluation
lists every rule a message breaks.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Type

from .config import Level, RuleConfig
from .parser import ParsedMessage


@dataclass(frozen=True)
class Problem:
    level: Level
    name: str
    message: str


def _words(text: str) -> List[str]:
    return [word for word in re.split(r"[\s_\-]+", text) if word]


def _is_start_case(text: str) -> bool:
    words = _words(re.sub(r"[^\w\s\-]", "", text))
    return bool(words) and all(word[0].isupper() or not word[0].isalpha() for word in words)


CASE_CHECKS = {
    "lower-case": lambda s: s == s.lower(),
    "upper-case": lambda s: s == s.upper(),
    "sentence-case": lambda s: s == s[:1].upper() + s[1:].lower(),
    "start-case": _is_start_case,
    "pascal-case": lambda s: re.fullmatch(r"[A-Z][A-Za-z0-9]*", s) is not None,
    "camel-case": lambda s: re.fullmatch(r"[a-z][A-Za-z0-9]*", s) is not None,
    "kebab-case": lambda s: re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)*", s) is not None,
    "snake-case": lambda s: re.fullmatch(r"[a-z0-9]+(_[a-z0-9]+)*", s) is not None,
}


def matches_case(text: str, case: str) -> bool:
    """Whether ``text`` is written in ``case``. Text without letters matches any case."""
    if not any(char.isalpha() for char in text):
        return True
    try:
        check = CASE_CHECKS[case]
    except KeyError:
        raise ValueError(f"Unknown case '{case}'") from None
    return check(text)


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def _must(always: bool) -> str:
    return "must" if always else "must not"


class ValidationHandler(ABC):
    """Abstract base class for rule handlers."""

    name: str = ""

    def __init__(self, next_handler: Optional['ValidationHandler'] = None):
        self.next_handler = next_handler

    def handle(self, message: ParsedMessage, config: RuleConfig) -> List[Problem]:
        """Apply this rule if enabled, then pass to the next handler."""
        problems: List[Problem] = []
        setting = config.get(self.name)
        if setting is not None and setting.level > Level.DISABLED:
            always = setting.applicable == "always"
            valid, text = self.validate(message, always, setting.value)
            if not valid:
                problems.append(Problem(setting.level, self.name, text))
        if self.next_handler:
            problems.extend(self.next_handler.handle(message, config))
        return problems

    @abstractmethod
    def validate(self, message: ParsedMessage, always: bool, value: Any) -> Tuple[bool, str]:
        """Check the rule; ``always`` is False when the rule is applied as "never"."""
        pass


class HeaderTrimHandler(ValidationHandler):
    name = "header-trim"

    def validate(self, message, always, value):
        trimmed = message.header == message.header.strip()
        if trimmed == always:
            return True, ""
        return False, "header must not be surrounded by whitespace" if always \
            else "header must be surrounded by whitespace"


class HeaderMaxLengthHandler(ValidationHandler):
    name = "header-max-length"

    def validate(self, message, always, value):
        length = len(message.header)
        if value is None or length <= int(value):
            return True, ""
        return False, (
            f"header must not be longer than {value} characters, current length is {length}"
        )


class TypeEmptyHandler(ValidationHandler):
    name = "type-empty"

    def validate(self, message, always, value):
        empty = not message.type
        if empty == always:
            return True, ""
        return False, "type must be empty" if always else "type may not be empty"


class TypeCaseHandler(ValidationHandler):
    name = "type-case"

    def validate(self, message, always, value):
        if not message.type:
            return True, ""
        cases = _as_list(value)
        matched = any(matches_case(message.type, case) for case in cases)
        if matched == always:
            return True, ""
        return False, f"type {_must(always)} be {', '.join(cases)}"


class TypeEnumHandler(ValidationHandler):
    name = "type-enum"

    def validate(self, message, always, value):
        if not message.type:
            return True, ""
        allowed = _as_list(value)
        listed = message.type in allowed
        if listed == always:
            return True, ""
        return False, f"type {_must(always)} be one of [{', '.join(allowed)}]"


class ScopeCaseHandler(ValidationHandler):
    name = "scope-case"

    def validate(self, message, always, value):
        if not message.scope:
            return True, ""
        cases = _as_list(value)
        scopes = [part for part in re.split(r"[/\\,]", message.scope) if part.strip()]
        matched = all(
            any(matches_case(part.strip(), case) for case in cases) for part in scopes
        )
        if matched == always:
            return True, ""
        return False, f"scope {_must(always)} be {', '.join(cases)}"


class SubjectEmptyHandler(ValidationHandler):
    name = "subject-empty"

    def validate(self, message, always, value):
        empty = not message.subject
        if empty == always:
            return True, ""
        return False, "subject must be empty" if always else "subject may not be empty"


class SubjectCaseHandler(ValidationHandler):
    name = "subject-case"

    def validate(self, message, always, value):
        if not message.subject:
            return True, ""
        cases = _as_list(value)
        matched = any(matches_case(message.subject, case) for case in cases)
        if matched == always:
            return True, ""
        return False, f"subject {_must(always)} be {', '.join(cases)}"


class SubjectFullStopHandler(ValidationHandler):
    name = "subject-full-stop"

    def validate(self, message, always, value):
        if not message.subject:
            return True, ""
        stop = value if value is not None else "."
        ends = message.subject.endswith(stop)
        if ends == always:
            return True, ""
        return False, "subject must end with full stop" if always \
            else "subject may not end with full stop"


class BodyLeadingBlankHandler(ValidationHandler):
    name = "body-leading-blank"

    def validate(self, message, always, value):
        if message.body is None:
            return True, ""
        if message.body_has_leading_blank == always:
            return True, ""
        return False, f"body {_must(always)} have leading blank line"


class BodyMaxLineLengthHandler(ValidationHandler):
    name = "body-max-line-length"

    def validate(self, message, always, value):
        if value is None or message.body is None:
            return True, ""
        if all(len(line) <= int(value) for line in message.body_lines):
            return True, ""
        return False, f"body's lines must not be longer than {value} characters"


class FooterLeadingBlankHandler(ValidationHandler):
    name = "footer-leading-blank"

    def validate(self, message, always, value):
        if message.footer is None:
            return True, ""
        if message.footer_has_leading_blank == always:
            return True, ""
        return False, f"footer {_must(always)} have leading blank line"


class FooterMaxLineLengthHandler(ValidationHandler):
    name = "footer-max-line-length"

    def validate(self, message, always, value):
        if value is None or message.footer is None:
            return True, ""
        if all(len(line) <= int(value) for line in message.footer_lines):
            return True, ""
        return False, f"footer's lines must not be longer than {value} characters"


DEFAULT_HANDLERS: Sequence[Type[ValidationHandler]] = (
    HeaderTrimHandler,
    HeaderMaxLengthHandler,
    TypeEmptyHandler,
    TypeCaseHandler,
    TypeEnumHandler,
    ScopeCaseHandler,
    SubjectEmptyHandler,
    SubjectCaseHandler,
    SubjectFullStopHandler,
    BodyLeadingBlankHandler,
    BodyMaxLineLengthHandler,
    FooterLeadingBlankHandler,
    FooterMaxLineLengthHandler,
)


def create_validation_chain(
    handlers: Sequence[Type[ValidationHandler]] = DEFAULT_HANDLERS,
) -> ValidationHandler:
    """Create the rule chain; problems come back in ``handlers`` order."""
    if not handlers:
        raise ValueError("A validation chain needs at least one handler")
    chain: Optional[ValidationHandler] = None
    for handler_class in reversed(handlers):
        chain = handler_class(chain)
    return chain
