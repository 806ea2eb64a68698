"""Split a commit message into its conventional commit parts."""
import re
from dataclasses import dataclass
from typing import List, Optional

HEADER_PATTERN = re.compile(
    r"^(?P<type>\w*)(?:\((?P<scope>[^()]*)\))?(?P<breaking>!)?: (?P<subject>.*)$"
)

# Git trailer ("Refs: #12", "Signed-off-by: ...") or a breaking change note.
TRAILER_PATTERN = re.compile(r"^(?:BREAKING[ -]CHANGE|[A-Za-z][\w-]*)(?:: | #)\S")
BREAKING_NOTE_PATTERN = re.compile(r"^BREAKING[ -]CHANGE: ")


@dataclass(frozen=True)
class ParsedMessage:
    raw: str
    header: str
    type: Optional[str]
    scope: Optional[str]
    subject: Optional[str]
    breaking: bool
    body_lines: List[str]
    footer_lines: List[str]
    body_has_leading_blank: bool
    footer_has_leading_blank: bool

    @property
    def body(self) -> Optional[str]:
        text = "\n".join(self.body_lines).strip()
        return text or None

    @property
    def footer(self) -> Optional[str]:
        text = "\n".join(self.footer_lines).strip()
        return text or None


def _find_footer_start(lines: List[str]) -> Optional[int]:
    for index, line in enumerate(lines):
        if not TRAILER_PATTERN.match(line):
            continue
        if index == 0 or not lines[index - 1].strip() or BREAKING_NOTE_PATTERN.match(line):
            return index
    return None


def parse_message(message: str) -> ParsedMessage:
    """Parse ``message`` into header, type, scope, subject, body and footer.

    A header that does not follow ``type(scope)!: subject`` leaves type,
    scope and subject as None; the rules decide what that means.
    """
    lines = message.replace("\r\n", "\n").split("\n")
    header = lines[0]
    rest = lines[1:]

    match = HEADER_PATTERN.match(header.strip())
    commit_type = scope = subject = None
    breaking = False
    if match:
        commit_type = match.group("type") or None
        scope = match.group("scope") or None
        subject = match.group("subject").strip() or None
        breaking = bool(match.group("breaking"))

    footer_start = _find_footer_start(rest)
    if footer_start is None:
        body_lines, footer_lines = rest, []
    else:
        body_lines, footer_lines = rest[:footer_start], rest[footer_start:]

    if any(BREAKING_NOTE_PATTERN.match(line) for line in footer_lines):
        breaking = True

    has_body = any(line.strip() for line in body_lines)
    body_has_leading_blank = not has_body or not body_lines[0].strip()

    footer_has_leading_blank = True
    if footer_lines:
        previous = rest[footer_start - 1] if footer_start else header
        footer_has_leading_blank = not previous.strip()

    return ParsedMessage(
        raw=message,
        header=header,
        type=commit_type,
        scope=scope,
        subject=subject,
        breaking=breaking,
        body_lines=list(body_lines),
        footer_lines=footer_lines,
        body_has_leading_blank=body_has_leading_blank,
        footer_has_leading_blank=footer_has_leading_blank,
    )
