"""Core data models shared by the tokenizer, engine, fixer and reporter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal, Optional, Tuple

Severity = Literal["error", "warning", "info"]
SEVERITIES: Tuple[str, ...] = ("error", "warning", "info")

TOOL_CATEGORY = "tool-error"


class TokenKind(str, Enum):
    """Lexical classes produced by a :class:`~swiftstyle_cli.parser.Parser`."""

    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    NUMBER = "number"
    STRING = "string"
    COMMENT = "comment"
    WHITESPACE = "whitespace"
    NEWLINE = "newline"
    BRACE = "brace"
    PAREN = "paren"
    BRACKET = "bracket"
    PUNCTUATION = "punctuation"
    ATTRIBUTE = "attribute"
    DIRECTIVE = "directive"

    @property
    def is_trivia(self) -> bool:
        return self in (TokenKind.WHITESPACE, TokenKind.NEWLINE, TokenKind.COMMENT)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    end: int
    line: int
    column: int

    def is_(self, kind: TokenKind, *texts: str) -> bool:
        """True when the token has *kind* and, if given, one of *texts*."""
        if self.kind is not kind:
            return False
        return not texts or self.text in texts


@dataclass(frozen=True)
class Edit:
    """Replace ``[start, end)`` of a text snapshot with *replacement*.

    Zero-width edits (``start == end``) are insertions.
    """

    start: int
    end: int
    replacement: str
    rule_id: str = ""

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid edit span [{self.start}, {self.end})")

    def conflicts_with(self, other: "Edit") -> bool:
        """Overlapping spans conflict, and so do two edits anchored at one offset."""
        if self.start == other.start:
            return True
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Fix:
    """An ordered group of non-overlapping edits correcting one violation."""

    edits: Tuple[Edit, ...] = ()

    def __post_init__(self):
        ordered = tuple(sorted(self.edits, key=lambda e: (e.start, e.end)))
        for left, right in zip(ordered, ordered[1:]):
            if left.conflicts_with(right):
                raise ValueError(
                    f"Overlapping edits in fix: [{left.start}, {left.end}) and [{right.start}, {right.end})"
                )
        object.__setattr__(self, "edits", ordered)

    def __bool__(self) -> bool:
        return bool(self.edits)


@dataclass(frozen=True)
class Match:
    """What a rule reports: a span, a message and optional replacement edits.

    Edits are ``(start, end, replacement)`` triples against the checked text.
    """

    start: int
    end: int
    message: str
    edits: Tuple[Tuple[int, int, str], ...] = ()


@dataclass(frozen=True)
class Violation:
    rule_id: str
    start: int
    end: int
    line: int
    column: int
    message: str
    severity: Severity
    category: str
    fix: Optional[Fix] = None

    @property
    def is_tool_diagnostic(self) -> bool:
        return self.category == TOOL_CATEGORY

    @property
    def is_fixable(self) -> bool:
        return bool(self.fix)

    @property
    def sort_key(self) -> Tuple[int, str, int, str]:
        return (self.start, self.rule_id, self.end, self.message)


class Outcome(str, Enum):
    CLEAN = "clean"
    VIOLATIONS_REMAIN = "violations-remain"
    FIXED = "fixed"
    TOOL_ERROR = "tool-error"


@dataclass
class RunResult:
    """Per-file result retained until the reporter has rendered it."""

    path: str
    violations: List[Violation] = field(default_factory=list)
    fixed: List[Violation] = field(default_factory=list)
    fixes_applied: int = 0
    passes: int = 0
    original_text: Optional[str] = None
    final_text: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.final_text is not None and self.final_text != self.original_text

    @property
    def outcome(self) -> Outcome:
        if any(v.is_tool_diagnostic and v.severity == "error" for v in self.violations):
            return Outcome.TOOL_ERROR
        if any(v.severity == "error" and not v.is_tool_diagnostic for v in self.violations):
            return Outcome.VIOLATIONS_REMAIN
        if self.fixes_applied:
            return Outcome.FIXED
        return Outcome.CLEAN
