"""Rule capability and the context handed to rule checkers.

A rule is data plus one function. There is no class hierarchy: every rule,
whatever its category, is a :class:`Rule` value whose ``check`` callable is
invoked either once per token of the kinds it subscribes to, or once per
file when ``kinds`` is empty (``index`` is then ``None``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from .config_manager import EngineOptions
from .models import Match, Severity, Token, TokenKind
from .source_model import SourceModel

Checker = Callable[["RuleContext", Optional[int]], Iterable[Match]]


@dataclass(frozen=True, eq=False)
class Rule:
    id: str
    title: str
    category: str
    severity: Severity
    check: Checker
    kinds: FrozenSet[TokenKind] = frozenset()
    fixable: bool = False
    enabled_by_default: bool = True
    parameters: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_file_level(self) -> bool:
        return not self.kinds


@dataclass(frozen=True)
class RuleContext:
    """Everything a checker may look at. Rules must not keep state across calls."""

    model: SourceModel
    options: EngineOptions
    params: Mapping[str, Any]
    rule_id: str

    @property
    def text(self) -> str:
        return self.model.text

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return self.model.tokens

    def match(
        self,
        start: int,
        end: int,
        message: str,
        edits: Sequence[Tuple[int, int, str]] = (),
    ) -> Match:
        return Match(start=start, end=end, message=message, edits=tuple(edits))

    def match_token(self, index: int, message: str, edits: Sequence[Tuple[int, int, str]] = ()) -> Match:
        token = self.model.tokens[index]
        return self.match(token.start, token.end, message, edits)
