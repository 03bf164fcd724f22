"""Matcher engine: evaluate every active rule over one source model.

Rules are independent of each other. A rule that raises is reported as a
single ``tool.rule-fault`` diagnostic for that file, its partial matches are
discarded, and the remaining rules still run.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from .config import SUPPRESSION_PREFIX
from .errors import RuleFault
from .models import TOOL_CATEGORY, Edit, Fix, Match, Severity, TokenKind, Violation
from .registry import ActiveRule, RuleRegistry
from .rules import RuleContext
from .source_model import SourceModel

logger = logging.getLogger(__name__)

TOOL_PARSE_FAILURE = "tool.parse-failure"
TOOL_RULE_FAULT = "tool.rule-fault"
TOOL_READ_FAILURE = "tool.read-failure"
TOOL_FIX_NOT_CONVERGED = "tool.fix-not-converged"
TOOL_INTERNAL_ERROR = "tool.internal-error"

SUPPRESSION_RE = re.compile(
    re.escape(SUPPRESSION_PREFIX) + r"(disable-next-line|disable-line)\b([^\n]*)"
)


def tool_diagnostic(
    rule_id: str,
    message: str,
    line: int = 1,
    column: int = 1,
    offset: int = 0,
    severity: Severity = "error",
) -> Violation:
    """Build a diagnostic about the tool itself rather than the code."""
    return Violation(
        rule_id=rule_id,
        start=offset,
        end=offset,
        line=line,
        column=column,
        message=message,
        severity=severity,
        category=TOOL_CATEGORY,
    )


def check(model: SourceModel, registry: RuleRegistry) -> List[Violation]:
    """Run every active rule over *model*.

    Returns violations in canonical order (start offset, then rule id), with
    inline suppressions applied. Never raises for rule errors.
    """
    by_kind: Dict[TokenKind, List[int]] = defaultdict(list)
    for index, token in enumerate(model.tokens):
        by_kind[token.kind].append(index)

    violations: List[Violation] = []
    for active in registry:
        ctx = RuleContext(model=model, options=registry.options, params=active.params, rule_id=active.id)
        try:
            found = [_to_violation(model, active, match) for match in _scan(active, ctx, by_kind)]
        except Exception as exc:
            fault = RuleFault(active.id, exc)
            logger.warning("%s (%s)", fault, model.path)
            logger.debug("Rule %s traceback", active.id, exc_info=True)
            violations.append(tool_diagnostic(TOOL_RULE_FAULT, str(fault)))
            continue
        violations.extend(found)

    violations = _apply_suppressions(model, violations)
    violations.sort(key=lambda v: v.sort_key)
    logger.debug("%s: %d violation(s) at revision %d", model.path, len(violations), model.revision)
    return violations


def _scan(active: ActiveRule, ctx: RuleContext, by_kind: Dict[TokenKind, List[int]]) -> Iterable[Match]:
    rule = active.rule
    if rule.is_file_level:
        yield from rule.check(ctx, None)
        return
    indices = sorted(i for kind in rule.kinds for i in by_kind.get(kind, ()))
    for index in indices:
        yield from rule.check(ctx, index)


def _to_violation(model: SourceModel, active: ActiveRule, match: Match) -> Violation:
    size = len(model.text)
    if not 0 <= match.start <= match.end <= size:
        raise ValueError(f"match span [{match.start}, {match.end}) outside text of length {size}")

    fix: Optional[Fix] = None
    if active.rule.fixable and match.edits:
        edits = []
        for start, end, replacement in match.edits:
            if not 0 <= start <= end <= size:
                raise ValueError(f"edit span [{start}, {end}) outside text of length {size}")
            if model.text[start:end] == replacement:
                continue
            edits.append(Edit(start, end, replacement, rule_id=active.id))
        if edits:
            fix = Fix(tuple(edits))

    line, column = model.position(match.start)
    return Violation(
        rule_id=active.id,
        start=match.start,
        end=match.end,
        line=line,
        column=column,
        message=match.message,
        severity=active.severity,
        category=active.rule.category,
        fix=fix,
    )


# ---------------------------------------------------------------------------
# Inline suppressions
# ---------------------------------------------------------------------------

def suppressed_lines(model: SourceModel) -> Dict[int, Optional[Set[str]]]:
    """Map line numbers to the rule ids silenced on them (None silences all).

    ``// swiftstyle:disable-line [ids]`` applies to the comment's own line,
    ``// swiftstyle:disable-next-line [ids]`` to the line after it.
    """
    lines: Dict[int, Optional[Set[str]]] = {}
    for index in model.indices_of(TokenKind.COMMENT):
        token = model.tokens[index]
        match = SUPPRESSION_RE.search(token.text)
        if match is None:
            continue
        directive, rest = match.groups()
        ids = {part for part in re.split(r"[\s,]+", rest.replace("*/", "")) if part}
        line = token.line + 1 if directive == "disable-next-line" else token.line
        if not ids or line in lines and lines[line] is None:
            lines[line] = None
        else:
            lines[line] = (lines.get(line) or set()) | ids
    return lines


def _apply_suppressions(model: SourceModel, violations: List[Violation]) -> List[Violation]:
    lines = suppressed_lines(model)
    if not lines:
        return violations
    kept = []
    for violation in violations:
        if not violation.is_tool_diagnostic and violation.line in lines:
            ids = lines[violation.line]
            if ids is None or violation.rule_id in ids:
                continue
        kept.append(violation)
    return kept
