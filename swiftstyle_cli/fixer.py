"""Fix resolution and application.

One fix pass works against a single immutable snapshot of the text:

1. collect the fixes attached to fixable violations,
2. order them by their first edit's start offset, then by rule id,
3. accept greedily, deferring any fix with an edit that overlaps (or shares
   a start offset with) an already accepted edit,
4. splice the accepted edits into the snapshot in one left-to-right sweep.

Deferred fixes are retried on the next pass, after the file is re-checked.
A fix is accepted or deferred as a whole, so a violation is never left
half-corrected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from . import engine
from .errors import FixNotConverged, ParseFailure
from .models import Edit, Violation
from .parser import Parser
from .registry import RuleRegistry
from .source_model import SourceModel

logger = logging.getLogger(__name__)


@dataclass
class FixOutcome:
    """Result of fixing one file until convergence or the iteration bound."""

    text: str
    violations: List[Violation] = field(default_factory=list)
    fixed: List[Violation] = field(default_factory=list)
    passes: int = 0

    @property
    def fixes_applied(self) -> int:
        return len(self.fixed)


def select_fixes(violations: Sequence[Violation]) -> List[Violation]:
    """Return the violations whose fixes are accepted for this pass, in order."""
    candidates = [v for v in violations if v.is_fixable and not v.is_tool_diagnostic]
    candidates.sort(key=lambda v: (v.fix.edits[0].start, v.rule_id, v.fix.edits[0].end,
                                   v.fix.edits[0].replacement))
    accepted: List[Violation] = []
    taken: List[Edit] = []
    for violation in candidates:
        edits = violation.fix.edits
        if any(edit.conflicts_with(other) for edit in edits for other in taken):
            logger.debug("Deferring %s fix at offset %d", violation.rule_id, edits[0].start)
            continue
        accepted.append(violation)
        taken.extend(edits)
    return accepted


def resolve(violations: Sequence[Violation]) -> List[Edit]:
    """Flatten the accepted fixes into a sorted, non-overlapping edit list."""
    return _edits_of(select_fixes(violations))


def _edits_of(accepted: Sequence[Violation]) -> List[Edit]:
    return sorted((edit for violation in accepted for edit in violation.fix.edits), key=lambda e: (e.start, e.end))


def apply(text: str, edits: Sequence[Edit]) -> str:
    """Splice *edits* into *text*. All offsets refer to the original *text*.

    Raises:
        ValueError: if the edits are unsorted, overlap, or fall outside *text*.
    """
    parts: List[str] = []
    cursor = 0
    previous: Optional[Edit] = None
    for edit in edits:
        if edit.end > len(text):
            raise ValueError(f"Edit [{edit.start}, {edit.end}) exceeds text length {len(text)}")
        if edit.start < cursor or (previous is not None and edit.conflicts_with(previous)):
            raise ValueError(f"Edits overlap or are unsorted at offset {edit.start}")
        parts.append(text[cursor:edit.start])
        parts.append(edit.replacement)
        cursor = edit.end
        previous = edit
    parts.append(text[cursor:])
    return "".join(parts)


def fix_source(
    path: Union[str, Path],
    text: str,
    registry: RuleRegistry,
    parser: Parser,
    max_iterations: Optional[int] = None,
) -> FixOutcome:
    """Check and fix *text* until no fixes remain or the pass limit is hit.

    The returned violations come from checking the final text. If the bound
    is reached with fixes still pending, a ``tool.fix-not-converged`` warning
    is added. If a pass produces text that no longer tokenizes, that pass is
    discarded and a ``tool.parse-failure`` error is added.

    Raises:
        ParseFailure: if the *input* text cannot be tokenized.
    """
    limit = max_iterations or registry.options.max_fix_iterations
    model = SourceModel.build(path, text, parser)
    violations = engine.check(model, registry)
    fixed: List[Violation] = []
    diagnostics: List[Violation] = []
    passes = 0

    while True:
        accepted = select_fixes(violations)
        if not accepted:
            break
        if passes >= limit:
            exc = FixNotConverged(passes, len(accepted))
            logger.warning("%s: %s", path, exc)
            diagnostics.append(engine.tool_diagnostic(engine.TOOL_FIX_NOT_CONVERGED, str(exc), severity="warning"))
            break

        new_text = apply(model.text, _edits_of(accepted))
        try:
            new_model = model.rebuild(new_text, parser)
        except ParseFailure as exc:
            logger.error("%s: fix pass %d produced unparsable text, discarding it: %s", path, passes + 1, exc)
            diagnostics.append(engine.tool_diagnostic(
                engine.TOOL_PARSE_FAILURE, f"Fixes produced unparsable text and were discarded: {exc}"
            ))
            break

        passes += 1
        fixed.extend(accepted)
        logger.debug("%s: pass %d applied %d fix(es)", path, passes, len(accepted))
        model = new_model
        violations = engine.check(model, registry)

    remaining = sorted(violations + diagnostics, key=lambda v: v.sort_key)
    return FixOutcome(text=model.text, violations=remaining, fixed=fixed, passes=passes)
