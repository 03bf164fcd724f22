"""Diagnostic reporter: render batch results as text, JSON or diffs."""

from __future__ import annotations

import difflib
import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import Outcome, RunResult, Violation
from .registry import RuleRegistry
from .runner import BatchResult

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

FORMATS = ("text", "json")

EXIT_CODES: Dict[Outcome, int] = {
    Outcome.CLEAN: 0,
    Outcome.FIXED: 0,
    Outcome.VIOLATIONS_REMAIN: 1,
    Outcome.TOOL_ERROR: 2,
}


def exit_code(outcome: Outcome) -> int:
    return EXIT_CODES[outcome]


def severity_label(violation: Violation) -> str:
    if violation.is_tool_diagnostic and violation.severity == "error":
        return "tool-error"
    return violation.severity


def format_violation(path: str, violation: Violation) -> str:
    """``path:line:col: severity: message [rule-id]``"""
    return (
        f"{path}:{violation.line}:{violation.column}: "
        f"{severity_label(violation)}: {violation.message} [{violation.rule_id}]"
    )


def violation_record(path: str, violation: Violation, fixed: bool) -> Dict[str, Any]:
    return {
        "path": path,
        "line": violation.line,
        "column": violation.column,
        "severity": severity_label(violation),
        "ruleId": violation.rule_id,
        "message": violation.message,
        "fixed": fixed,
    }


def json_document(batch: BatchResult) -> Dict[str, Any]:
    """Build the machine-readable report.

    Per file, fixed violations come first (in the order their fixes were
    applied), followed by the violations that remain.
    """
    records: List[Dict[str, Any]] = []
    for result in batch.results:
        records.extend(violation_record(result.path, v, True) for v in result.fixed)
        records.extend(violation_record(result.path, v, False) for v in result.violations)
    return {
        "files": len(batch.results),
        "outcome": batch.outcome.value,
        "interrupted": batch.interrupted,
        "violations": records,
    }


def create_diff(original: str, modified: str, filename: str) -> str:
    """Unified diff between two versions of *filename*."""
    diff = difflib.unified_diff(
        original.splitlines(keepends=True),
        modified.splitlines(keepends=True),
        fromfile=f"a/{filename}",
        tofile=f"b/{filename}",
    )
    lines = []
    for line in diff:
        lines.append(line if line.endswith("\n") else line + "\n\\ No newline at end of file\n")
    return "".join(lines)


class Reporter:
    """Writes results to the console in the selected format.

    Nothing is written while workers run; the reporter only sees the finished
    batch, so output order is stable across runs.
    """

    def __init__(self, fmt: str = "text", show_diff: bool = False,
                 out: Optional[Console] = None, err: Optional[Console] = None):
        if fmt not in FORMATS:
            raise ValueError(f"Unknown output format: {fmt}")
        self.fmt = fmt
        self.show_diff = show_diff
        self.out = out or console
        self.err = err or err_console

    def render(self, batch: BatchResult) -> int:
        """Render *batch* and return the process exit code."""
        if self.fmt == "json":
            self.out.out(json.dumps(json_document(batch), indent=2))
        else:
            if self.show_diff:
                self.render_diffs(batch.results)
            self.render_text(batch)
        return exit_code(batch.outcome)

    def render_text(self, batch: BatchResult) -> None:
        remaining = 0
        for result in batch.results:
            for violation in result.violations:
                self.out.out(format_violation(result.path, violation))
                remaining += 1
        self.out.out(self.summary(batch, remaining))

    def render_diffs(self, results: List[RunResult]) -> None:
        for result in results:
            if result.changed:
                self.out.out(create_diff(result.original_text, result.final_text, result.path), end="")

    @staticmethod
    def summary(batch: BatchResult, remaining: int) -> str:
        text = (
            f"{len(batch.results)} file(s) checked, "
            f"{remaining} violation(s) remaining, "
            f"{batch.fixes_applied} fix(es) applied"
        )
        if batch.interrupted:
            text += " (interrupted)"
        return text

    def render_catalogue(self, registry: RuleRegistry) -> None:
        """List every known rule with its effective settings."""
        if self.fmt == "json":
            rules = [
                {
                    "id": entry.id,
                    "category": entry.rule.category,
                    "severity": entry.severity,
                    "fixable": entry.rule.fixable,
                    "enabled": enabled,
                    "title": entry.rule.title,
                    "parameters": dict(entry.params),
                }
                for entry, enabled in registry.catalogue
            ]
            self.out.out(json.dumps(rules, indent=2))
            return

        table = Table(title="Style rules")
        table.add_column("Rule", style="cyan", no_wrap=True)
        table.add_column("Category")
        table.add_column("Severity")
        table.add_column("Fixable", justify="center")
        table.add_column("Enabled", justify="center")
        table.add_column("Description")
        for entry, enabled in registry.catalogue:
            table.add_row(
                entry.id,
                entry.rule.category,
                entry.severity,
                "yes" if entry.rule.fixable else "no",
                "[green]yes[/green]" if enabled else "[dim]no[/dim]",
                entry.rule.title,
            )
        self.out.print(table)

    def fatal(self, message: str) -> None:
        """Report an error that stops the run before any file is processed."""
        self.err.print(f"[bold red]Error:[/bold red] {escape(message)}")
