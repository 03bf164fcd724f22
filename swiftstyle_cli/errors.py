"""Exception taxonomy for the style engine."""

from __future__ import annotations


class StyleError(Exception):
    """Base class for all engine errors."""


class ParseFailure(StyleError):
    """The tokenizer rejected a file; no rules run for it."""

    def __init__(self, message: str, offset: int = 0, line: int = 1, column: int = 1):
        self.offset = offset
        self.line = line
        self.column = column
        self.reason = message
        super().__init__(f"{message} (line {line}, column {column})")


class ConfigError(StyleError):
    """Invalid configuration. Fatal for the whole run."""


class RuleFault(StyleError):
    """A rule raised while being evaluated."""

    def __init__(self, rule_id: str, cause: BaseException):
        self.rule_id = rule_id
        self.cause = cause
        super().__init__(f"Rule '{rule_id}' failed: {type(cause).__name__}: {cause}")


class FixNotConverged(StyleError):
    """Fixes were still pending when the iteration bound was reached."""

    def __init__(self, iterations: int, pending: int):
        self.iterations = iterations
        self.pending = pending
        super().__init__(
            f"Fixes did not converge after {iterations} iteration(s); {pending} fix(es) still pending"
        )
