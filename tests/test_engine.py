"""Tests for the matcher engine: ordering, fault isolation and suppressions."""

import pytest

from swiftstyle_cli import engine
from swiftstyle_cli.models import TOOL_CATEGORY, TokenKind
from swiftstyle_cli.registry import load
from swiftstyle_cli.rules import Rule


def _flag_identifiers(ctx, index):
    yield ctx.match_token(index, "identifier", [(ctx.tokens[index].start, ctx.tokens[index].end, "z")])


def _explode_after_first(ctx, index):
    yield ctx.match_token(index, "partial")
    raise RuntimeError("boom")


def _out_of_range(ctx, index):
    yield ctx.match(0, len(ctx.text) + 5, "too long")


def _rule(rule_id, check, kinds=(TokenKind.IDENTIFIER,), fixable=False):
    return Rule(rule_id, rule_id, "custom", "error", check, frozenset(kinds), fixable=fixable)


class TestCheck:
    """Evaluating rules over a model."""

    def test_let_x_equals_5(self, check_source):
        violations = check_source("let x=5\n")

        assert len(violations) == 1
        violation = violations[0]
        assert violation.rule_id == "spacing.operator"
        assert violation.start == 5
        assert (violation.line, violation.column) == (1, 6)
        assert violation.severity == "error"
        assert violation.is_fixable

    def test_clean_source_has_no_violations(self, check_source, clean_swift_code):
        assert check_source(clean_swift_code) == []

    def test_canonical_order(self, make_model):
        registry = load([_rule("b.rule", _flag_identifiers), _rule("a.rule", _flag_identifiers)])

        violations = engine.check(make_model("p q"), registry)

        assert [(v.start, v.rule_id) for v in violations] == [
            (0, "a.rule"), (0, "b.rule"), (2, "a.rule"), (2, "b.rule"),
        ]

    def test_repeated_runs_are_identical(self, check_source, sample_project_path):
        source = (sample_project_path / "Sources" / "App" / "ReportCard.swift").read_text()

        assert check_source(source) == check_source(source)

    def test_edits_ignored_for_non_fixable_rules(self, make_model):
        registry = load([_rule("a.rule", _flag_identifiers, fixable=False)])

        violations = engine.check(make_model("p"), registry)

        assert violations[0].fix is None

    def test_no_op_edits_dropped(self, make_model):
        def keep_text(ctx, index):
            token = ctx.tokens[index]
            yield ctx.match_token(index, "same", [(token.start, token.end, token.text)])

        registry = load([_rule("a.rule", keep_text, fixable=True)])

        violations = engine.check(make_model("p"), registry)

        assert not violations[0].is_fixable

    def test_file_level_rule_called_once(self, make_model):
        calls = []

        def whole_file(ctx, index):
            calls.append(index)
            return []

        engine.check(make_model("a b c"), load([_rule("a.rule", whole_file, kinds=())]))

        assert calls == [None]


class TestRuleFaults:
    """A failing rule must not take the other rules down."""

    def test_fault_is_isolated(self, make_model):
        registry = load([
            _rule("a.faulty", _explode_after_first),
            _rule("b.working", _flag_identifiers),
        ])

        violations = engine.check(make_model("p q"), registry)

        faults = [v for v in violations if v.rule_id == engine.TOOL_RULE_FAULT]
        assert len(faults) == 1
        assert faults[0].category == TOOL_CATEGORY
        assert faults[0].severity == "error"
        assert "a.faulty" in faults[0].message
        assert "boom" in faults[0].message
        # partial matches of the faulty rule are discarded
        assert not any(v.rule_id == "a.faulty" for v in violations)
        assert len([v for v in violations if v.rule_id == "b.working"]) == 2

    def test_match_outside_text_is_a_fault(self, make_model):
        registry = load([_rule("a.rule", _out_of_range)])

        violations = engine.check(make_model("p"), registry)

        assert [v.rule_id for v in violations] == [engine.TOOL_RULE_FAULT]


class TestSuppressions:
    """Inline swiftstyle:disable comments."""

    def test_disable_line_for_rule(self, check_source):
        source = "let x=5 // swiftstyle:disable-line spacing.operator\n"

        assert check_source(source) == []

    def test_disable_line_for_other_rule(self, check_source):
        source = "let x=5 // swiftstyle:disable-line spacing.comma\n"

        assert [v.rule_id for v in check_source(source)] == ["spacing.operator"]

    def test_disable_next_line_all_rules(self, check_source):
        source = "// swiftstyle:disable-next-line\nlet x=5\nlet y=6\n"

        violations = check_source(source)

        assert [(v.rule_id, v.line) for v in violations] == [("spacing.operator", 3)]

    def test_multiple_ids(self, check_source):
        source = "let A=5 // swiftstyle:disable-line naming.member-name, spacing.operator\n"

        assert check_source(source) == []

    def test_tool_diagnostics_are_never_suppressed(self, make_model):
        registry = load([_rule("a.faulty", _explode_after_first)])

        violations = engine.check(make_model("p // swiftstyle:disable-line"), registry)

        assert [v.rule_id for v in violations] == [engine.TOOL_RULE_FAULT]

    @pytest.mark.parametrize("comment, expected", [
        ("// swiftstyle:disable-line", {1: None}),
        ("// swiftstyle:disable-next-line a.rule b.rule", {2: {"a.rule", "b.rule"}}),
        ("/* swiftstyle:disable-line a.rule */", {1: {"a.rule"}}),
        ("// unrelated comment", {}),
    ])
    def test_suppressed_lines(self, make_model, comment, expected):
        assert engine.suppressed_lines(make_model(comment + "\n")) == expected


def test_tool_diagnostic_shape():
    diagnostic = engine.tool_diagnostic(engine.TOOL_PARSE_FAILURE, "bad", line=3, column=7, offset=20)

    assert diagnostic.is_tool_diagnostic
    assert not diagnostic.is_fixable
    assert (diagnostic.line, diagnostic.column, diagnostic.start) == (3, 7, 20)
