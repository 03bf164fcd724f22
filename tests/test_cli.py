"""Integration tests for the swiftstyle CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from swiftstyle_cli import __version__
from swiftstyle_cli.cli import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(temp_dir: Path, monkeypatch):
    """Run every command from an empty directory so no stray config is found."""
    monkeypatch.chdir(temp_dir)


class TestCheckCommand:
    """Tests for 'swiftstyle check'."""

    def test_clean_file(self, write_swift, clean_swift_code):
        path = write_swift(clean_swift_code)

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 0
        assert "1 file(s) checked, 0 violation(s) remaining, 0 fix(es) applied" in result.stdout

    def test_violation_reported(self, write_swift):
        path = write_swift("let x=5\n")

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 1
        assert f"{path}:1:6: error:" in result.stdout
        assert "[spacing.operator]" in result.stdout

    def test_fix_rewrites_file(self, write_swift):
        path = write_swift("let x=5\n")

        result = runner.invoke(app, ["check", "--fix", str(path)])

        assert result.exit_code == 0
        assert path.read_text() == "let x = 5\n"
        assert "1 fix(es) applied" in result.stdout

        again = runner.invoke(app, ["check", str(path)])
        assert again.exit_code == 0

    def test_diff_does_not_write(self, write_swift):
        path = write_swift("let x=5\n")

        result = runner.invoke(app, ["check", "--diff", str(path)])

        assert result.exit_code == 0
        assert path.read_text() == "let x=5\n"
        assert "-let x=5" in result.stdout
        assert "+let x = 5" in result.stdout

    def test_parse_failure_is_a_tool_error(self, write_swift):
        path = write_swift("func broken() {\n")

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 2
        assert "tool-error" in result.stdout
        assert "[tool.parse-failure]" in result.stdout

    def test_parse_failure_in_json(self, write_swift):
        path = write_swift("let x = (\n")

        result = runner.invoke(app, ["check", "--format", "json", str(path)])

        assert result.exit_code == 2
        record = json.loads(result.stdout)["violations"][0]
        assert (record["ruleId"], record["severity"]) == ("tool.parse-failure", "tool-error")

    def test_json_output(self, write_swift):
        path = write_swift("let x=5\n")

        result = runner.invoke(app, ["check", "--format", "json", str(path)])

        assert result.exit_code == 1
        document = json.loads(result.stdout)
        assert document["files"] == 1
        assert document["outcome"] == "violations-remain"
        assert document["violations"] == [{
            "path": str(path), "line": 1, "column": 6, "severity": "error",
            "ruleId": "spacing.operator",
            "message": "Operator '=' should be surrounded by single spaces",
            "fixed": False,
        }]

    def test_json_fixed_records_in_application_order(self, write_swift):
        path = write_swift("static internal func f() {\n}\n")

        result = runner.invoke(app, ["check", "--fix", "--format", "json", str(path)])

        assert result.exit_code == 0
        assert path.read_text() == "static func f() {\n}\n"
        records = json.loads(result.stdout)["violations"]
        assert [(r["ruleId"], r["fixed"]) for r in records] == [
            ("access-control.modifier-order", True),
            ("access-control.redundant-internal", True),
        ]

    def test_unknown_format(self, write_swift):
        path = write_swift("let x = 5\n")

        result = runner.invoke(app, ["check", "--format", "yaml", str(path)])

        assert result.exit_code == 2
        assert "Unknown format" in result.output

    def test_nonexistent_path(self, temp_dir: Path):
        result = runner.invoke(app, ["check", str(temp_dir / "missing.swift")])

        assert result.exit_code == 2

    def test_line_length_option(self, write_swift):
        path = write_swift("let value = 12345\n")

        result = runner.invoke(app, ["check", "--line-length", "10", str(path)])

        assert result.exit_code == 0
        assert "[structure.line-length]" in result.stdout

    def test_sample_project(self, sample_project_path: Path):
        result = runner.invoke(app, ["check", "--jobs", "2", str(sample_project_path)])

        assert result.exit_code == 1
        assert "Generated.swift" not in result.stdout
        lines = [line for line in result.stdout.splitlines() if "ReportCard.swift" in line]
        assert [line.split(": ")[0].rsplit(":", 2)[1:] for line in lines] == [["1", "8"], ["2", "9"], ["2", "14"]]
        assert "2 file(s) checked, 3 violation(s) remaining" in result.stdout


class TestConfiguration:
    """Tests for --config and .swiftstyle.toml discovery."""

    def test_rule_disabled(self, write_swift, temp_dir: Path):
        path = write_swift("let x=5\n")
        config_file = temp_dir / "style.toml"
        config_file.write_text('[rules."spacing.operator"]\nenabled = false\n')

        result = runner.invoke(app, ["check", "--config", str(config_file), str(path)])

        assert result.exit_code == 0

    def test_severity_downgraded_to_warning(self, write_swift, temp_dir: Path):
        path = write_swift("let x=5\n")
        config_file = temp_dir / "style.toml"
        config_file.write_text('[categories.spacing]\nseverity = "warning"\n')

        result = runner.invoke(app, ["check", "--config", str(config_file), str(path)])

        assert result.exit_code == 0
        assert ":1:6: warning:" in result.stdout

    def test_default_config_discovered(self, write_swift, temp_dir: Path):
        path = write_swift("let x=5\n")
        (temp_dir / ".swiftstyle.toml").write_text('[rules."spacing.operator"]\nenabled = false\n')

        result = runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 0

    def test_unknown_rule_id(self, write_swift, temp_dir: Path):
        path = write_swift("let x = 5\n")
        config_file = temp_dir / "style.toml"
        config_file.write_text('[rules."bogus.rule"]\nenabled = true\n')

        result = runner.invoke(app, ["check", "--config", str(config_file), str(path)])

        assert result.exit_code == 2
        assert "bogus.rule" in result.output

    def test_invalid_toml(self, write_swift, temp_dir: Path):
        path = write_swift("let x = 5\n")
        config_file = temp_dir / "style.toml"
        config_file.write_text("[rules\n")

        result = runner.invoke(app, ["check", "--config", str(config_file), str(path)])

        assert result.exit_code == 2
        assert "Invalid TOML" in result.output


class TestRulesCommand:
    """Tests for 'swiftstyle rules'."""

    def test_json_catalogue(self):
        result = runner.invoke(app, ["rules", "--format", "json"])

        assert result.exit_code == 0
        rules = {rule["id"]: rule for rule in json.loads(result.stdout)}
        assert len(rules) == 20
        assert rules["optionals.force-unwrap"]["enabled"] is False
        assert rules["spacing.operator"]["fixable"] is True

    def test_table_catalogue(self):
        result = runner.invoke(app, ["rules"])

        assert result.exit_code == 0
        assert "Style rules" in result.stdout


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"swiftstyle v{__version__}" in result.stdout
