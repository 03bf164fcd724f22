"""Pytest configuration and fixtures for swiftstyle tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator, List

import pytest

from swiftstyle_cli import engine
from swiftstyle_cli.builtin_rules import BUILTIN_RULES
from swiftstyle_cli.config_manager import EngineOptions, RuleOverride, StyleConfig
from swiftstyle_cli.fixer import FixOutcome, fix_source
from swiftstyle_cli.models import Violation
from swiftstyle_cli.parser import SwiftTokenizer
from swiftstyle_cli.registry import RuleRegistry, load
from swiftstyle_cli.source_model import SourceModel


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the read-only sample Swift project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def sample_project_copy(temp_dir: Path, sample_project_path: Path) -> Path:
    """A writable copy of the sample project."""
    target = temp_dir / "sample_project"
    shutil.copytree(sample_project_path, target)
    return target


@pytest.fixture
def clean_swift_code(sample_project_path: Path) -> str:
    """Swift source that conforms to every default rule."""
    return (sample_project_path / "Sources" / "App" / "Account.swift").read_text(encoding="utf-8")


@pytest.fixture
def tokenizer() -> SwiftTokenizer:
    return SwiftTokenizer()


@pytest.fixture
def make_model(tokenizer: SwiftTokenizer) -> Callable[..., SourceModel]:
    def _make(text: str, path: str = "test.swift") -> SourceModel:
        return SourceModel.build(path, text, tokenizer)
    return _make


@pytest.fixture
def make_registry() -> Callable[..., RuleRegistry]:
    """Registry restricted to the given rule ids (all built-ins when none are given).

    Named rules are force-enabled; keyword arguments become engine options.
    """
    def _make(*rule_ids: str, rules=BUILTIN_RULES, **options) -> RuleRegistry:
        selected = [rule for rule in rules if not rule_ids or rule.id in rule_ids]
        overrides = StyleConfig(
            options=EngineOptions(**options),
            rules={rule_id: RuleOverride(enabled=True) for rule_id in rule_ids},
        )
        return load(selected, overrides)
    return _make


@pytest.fixture
def check_source(make_model, make_registry) -> Callable[..., List[Violation]]:
    def _check(text: str, *rule_ids: str, **options) -> List[Violation]:
        return engine.check(make_model(text), make_registry(*rule_ids, **options))
    return _check


@pytest.fixture
def fix_text(tokenizer, make_registry) -> Callable[..., FixOutcome]:
    def _fix(text: str, *rule_ids: str, **options) -> FixOutcome:
        return fix_source("test.swift", text, make_registry(*rule_ids, **options), tokenizer)
    return _fix


@pytest.fixture
def write_swift(temp_dir: Path) -> Callable[[str, str], Path]:
    """Write *text* to a Swift file inside the temp directory."""
    def _write(text: str, name: str = "main.swift") -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return path
    return _write
