"""Configuration manager for swiftstyle using TOML files.

Reads ``.swiftstyle.toml`` (or an explicit ``--config`` path) into immutable
option and override values. Structural problems (unknown keys, wrong types,
bad severities) raise :class:`ConfigError` here; references to rule ids and
categories are validated later against the rule set in ``registry.load``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import toml

from . import config
from .errors import ConfigError
from .models import SEVERITIES

logger = logging.getLogger(__name__)

TOP_LEVEL_KEYS = {"options", "rules", "categories"}
OVERRIDE_KEYS = {"enabled", "severity", "parameters"}


@dataclass(frozen=True)
class EngineOptions:
    """Global knobs shared by every rule and pass."""

    max_fix_iterations: int = config.DEFAULT_MAX_FIX_ITERATIONS
    line_length: int = config.DEFAULT_LINE_LENGTH
    indent_width: int = config.DEFAULT_INDENT_WIDTH
    jobs: int = config.DEFAULT_JOBS

    def with_overrides(self, **values: Optional[int]) -> "EngineOptions":
        """Return a copy with every non-None value in *values* applied."""
        changes = {key: value for key, value in values.items() if value is not None}
        return dataclasses.replace(self, **changes) if changes else self


@dataclass(frozen=True)
class RuleOverride:
    enabled: Optional[bool] = None
    severity: Optional[str] = None
    parameters: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StyleConfig:
    options: EngineOptions = field(default_factory=EngineOptions)
    rules: Mapping[str, RuleOverride] = field(default_factory=dict)
    categories: Mapping[str, RuleOverride] = field(default_factory=dict)
    source: Optional[str] = None


_OPTION_MINIMUMS = {
    "max_fix_iterations": 1,
    "line_length": 1,
    "indent_width": 1,
    "jobs": 0,
}


def load_config(path: Optional[Path] = None) -> StyleConfig:
    """Load configuration from *path*, or from the default location.

    Returns defaults when no file is given and none is discovered.
    """
    if path is None:
        path = config.default_config_path()
        if path is None:
            logger.debug("No %s found; using defaults", config.CONFIG_FILENAME)
            return StyleConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = toml.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}") from None
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc

    logger.info("Loaded configuration from %s", path)
    return parse_config(data, source=str(path))


def parse_config(data: Mapping[str, Any], source: Optional[str] = None) -> StyleConfig:
    """Validate a decoded configuration mapping."""
    _reject_unknown(data, TOP_LEVEL_KEYS, "configuration")

    options = _parse_options(_table(data, "options", "configuration"))
    rules = {
        rule_id: _parse_override(value, f"rules.{rule_id}")
        for rule_id, value in _table(data, "rules", "configuration").items()
    }
    categories = {
        name: _parse_override(value, f"categories.{name}")
        for name, value in _table(data, "categories", "configuration").items()
    }
    return StyleConfig(options=options, rules=rules, categories=categories, source=source)


def _table(data: Mapping[str, Any], key: str, where: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{key}' in {where} must be a table")
    return value


def _reject_unknown(data: Mapping[str, Any], allowed: set, where: str) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigError(f"Unknown key(s) in {where}: {', '.join(unknown)}")


def _parse_options(data: Mapping[str, Any]) -> EngineOptions:
    _reject_unknown(data, set(_OPTION_MINIMUMS), "options")
    values: Dict[str, int] = {}
    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"options.{key} must be an integer, got {value!r}")
        if value < _OPTION_MINIMUMS[key]:
            raise ConfigError(f"options.{key} must be >= {_OPTION_MINIMUMS[key]}, got {value}")
        values[key] = value
    return EngineOptions(**values)


def _parse_override(data: Any, where: str) -> RuleOverride:
    if not isinstance(data, Mapping):
        raise ConfigError(f"'{where}' must be a table")
    _reject_unknown(data, OVERRIDE_KEYS, where)

    enabled = data.get("enabled")
    if enabled is not None and not isinstance(enabled, bool):
        raise ConfigError(f"{where}.enabled must be true or false, got {enabled!r}")

    severity = data.get("severity")
    if severity is not None and severity not in SEVERITIES:
        raise ConfigError(f"{where}.severity must be one of {', '.join(SEVERITIES)}, got {severity!r}")

    parameters = data.get("parameters", {})
    if not isinstance(parameters, Mapping):
        raise ConfigError(f"{where}.parameters must be a table")

    return RuleOverride(enabled=enabled, severity=severity, parameters=dict(parameters))
