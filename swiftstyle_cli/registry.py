"""Rule registry: the validated, immutable set of rules for one run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .config_manager import EngineOptions, RuleOverride, StyleConfig
from .errors import ConfigError
from .models import Severity
from .rules import Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveRule:
    """A rule with its effective severity and parameters resolved."""

    rule: Rule
    severity: Severity
    params: Mapping[str, Any]

    @property
    def id(self) -> str:
        return self.rule.id


class RuleRegistry:
    """Immutable view over enabled rules, ordered by rule id.

    Built once by :func:`load` and shared read-only by every worker.
    """

    def __init__(self, active: Iterable[ActiveRule], catalogue: Iterable[Tuple[ActiveRule, bool]],
                 options: EngineOptions):
        self._active: Tuple[ActiveRule, ...] = tuple(sorted(active, key=lambda a: a.id))
        self._by_id: Dict[str, ActiveRule] = {a.id: a for a in self._active}
        self._catalogue = tuple(sorted(catalogue, key=lambda item: item[0].id))
        self.options = options

    def __iter__(self):
        return iter(self._active)

    def __len__(self) -> int:
        return len(self._active)

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._by_id

    def get(self, rule_id: str) -> Optional[ActiveRule]:
        return self._by_id.get(rule_id)

    @property
    def ids(self) -> List[str]:
        return [a.id for a in self._active]

    @property
    def catalogue(self) -> Tuple[Tuple[ActiveRule, bool], ...]:
        """Every known rule with its effective settings and whether it is enabled."""
        return self._catalogue


def load(builtins: Iterable[Rule], overrides: Optional[StyleConfig] = None) -> RuleRegistry:
    """Merge rule defaults with configuration overrides.

    Precedence, lowest first: rule default, category override, rule override.

    Raises:
        ConfigError: duplicate rule ids, or overrides naming unknown rules,
            unknown categories, unknown parameters, or mistyped parameter values.
    """
    overrides = overrides or StyleConfig()
    rules: Dict[str, Rule] = {}
    for rule in builtins:
        if rule.id in rules:
            raise ConfigError(f"Duplicate rule id: {rule.id}")
        rules[rule.id] = rule

    unknown_rules = sorted(set(overrides.rules) - set(rules))
    if unknown_rules:
        raise ConfigError(f"Unknown rule id(s) in configuration: {', '.join(unknown_rules)}")
    categories = {rule.category for rule in rules.values()}
    unknown_categories = sorted(set(overrides.categories) - categories)
    if unknown_categories:
        raise ConfigError(f"Unknown categor(y/ies) in configuration: {', '.join(unknown_categories)}")

    active: List[ActiveRule] = []
    catalogue: List[Tuple[ActiveRule, bool]] = []
    for rule in rules.values():
        enabled = rule.enabled_by_default
        severity: Severity = rule.severity
        params: Dict[str, Any] = dict(rule.parameters)
        for layer in (overrides.categories.get(rule.category), overrides.rules.get(rule.id)):
            if layer is None:
                continue
            enabled, severity = _apply_layer(rule, layer, enabled, severity, params)
        entry = ActiveRule(rule=rule, severity=severity, params=params)
        catalogue.append((entry, enabled))
        if enabled:
            active.append(entry)

    logger.debug("Loaded %d rule(s), %d enabled", len(rules), len(active))
    return RuleRegistry(active, catalogue, overrides.options)


def _apply_layer(
    rule: Rule,
    layer: RuleOverride,
    enabled: bool,
    severity: Severity,
    params: Dict[str, Any],
) -> Tuple[bool, Severity]:
    if layer.enabled is not None:
        enabled = layer.enabled
    if layer.severity is not None:
        severity = layer.severity  # type: ignore[assignment]
    for name, value in layer.parameters.items():
        if name not in rule.parameters:
            raise ConfigError(f"Rule '{rule.id}' has no parameter '{name}'")
        default = rule.parameters[name]
        if isinstance(value, bool) != isinstance(default, bool) or not isinstance(value, type(default)):
            raise ConfigError(
                f"Parameter '{name}' of rule '{rule.id}' must be {type(default).__name__}, got {value!r}"
            )
        if isinstance(value, int) and not isinstance(value, bool) and value < 0:
            raise ConfigError(f"Parameter '{name}' of rule '{rule.id}' must be >= 0, got {value}")
        params[name] = value
    return enabled, severity
