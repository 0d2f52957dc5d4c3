"""The report: per-rule violations with their severity, plus summary counts."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from ontolint.config import SEVERITIES, normalize_severity
from ontolint.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ontolint.aggregator import Violation


@dataclass(frozen=True)
class RuleResult:
    """Violations found by one rule, at the rule's profile severity."""

    rule: str
    severity: str
    violations: tuple[Violation, ...] = ()


@dataclass(frozen=True)
class Report:
    """Immutable outcome of one validation run.

    ``rule_results`` is ordered by rule name.
    """

    rule_results: tuple[RuleResult, ...] = ()

    def results(self) -> Mapping[str, RuleResult]:
        """Return a read-only mapping of rule name -> :class:`RuleResult`."""
        return MappingProxyType({rr.rule: rr for rr in self.rule_results})

    def total_violations(self, level: str | None = None) -> int:
        """Count violations across all rules, or only rules at severity *level*."""
        if level is None:
            return sum(len(rr.violations) for rr in self.rule_results)
        wanted = normalize_severity(level)
        return sum(len(rr.violations) for rr in self.rule_results if rr.severity == wanted)

    def counts(self) -> dict[str, int]:
        """Return ``{"INFO": n, "WARN": n, "ERROR": n}``."""
        return {level: self.total_violations(level) for level in reversed(SEVERITIES)}

    @property
    def rules_evaluated(self) -> int:
        return len(self.rule_results)


def build_report(
    profile: Mapping[str, str],
    violations_by_rule: Mapping[str, Iterable[Violation]],
) -> Report:
    """Assemble a :class:`Report`, copying each rule's severity from *profile*.

    Raises ``ConfigurationError`` when a rule has no severity in *profile*.
    """
    results: list[RuleResult] = []
    for rule in sorted(violations_by_rule):
        if rule not in profile:
            msg = f"Rule '{rule}' has violations but no severity in the profile"
            raise ConfigurationError(msg)
        results.append(
            RuleResult(
                rule=rule,
                severity=normalize_severity(profile[rule]),
                violations=tuple(violations_by_rule[rule]),
            )
        )
    return Report(rule_results=tuple(results))
