"""Tests for ontolint.report: report assembly and severity counts."""

from __future__ import annotations

import pytest

from ontolint.aggregator import Statement, Violation, aggregate_violations
from ontolint.errors import ConfigurationError
from ontolint.report import Report, RuleResult, build_report


def _violations(*entities: str) -> list[Violation]:
    return [Violation(entity=e) for e in entities]


@pytest.fixture()
def report() -> Report:
    profile = {"a": "ERROR", "b": "WARN", "c": "ERROR", "d": "INFO"}
    return build_report(
        profile,
        {
            "a": _violations("ex:1", "ex:2"),
            "b": _violations("ex:3"),
            "c": _violations("ex:4", "ex:5", "ex:6"),
            "d": [],
        },
    )


class TestBuildReport:
    def test_label_missing_scenario(self) -> None:
        rows = [{"entity": "ex:A", "property": "rdfs:label"}]
        report = build_report(
            {"label-missing": "ERROR"}, {"label-missing": aggregate_violations(rows)}
        )
        results = report.results()
        assert list(results) == ["label-missing"]
        (violation,) = results["label-missing"].violations
        assert violation.entity == "ex:A"
        assert violation.statements == (Statement("rdfs:label", None),)
        assert report.total_violations() == 1
        assert report.total_violations("ERROR") == 1
        assert report.total_violations("WARN") == 0

    def test_severity_copied_from_profile(self, report: Report) -> None:
        assert {r: rr.severity for r, rr in report.results().items()} == {
            "a": "ERROR",
            "b": "WARN",
            "c": "ERROR",
            "d": "INFO",
        }

    def test_rules_sorted(self) -> None:
        report = build_report({"z": "INFO", "m": "WARN"}, {"z": [], "m": []})
        assert [rr.rule for rr in report.rule_results] == ["m", "z"]

    def test_rule_missing_from_profile_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="orphan"):
            build_report({"a": "ERROR"}, {"a": [], "orphan": []})

    def test_lowercase_profile_severity_normalized(self) -> None:
        report = build_report({"a": "warn"}, {"a": _violations("ex:1")})
        assert report.total_violations("WARN") == 1


class TestCounts:
    def test_total(self, report: Report) -> None:
        assert report.total_violations() == 6
        assert report.total_violations() == sum(
            len(rr.violations) for rr in report.rule_results
        )

    @pytest.mark.parametrize(
        ("level", "expected"), [("ERROR", 5), ("WARN", 1), ("INFO", 0), ("error", 5)]
    )
    def test_by_level(self, report: Report, level: str, expected: int) -> None:
        assert report.total_violations(level) == expected

    def test_levels_sum_to_total(self, report: Report) -> None:
        counts = report.counts()
        assert counts == {"INFO": 0, "WARN": 1, "ERROR": 5}
        assert sum(counts.values()) == report.total_violations()

    def test_invalid_level_raises(self, report: Report) -> None:
        with pytest.raises(ConfigurationError):
            report.total_violations("FATAL")

    def test_empty_report(self) -> None:
        report = build_report({"a": "ERROR"}, {"a": []})
        assert report.total_violations() == 0
        assert report.counts() == {"INFO": 0, "WARN": 0, "ERROR": 0}


class TestImmutability:
    def test_results_mapping_read_only(self, report: Report) -> None:
        with pytest.raises(TypeError):
            report.results()["x"] = RuleResult(rule="x", severity="INFO")  # type: ignore[index]

    def test_frozen(self, report: Report) -> None:
        with pytest.raises(AttributeError):
            report.rule_results = ()  # type: ignore[misc]

    def test_input_lists_copied(self) -> None:
        violations = _violations("ex:1")
        report = build_report({"a": "ERROR"}, {"a": violations})
        violations.append(Violation(entity="ex:2"))
        assert report.total_violations() == 1
