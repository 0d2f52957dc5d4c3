"""Report orchestrator: profile, queries, evaluation, aggregation, formatting."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rdflib import Graph

from ontolint.aggregator import aggregate_violations
from ontolint.config import ERROR, INFO, SEVERITIES, WARN, Settings
from ontolint.engine import evaluate_rules, load_ontology
from ontolint.profile import load_profile
from ontolint.queries import resolve_queries
from ontolint.report import Report, RuleResult, build_report

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from ontolint.aggregator import Violation
    from ontolint.engine import QueryEngine
    from ontolint.resources import ResourceLister

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class ReportResult:
    """Result of a report run."""

    report: Report = field(default_factory=Report)
    rules_evaluated: int = 0
    triples: int = 0
    elapsed_ms: float = 0.0


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run_report(
    ontology: Path | Graph,
    *,
    profile_path: Path | None = None,
    settings: Settings | None = None,
    lister: ResourceLister | None = None,
    engine: QueryEngine | None = None,
    jobs: int | None = None,
) -> ReportResult:
    """Validate *ontology* against the rules of a profile.

    Parameters
    ----------
    ontology:
        Path to an ontology file, or an already loaded ``rdflib.Graph``.
    profile_path:
        Optional profile file.  When *None* the bundled default profile is used.
    settings:
        Report settings (excluded namespaces, default job count).
    lister:
        Source of bundled queries and the default profile.
    engine:
        Query engine; rdflib SPARQL when *None*.
    jobs:
        Number of rules evaluated concurrently; overrides ``settings.jobs``.

    Returns
    -------
    ReportResult
        The report plus run statistics.

    Raises
    ------
    ConfigurationError
        On an invalid profile or a rule without a query.
    ResourceAccessError
        When the profile, a query, or the ontology cannot be read.
    """
    start = time.monotonic()
    settings = settings or Settings()

    # Step a: Rules and severities.
    profile = load_profile(profile_path, lister=lister)

    # Step b: Query text for exactly those rules.
    queries = resolve_queries(profile.keys(), lister=lister)

    # Step c: Graph.
    graph = ontology if isinstance(ontology, Graph) else load_ontology(ontology)

    # Step d: Evaluate and aggregate, one independent fold per rule.
    def _aggregate(rule: str, rows: Iterable[Mapping[str, str | None]]) -> list[Violation]:
        violations = aggregate_violations(rows, rule=rule, excluded=settings.exclude_namespaces)
        logger.debug("Rule %s: %d violations", rule, len(violations))
        return violations

    violations_by_rule = evaluate_rules(
        graph,
        queries,
        engine=engine,
        jobs=jobs if jobs is not None else settings.jobs,
        collect=_aggregate,
    )

    # Step e: Report.
    report = build_report(profile, violations_by_rule)

    elapsed = (time.monotonic() - start) * 1000
    return ReportResult(
        report=report,
        rules_evaluated=report.rules_evaluated,
        triples=len(graph),
        elapsed_ms=elapsed,
    )


def fails(report: Report, fail_on: str) -> bool:
    """Return True if *report* holds a violation at or above severity *fail_on*.

    *fail_on* is a severity, or ``"NONE"`` to never fail.
    """
    fail_on = fail_on.upper()
    if fail_on not in SEVERITIES:
        return False
    threshold = SEVERITIES.index(fail_on)
    return any(report.total_violations(level) for level in SEVERITIES[: threshold + 1])


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def _ordered_results(report: Report) -> list[RuleResult]:
    """Rule results ordered ERROR, WARN, INFO, then by rule name."""
    return sorted(report.rule_results, key=lambda rr: (SEVERITIES.index(rr.severity), rr.rule))


def _statement_summary(violation: Violation) -> str:
    parts: list[str] = []
    for st in violation.statements:
        parts.append(st.property if st.value is None else f"{st.property} {st.value}")
    return "; ".join(parts)


def _tsv_cell(value: str | None) -> str:
    if value is None:
        return ""
    return value.replace("\t", " ").replace("\r", " ").replace("\n", " ")


def format_summary(report: Report) -> str:
    """Format the violation count and per-severity breakdown.

    Example output::

        Violations: 3
        -----------------
        INFO:       1
        WARN:       0
        ERROR:      2
    """
    total = report.total_violations()
    if not total:
        return "No violations found."
    return "\n".join(
        [
            f"Violations: {total}",
            "-----------------",
            f"INFO:       {report.total_violations(INFO)}",
            f"WARN:       {report.total_violations(WARN)}",
            f"ERROR:      {report.total_violations(ERROR)}",
        ]
    )


def format_tsv(result: ReportResult) -> str:
    """Format a ReportResult as tab-separated values.

    Columns: ``Level``, ``Rule Name``, ``Subject``, ``Property``, ``Value``.
    One line per statement; a violation without statements gets a single
    line with empty property and value.  Only the header is emitted when
    there are no violations.
    """
    lines = ["Level\tRule Name\tSubject\tProperty\tValue"]
    for rr in _ordered_results(result.report):
        for v in rr.violations:
            prefix = f"{rr.severity}\t{_tsv_cell(rr.rule)}\t{_tsv_cell(v.entity)}"
            if not v.statements:
                lines.append(f"{prefix}\t\t")
                continue
            for st in v.statements:
                lines.append(f"{prefix}\t{_tsv_cell(st.property)}\t{_tsv_cell(st.value)}")
    return "\n".join(lines)


def format_json(result: ReportResult) -> str:
    """Format a ReportResult as structured JSON.

    Returns a JSON string with ``violations`` array and ``summary`` object.
    """
    violations_list: list[dict[str, object]] = []
    for rr in _ordered_results(result.report):
        for v in rr.violations:
            violations_list.append(
                {
                    "rule": rr.rule,
                    "level": rr.severity,
                    "entity": v.entity,
                    "statements": [
                        {"property": st.property, "value": st.value} for st in v.statements
                    ],
                }
            )

    output: dict[str, object] = {
        "violations": violations_list,
        "summary": {
            "rules_evaluated": result.rules_evaluated,
            "violations_count": result.report.total_violations(),
            "counts": result.report.counts(),
            "triples": result.triples,
            "elapsed_ms": result.elapsed_ms,
        },
    }

    return json.dumps(output, indent=2)


_LEVEL_STYLES: dict[str, str] = {ERROR: "bold red", WARN: "yellow", INFO: "cyan"}


def format_rich(result: ReportResult) -> str:
    """Format a ReportResult as a Rich table for terminal display.

    One row per violation (level, rule, entity, statements), followed by
    the summary block.
    """
    from io import StringIO

    from rich.console import Console
    from rich.table import Table
    from rich.text import Text

    buf = StringIO()
    console = Console(file=buf, width=120)

    report = result.report
    if report.total_violations():
        table = Table(show_lines=False)
        table.add_column("Level", no_wrap=True)
        table.add_column("Rule", style="bold", no_wrap=True)
        table.add_column("Entity", overflow="fold")
        table.add_column("Statements", overflow="fold")

        for rr in _ordered_results(report):
            for v in rr.violations:
                table.add_row(
                    Text(rr.severity, style=_LEVEL_STYLES.get(rr.severity, "")),
                    rr.rule,
                    v.entity,
                    _statement_summary(v),
                )
        console.print(table)
        console.print()

    console.print(Text(format_summary(report)))
    elapsed_s = result.elapsed_ms / 1000
    console.print(
        f"{result.rules_evaluated} rules evaluated on {result.triples} triples "
        f"({elapsed_s:.1f}s)",
        highlight=False,
    )
    return buf.getvalue().rstrip("\n")


FORMATTERS = {
    "tsv": format_tsv,
    "json": format_json,
    "rich": format_rich,
}
