"""Graph loading and rule query execution on top of rdflib."""

from __future__ import annotations

import logging
import xml.sax
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable, Protocol, TypeVar, overload

from rdflib import Graph
from rdflib.plugin import PluginException
from rdflib.util import guess_format

from ontolint.errors import ConfigurationError, ResourceAccessError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

Row = dict[str, "str | None"]
T = TypeVar("T")

# ---------------------------------------------------------------------------
# Ontology loading
# ---------------------------------------------------------------------------


def load_ontology(path: Path, fmt: str | None = None) -> Graph:
    """Parse the ontology at *path* into an rdflib graph.

    The serialization is guessed from the file extension when *fmt* is not
    given (``.owl`` and ``.rdf`` read as RDF/XML, ``.ttl`` as Turtle, ...).

    Raises ``ResourceAccessError`` when the file cannot be read or parsed.
    """
    fmt = fmt or guess_format(str(path))
    graph = Graph()
    try:
        graph.parse(str(path), format=fmt)
    except (OSError, ValueError, SyntaxError, PluginException, xml.sax.SAXException) as exc:
        msg = f"Cannot load ontology {path}: {exc}"
        raise ResourceAccessError(msg) from exc
    logger.debug("Loaded %d triples from %s (format=%s)", len(graph), path, fmt)
    return graph


# ---------------------------------------------------------------------------
# Query execution
# ---------------------------------------------------------------------------


class QueryEngine(Protocol):
    """Execute a query against a graph, yielding one mapping per solution."""

    def execute(self, graph: Graph, query_text: str) -> Iterable[Mapping[str, str | None]]:
        ...


class RdflibQueryEngine:
    """SPARQL execution through ``rdflib.Graph.query``.

    Rows are produced lazily.  Every projected variable appears in each row;
    unbound variables map to ``None`` and bound terms to their string form
    (full IRIs for resources, lexical form for literals).
    """

    def execute(self, graph: Graph, query_text: str) -> Iterator[Row]:
        result = graph.query(query_text)
        if result.type != "SELECT":
            msg = f"Rule queries must be SELECT queries, got {result.type}"
            raise ConfigurationError(msg)
        variables = [str(var) for var in result.vars or ()]
        for solution in result:
            yield {
                name: (str(term) if term is not None else None)
                for name, term in zip(variables, solution)
            }


def evaluate_rule(
    graph: Graph, query_text: str, engine: QueryEngine | None = None
) -> Iterable[Mapping[str, str | None]]:
    """Run one rule's query and return its (lazy) result rows."""
    engine = engine or RdflibQueryEngine()
    return engine.execute(graph, query_text)


RowCollector = Callable[[str, "Iterable[Mapping[str, str | None]]"], T]


@overload
def evaluate_rules(
    graph: Graph,
    queries: Mapping[str, str],
    *,
    engine: QueryEngine | None = ...,
    jobs: int = ...,
    collect: None = ...,
) -> dict[str, list[Row]]: ...


@overload
def evaluate_rules(
    graph: Graph,
    queries: Mapping[str, str],
    *,
    engine: QueryEngine | None = ...,
    jobs: int = ...,
    collect: RowCollector[T],
) -> dict[str, T]: ...


def evaluate_rules(
    graph: Graph,
    queries: Mapping[str, str],
    *,
    engine: QueryEngine | None = None,
    jobs: int = 1,
    collect: RowCollector[Any] | None = None,
) -> dict[str, Any]:
    """Evaluate every rule in *queries* and fold each rule's rows with *collect*.

    *collect* receives the rule name and its lazy row iterable; by default
    the rows are materialized as a list.  Rules are independent: with
    ``jobs > 1`` they run on a thread pool and this call returns only once
    every rule has finished.  With ``jobs == 1`` rules run one after another
    in sorted name order.  The returned dict is keyed in sorted name order
    either way.
    """
    engine = engine or RdflibQueryEngine()
    rule_names = sorted(queries)

    def _run(rule: str) -> Any:
        logger.debug("Evaluating rule %s", rule)
        rows = evaluate_rule(graph, queries[rule], engine)
        if collect is None:
            return [dict(row) for row in rows]
        return collect(rule, rows)

    if jobs <= 1 or len(rule_names) <= 1:
        return {rule: _run(rule) for rule in rule_names}

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = {rule: executor.submit(_run, rule) for rule in rule_names}
        # result() re-raises the first failure in rule-name order.
        return {rule: futures[rule].result() for rule in rule_names}
