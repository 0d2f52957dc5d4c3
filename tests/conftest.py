"""Shared test fixtures for Ontolint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from ontolint.resources import DirectoryResourceLister

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from rdflib import Graph


SAMPLE_TTL = """\
@prefix : <http://example.org/onto#> .
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix obo: <http://purl.obolibrary.org/obo/> .
@prefix dcterms: <http://purl.org/dc/terms/> .

<http://example.org/onto> a owl:Ontology ;
    dcterms:description "Example ontology" .

:Animal a owl:Class ;
    rdfs:label "animal" ;
    obo:IAO_0000115 "A living organism." .

:Dog a owl:Class ;
    rdfs:subClassOf :Animal ;
    rdfs:label "dog" , "hound" .

:Cat a owl:Class ;
    rdfs:subClassOf :Animal .

:Hound a owl:Class ;
    rdfs:subClassOf :Animal ;
    rdfs:label "hound" ;
    obo:IAO_0000115 "A hunting dog." .
"""

EX = "http://example.org/onto#"

# Unlabelled classes, including one from the OWL vocabulary itself.
UNLABELLED_QUERY = """\
PREFIX owl: <http://www.w3.org/2002/07/owl#>
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
SELECT ?entity WHERE {
  ?entity a owl:Class .
  FILTER NOT EXISTS { ?entity rdfs:label ?l }
}
"""

LABELS_QUERY = """\
PREFIX rdfs: <http://www.w3.org/2000/01/rdf-schema#>
SELECT ?entity ?property ?value WHERE {
  VALUES ?property { rdfs:label }
  ?entity ?property ?value .
}
"""


class FakeEngine:
    """Query engine returning canned rows keyed by query text."""

    def __init__(self, rows_by_query: Mapping[str, list[dict[str, str | None]]]) -> None:
        self.rows_by_query = rows_by_query
        self.calls: list[str] = []

    def execute(self, graph: Graph, query_text: str) -> Iterable[Mapping[str, str | None]]:
        self.calls.append(query_text)
        return iter(self.rows_by_query.get(query_text, []))


@pytest.fixture()
def ontology_path(tmp_path: Path) -> Path:
    """Write the sample Turtle ontology and return its path."""
    path = tmp_path / "sample.ttl"
    path.write_text(SAMPLE_TTL, encoding="utf-8")
    return path


@pytest.fixture()
def resource_root(tmp_path: Path) -> Path:
    """Create a loose resource tree with two queries and a default profile."""
    root = tmp_path / "resources"
    (root / "queries").mkdir(parents=True)
    (root / "profiles").mkdir()
    (root / "queries" / "unlabelled.rq").write_text(UNLABELLED_QUERY, encoding="utf-8")
    (root / "queries" / "labels.rq").write_text(LABELS_QUERY, encoding="utf-8")
    (root / "profiles" / "default.txt").write_text(
        "ERROR - unlabelled\nINFO - labels\n", encoding="utf-8"
    )
    return root


@pytest.fixture()
def lister(resource_root: Path) -> DirectoryResourceLister:
    return DirectoryResourceLister(resource_root)
