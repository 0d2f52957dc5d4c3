"""Ontolint - rule-based quality reports for OWL/RDF ontologies."""

__version__ = "0.1.0"
