"""Error taxonomy shared by every stage of a report run."""

from __future__ import annotations


class OntolintError(Exception):
    """Base class for all ontolint errors."""


class ConfigurationError(OntolintError):
    """Raised when a profile, rule set, or settings file is invalid.

    Fatal to the run: no partial report is produced.
    """


class ResourceAccessError(OntolintError):
    """Raised when a profile, query, or ontology cannot be read."""


class DataIntegrityError(OntolintError):
    """Raised for a malformed query result row (e.g. missing ``entity``).

    Recovered at the row level by the aggregator: the row is logged and
    skipped, the rest of the rule's rows are still aggregated.
    """
