"""Resolve rule names to SPARQL query text.

A rule name is routed by syntax alone: names starting with ``file://`` are
user queries read from that file, every other name is a bundled query
looked up by file name (minus ``.rq``) under ``resources/queries/``.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING
from urllib.parse import urlparse
from urllib.request import url2pathname

from ontolint.config import QUERY_DIR, QUERY_SUFFIX, USER_RULE_PREFIX
from ontolint.errors import ConfigurationError, ResourceAccessError
from ontolint.resources import default_lister

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ontolint.resources import ResourceLister

logger = logging.getLogger(__name__)


def is_user_rule(rule: str) -> bool:
    """Return True if *rule* names a user query file rather than a bundled rule."""
    return rule.startswith(USER_RULE_PREFIX)


def uri_to_path(uri: str) -> Path:
    """Convert a ``file://`` URI to a local path."""
    parsed = urlparse(uri)
    if parsed.netloc not in ("", "localhost"):
        msg = f"Cannot read query {uri}: only local file URIs are supported"
        raise ResourceAccessError(msg)
    return Path(url2pathname(parsed.path))


def _rule_id(entry: str) -> str:
    """``queries/missing_label.rq`` -> ``missing_label``."""
    return PurePosixPath(entry).stem


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


def load_user_queries(rules: Iterable[str]) -> dict[str, str]:
    """Read each ``file://`` rule's query file verbatim.

    Raises ``ResourceAccessError`` when a file cannot be read.
    """
    queries: dict[str, str] = {}
    for rule in rules:
        path = uri_to_path(rule)
        try:
            with path.open("r", encoding="utf-8") as fh:
                queries[rule] = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read query file {path}: {exc}"
            raise ResourceAccessError(msg) from exc
    return queries


# ---------------------------------------------------------------------------
# Bundled queries
# ---------------------------------------------------------------------------


def available_rules(lister: ResourceLister | None = None) -> list[str]:
    """Return the sorted identifiers of every bundled rule query."""
    lister = lister or default_lister()
    return sorted(
        _rule_id(entry)
        for entry in lister.list_entries(QUERY_DIR)
        if entry.endswith(QUERY_SUFFIX)
    )


def load_default_queries(
    rules: Iterable[str] | None,
    lister: ResourceLister | None = None,
) -> dict[str, str]:
    """Read the bundled queries whose identifier is in *rules*.

    When *rules* is ``None`` or empty, every bundled query is returned.

    Raises ``ResourceAccessError`` when the bundled collection cannot be
    enumerated or holds no queries.
    """
    lister = lister or default_lister()
    wanted = set(rules) if rules else None

    entries = [e for e in lister.list_entries(QUERY_DIR) if e.endswith(QUERY_SUFFIX)]
    if not entries:
        msg = "Cannot access report query files: no bundled queries found"
        raise ResourceAccessError(msg)

    queries: dict[str, str] = {}
    for entry in entries:
        rule = _rule_id(entry)
        if wanted is None or rule in wanted:
            queries[rule] = lister.read_text(entry)
    return queries


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_queries(
    rules: Iterable[str],
    *,
    lister: ResourceLister | None = None,
) -> dict[str, str]:
    """Return a rule -> query text mapping covering exactly *rules*.

    Raises
    ------
    ConfigurationError
        When a requested rule has no query text after resolution.
    ResourceAccessError
        When a user query file or the bundled collection cannot be read.
    """
    requested = set(rules)
    user_rules = {r for r in requested if is_user_rule(r)}
    default_rules = requested - user_rules

    queries: dict[str, str] = {}
    if default_rules:
        queries.update(load_default_queries(default_rules, lister))
    queries.update(load_user_queries(sorted(user_rules)))

    missing = sorted(requested - queries.keys())
    if missing:
        msg = f"No query found for rule(s): {', '.join(missing)}"
        raise ConfigurationError(msg)

    logger.debug(
        "Resolved %d bundled and %d user queries", len(default_rules), len(user_rules)
    )
    return queries
