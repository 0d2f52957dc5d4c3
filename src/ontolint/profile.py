"""Report profiles: which rules run, and at which severity."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from ontolint.config import DEFAULT_PROFILE, normalize_severity
from ontolint.errors import ConfigurationError, ResourceAccessError
from ontolint.resources import default_lister

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from ontolint.resources import ResourceLister

logger = logging.getLogger(__name__)


def parse_profile(text: str, *, source: str = "<profile>") -> Mapping[str, str]:
    """Parse profile *text* into a read-only rule -> severity mapping.

    Each line reads ``<severity> - <rule name>``.  The line is split on the
    first ``-`` only, so rule names (and ``file://`` paths) may contain
    hyphens.  Blank lines and ``#`` comments are ignored.  A rule listed
    twice keeps the last severity.

    Raises ``ConfigurationError`` on a malformed line or an unknown severity.
    """
    profile: dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        level_raw, sep, rule_raw = line.partition("-")
        rule = rule_raw.strip()
        if not sep or not level_raw.strip() or not rule:
            msg = f"{source}:{lineno}: expected '<LEVEL> - <rule>', got '{line}'"
            raise ConfigurationError(msg)

        try:
            level = normalize_severity(level_raw)
        except ConfigurationError as exc:
            msg = f"{source}:{lineno}: {exc}"
            raise ConfigurationError(msg) from exc

        if rule in profile and profile[rule] != level:
            logger.debug(
                "%s:%d: rule %s overridden from %s to %s",
                source, lineno, rule, profile[rule], level,
            )
        profile[rule] = level

    return MappingProxyType(profile)


def load_profile(
    path: Path | None = None,
    *,
    lister: ResourceLister | None = None,
) -> Mapping[str, str]:
    """Load a profile from *path*, or the bundled default profile when ``None``.

    Raises
    ------
    ResourceAccessError
        When the profile file cannot be read.
    ConfigurationError
        When a line is malformed or names an unknown severity.
    """
    if path is None:
        lister = lister or default_lister()
        text = lister.read_text(DEFAULT_PROFILE)
        source = DEFAULT_PROFILE
    else:
        try:
            with path.open("r", encoding="utf-8") as fh:
                text = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read profile {path}: {exc}"
            raise ResourceAccessError(msg) from exc
        source = str(path)

    profile = parse_profile(text, source=source)
    logger.debug("Loaded %d rules from %s", len(profile), source)
    return profile
