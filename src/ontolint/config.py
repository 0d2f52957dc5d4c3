"""Process-wide constants and the optional ``ontolint.yml`` settings file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import yaml

from ontolint.errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

INFO = "INFO"
WARN = "WARN"
ERROR = "ERROR"

# Ordered most to least severe.
SEVERITIES: tuple[str, ...] = (ERROR, WARN, INFO)
VALID_SEVERITIES: frozenset[str] = frozenset(SEVERITIES)

# Bundled resources, relative to the ``ontolint/resources`` package directory.
QUERY_DIR = "queries"
QUERY_SUFFIX = ".rq"
DEFAULT_PROFILE = "profiles/default.txt"

# Rule names with this prefix are user query files; all others are bundled.
USER_RULE_PREFIX = "file://"

# Schema vocabulary markers: RDFS and OWL terms are never reported.
EXCLUDED_NAMESPACES: tuple[str, ...] = ("/rdf-schema#", "/owl#")

DEFAULT_SETTINGS_FILE = "ontolint.yml"
VALID_FORMATS: frozenset[str] = frozenset({"tsv", "json", "rich"})
FAIL_ON_NONE = "NONE"


def normalize_severity(token: object) -> str:
    """Return *token* as an uppercase severity or raise ConfigurationError."""
    level = str(token).strip().upper()
    if level not in VALID_SEVERITIES:
        msg = f"'{str(token).strip()}' is not a valid reporting level"
        raise ConfigurationError(msg)
    return level


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    """Report defaults, overridable from ``ontolint.yml`` and the command line."""

    output_format: str = "tsv"
    fail_on: str = ERROR  # a severity, or FAIL_ON_NONE
    jobs: int = 1
    exclude_namespaces: tuple[str, ...] = EXCLUDED_NAMESPACES


def load_settings(config_path: Path | None) -> Settings:
    """Load report settings from the ``report`` section of a YAML file.

    Returns defaults when *config_path* is ``None`` or the file has no
    ``report`` section.  Extra ``exclude_namespaces`` entries are added to
    the built-in RDFS/OWL markers, never replacing them.

    Raises
    ------
    ConfigurationError
        When the file cannot be read or parsed, or holds an invalid value.
    """
    if config_path is None:
        return Settings()

    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        msg = f"Cannot read settings file {config_path}: {exc}"
        raise ConfigurationError(msg) from exc

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        msg = f"{config_path.name} must be a YAML mapping"
        raise ConfigurationError(msg)

    section = data.get("report")
    if section is None:
        return Settings()
    if not isinstance(section, dict):
        msg = f"{config_path.name}: 'report' must be a mapping"
        raise ConfigurationError(msg)

    defaults = Settings()

    def _get(key: str, default: object) -> object:
        # An empty key ("fail_on:") reads as null and keeps the default.
        value = section.get(key)
        return default if value is None else value

    output_format = str(_get("format", defaults.output_format)).lower()
    if output_format not in VALID_FORMATS:
        msg = (
            f"{config_path.name}: invalid format '{output_format}', "
            f"must be one of {sorted(VALID_FORMATS)}"
        )
        raise ConfigurationError(msg)

    fail_on_raw = str(_get("fail_on", defaults.fail_on))
    fail_on = fail_on_raw.strip().upper()
    if fail_on != FAIL_ON_NONE:
        fail_on = normalize_severity(fail_on_raw)

    jobs_raw = _get("jobs", defaults.jobs)
    if isinstance(jobs_raw, bool) or not isinstance(jobs_raw, int) or jobs_raw < 1:
        msg = f"{config_path.name}: 'jobs' must be a positive integer"
        raise ConfigurationError(msg)

    extra = _get("exclude_namespaces", [])
    if isinstance(extra, str):
        extra = [extra]
    if not isinstance(extra, list):
        msg = f"{config_path.name}: 'exclude_namespaces' must be a list"
        raise ConfigurationError(msg)
    excluded = EXCLUDED_NAMESPACES + tuple(
        str(ns) for ns in extra if str(ns) not in EXCLUDED_NAMESPACES
    )

    logger.debug("Loaded settings from %s", config_path)
    return Settings(
        output_format=output_format,
        fail_on=fail_on,
        jobs=jobs_raw,
        exclude_namespaces=excluded,
    )
