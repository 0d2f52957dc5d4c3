"""Fold a rule's raw query rows into one violation per entity."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ontolint.config import EXCLUDED_NAMESPACES
from ontolint.errors import DataIntegrityError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

ENTITY = "entity"
PROPERTY = "property"
VALUE = "value"


@dataclass(frozen=True)
class Statement:
    """A (property, value) pair recorded against a violating entity."""

    property: str
    value: str | None = None


@dataclass(frozen=True)
class Violation:
    """One entity's aggregated evidence of breaking one rule."""

    entity: str
    statements: tuple[Statement, ...] = ()


def is_excluded(entity: str, excluded: Iterable[str] = EXCLUDED_NAMESPACES) -> bool:
    """Return True if *entity* belongs to an excluded schema vocabulary."""
    return any(marker in entity for marker in excluded)


def _entity_of(row: Mapping[str, str | None]) -> str:
    entity = row.get(ENTITY)
    if entity is None or not str(entity).strip():
        msg = f"result row has no '{ENTITY}' binding: {dict(row)!r}"
        raise DataIntegrityError(msg)
    return str(entity)


def aggregate_violations(
    rows: Iterable[Mapping[str, str | None]],
    *,
    rule: str | None = None,
    excluded: Iterable[str] = EXCLUDED_NAMESPACES,
) -> list[Violation]:
    """Merge *rows* into one :class:`Violation` per distinct ``entity``.

    - Rows without an ``entity`` are logged and skipped.
    - Rows whose ``entity`` lies in an excluded namespace are dropped.
    - A row with a ``property`` adds a statement; its ``value`` may be absent.
      Repeated identical statements are recorded once.

    Violations are returned sorted by entity; statements keep row order.
    """
    excluded = tuple(excluded)
    statements: dict[str, list[Statement]] = {}

    for index, row in enumerate(rows):
        try:
            entity = _entity_of(row)
        except DataIntegrityError as exc:
            logger.warning("Skipping row %d of rule %s: %s", index, rule or "<unnamed>", exc)
            continue

        if is_excluded(entity, excluded):
            continue

        entity_statements = statements.setdefault(entity, [])
        prop = row.get(PROPERTY)
        if prop is not None:
            value = row.get(VALUE)
            statement = Statement(
                property=str(prop), value=str(value) if value is not None else None
            )
            # Identical rows (e.g. a query without DISTINCT) collapse.
            if statement not in entity_statements:
                entity_statements.append(statement)

    return [
        Violation(entity=entity, statements=tuple(statements[entity]))
        for entity in sorted(statements)
    ]
