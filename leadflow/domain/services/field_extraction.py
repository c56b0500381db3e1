"""Data extraction engine.

Projects a nested lead record into a flat variable bag using mapping rules.
Extraction is pure: the record and rules are supplied by the caller and no
storage is touched.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from leadflow.domain.services.formatters import ABSENT, apply_formatter

logger = logging.getLogger(__name__)

CROSS_DOMAIN_PREFIX = "@"

_INDEX_RE = re.compile(r"\[(\d+)\]")


def normalize_path(path: str) -> list[str]:
    """Split a dot/bracket path into segments: ``a[0].b`` -> ``["a", "0", "b"]``."""
    normalized = _INDEX_RE.sub(r".\1", path.strip())
    return [segment for segment in normalized.split(".") if segment]


def resolve_path(data: Any, path: str | list[str]) -> Any:
    """Walk a path through nested mappings and sequences.

    Returns:
        The value at the path, or ``ABSENT`` when any segment is missing,
        of the wrong type, or out of range
    """
    segments = normalize_path(path) if isinstance(path, str) else path
    current = data
    for segment in segments:
        if isinstance(current, Mapping):
            if segment not in current:
                return ABSENT
            current = current[segment]
        elif isinstance(current, (list, tuple)):
            if not segment.isdigit() or int(segment) >= len(current):
                return ABSENT
            current = current[int(segment)]
        else:
            return ABSENT
    return current


def resolve_source(record: Mapping[str, Any], rule: Any) -> Any:
    """Resolve a rule's source path against the record.

    ``@domain.path`` names the data domain explicitly. Otherwise the path is
    read inside the rule's ``database_source`` domain when it has one, and
    from the record root when it does not.
    """
    source_path = (getattr(rule, "source_path", None) or "").strip()

    if source_path.startswith(CROSS_DOMAIN_PREFIX):
        return resolve_path(record, source_path[len(CROSS_DOMAIN_PREFIX):])

    database_source = getattr(rule, "database_source", None)
    if database_source:
        if database_source not in record:
            return ABSENT
        return resolve_path(record[database_source], source_path)

    if not source_path:
        return ABSENT
    return resolve_path(record, source_path)


def extract_value(record: Mapping[str, Any], rule: Any) -> Any:
    """Resolved and formatted value of one rule, or ``ABSENT``."""
    raw = resolve_source(record, rule)
    if raw is ABSENT:
        return ABSENT
    return apply_formatter(
        getattr(rule, "formatter", None),
        raw,
        getattr(rule, "html_template", None),
    )


def extract(
    record: Mapping[str, Any],
    rules: Iterable[Any],
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the variable bag for a lead record.

    Rules whose source is absent, or whose formatter cannot produce a value,
    contribute no key. A failing rule is logged and skipped.

    Args:
        record: Lead record keyed by data domain
        rules: Mapping rules in evaluation order
        now: Clock override for the ``currentYear`` system field

    Returns:
        Flat variable bag
    """
    bag: dict[str, Any] = {}

    for rule in rules:
        name = getattr(rule, "template_field_name", None)
        if not name:
            continue
        try:
            value = extract_value(record, rule)
        except Exception as e:
            logger.warning(
                f"Field mapping failed for {name}: {e}",
                extra={"template_field_name": name, "source_path": getattr(rule, "source_path", None)},
            )
            continue
        if value is ABSENT:
            continue
        bag[name] = value

    # System fields
    if "currentYear" not in bag:
        bag["currentYear"] = (now or datetime.now(timezone.utc)).year
    submission_id = record.get("submission_id")
    if submission_id and "submissionId" not in bag:
        bag["submissionId"] = submission_id

    return bag
