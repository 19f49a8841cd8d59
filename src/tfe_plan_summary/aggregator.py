"""Reduce a redacted JSON plan to create/update/delete counts."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from typing import Any

from tfe_plan_summary.domain.models import ChangeSummary

COUNTED_ACTIONS = ("create", "update", "delete")


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def iter_actions(document: dict[str, Any]) -> Iterator[str]:
    """Yield every action token of every ``resource_changes`` record."""
    for record in _as_list(document.get("resource_changes")):
        if not isinstance(record, dict):
            continue
        change = record.get("change")
        if not isinstance(change, dict):
            continue
        for action in _as_list(change.get("actions")):
            if isinstance(action, str):
                yield action


def summarize(document: dict[str, Any]) -> ChangeSummary:
    """Count ``create``, ``update`` and ``delete`` tokens across all records.

    Other tokens (``no-op``, ``read``) are ignored. A replacement encoded as
    ``["delete", "create"]`` contributes one delete and one create.
    """
    counts = Counter(action for action in iter_actions(document) if action in COUNTED_ACTIONS)
    return ChangeSummary(
        create=counts["create"],
        update=counts["update"],
        delete=counts["delete"],
    )
