"""
Per-item outcomes and run summaries (pure functions).

Item-level failures never fail a publish run; only aborted groups and
unreadable inputs change the process exit code.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_PARTIAL_FAILURE = 2


class ItemOutcome(str, Enum):
    SKIPPED = "skipped"
    TRIGGERED_COMPLETED = "triggered-completed"
    TRIGGERED_UNCONFIRMED = "triggered-unconfirmed"
    FAILED = "failed"


@dataclass
class ItemResult:
    url: str
    name: str
    outcome: ItemOutcome
    reason: Optional[str] = None


@dataclass
class GroupResult:
    """Results of one group's pool; `error` is set when the group aborted."""

    group: str
    items: list[ItemResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def aborted(self) -> bool:
        return self.error is not None

    def counts(self) -> dict[str, int]:
        return count_outcomes(self.items)


def count_outcomes(items: Iterable[ItemResult]) -> dict[str, int]:
    """Count results per outcome; every outcome is present, zero included."""
    counter = Counter(item.outcome for item in items)
    return {outcome.value: counter.get(outcome, 0) for outcome in ItemOutcome}


def summarize_run(groups: Iterable[GroupResult]) -> dict:
    """
    Roll group results up into a run summary.

    Returns a dict with per-outcome totals across groups, the aborted group
    names, and the item count.
    """
    groups = list(groups)
    all_items = [item for g in groups for item in g.items]
    return {
        "groups": len(groups),
        "aborted_groups": [g.group for g in groups if g.aborted],
        "items": len(all_items),
        **count_outcomes(all_items),
    }


def publish_exit_code(groups: Iterable[GroupResult]) -> int:
    """EXIT_PARTIAL_FAILURE if any group aborted, else EXIT_OK."""
    return EXIT_PARTIAL_FAILURE if any(g.aborted for g in groups) else EXIT_OK
