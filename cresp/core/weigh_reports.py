"""Report Weighting — pure aggregation rules for the moderation queue.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - A report's weight is the reporter's trust score (1.0 when unknown)
    - average_weight == total_weight / report_count after every report
    - Priority is fixed by category severity when the queue entry is created

Design Decisions:
    - QueueTally value object: service reads the ORM row into it, applies the
      pure update, and writes the fields back (keeps arithmetic testable)
"""

from dataclasses import dataclass

from cresp.core.domain_types import ModerationPriority

DEFAULT_TRUST_SCORE = 1.0


@dataclass(frozen=True)
class QueueTally:
    report_count: int
    total_weight: float
    average_weight: float


def report_weight(trust_score: float | None) -> float:
    return DEFAULT_TRUST_SCORE if trust_score is None else float(trust_score)


def priority_for_severity(severity: int) -> ModerationPriority:
    if severity >= 4:
        return ModerationPriority.HIGH
    if severity >= 3:
        return ModerationPriority.NORMAL
    return ModerationPriority.LOW


def first_report(weight: float) -> QueueTally:
    return QueueTally(report_count=1, total_weight=weight, average_weight=weight)


def add_report(tally: QueueTally, weight: float) -> QueueTally:
    count = tally.report_count + 1
    total = tally.total_weight + weight
    return QueueTally(report_count=count, total_weight=total, average_weight=total / count)


_PRIORITY_RANK = {
    ModerationPriority.HIGH: 0,
    ModerationPriority.NORMAL: 1,
    ModerationPriority.LOW: 2,
}


def queue_sort_key(priority: str, total_weight: float) -> tuple[int, float]:
    """Sort key for the review queue: HIGH first, then heavier entries first."""
    return (_PRIORITY_RANK.get(ModerationPriority(priority), 3), -total_weight)
