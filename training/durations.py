# training/durations.py
"""
Duration consistency between a plan and its activities.

The check is advisory for ordinary edits; only the schedule-driven creation
path turns a mismatch into an error (see ``require_consistent_durations``).
"""
from typing import NamedTuple

from .exceptions import DurationMismatch


class DurationCheck(NamedTuple):
    total_activity_minutes: int
    plan_duration: int
    is_consistent: bool

    @property
    def warning(self):
        if self.is_consistent:
            return None
        return (
            f"Total activity duration ({self.total_activity_minutes} min) "
            f"doesn't match plan duration ({self.plan_duration} min)"
        )

    def as_dict(self):
        return {
            "total_activity_minutes": self.total_activity_minutes,
            "plan_duration": self.plan_duration,
            "is_consistent": self.is_consistent,
            "warning": self.warning,
        }


def _field(activity, name, default=None):
    if isinstance(activity, dict):
        return activity.get(name, default)
    return getattr(activity, name, default)


def validate_durations(activities, plan_duration) -> DurationCheck:
    total = sum(int(_field(a, "duration", 0) or 0) for a in activities)
    plan_duration = int(plan_duration or 0)
    return DurationCheck(total, plan_duration, total == plan_duration)


def require_consistent_durations(activities, plan_duration) -> DurationCheck:
    check = validate_durations(activities, plan_duration)
    if not check.is_consistent:
        raise DurationMismatch(check)
    return check


def resequence(activities):
    """
    Sort by the submitted order and renumber 1..N.

    Returns new dicts; the input list is left alone. Ties keep their
    submission order.
    """
    ranked = sorted(enumerate(activities), key=lambda pair: (_field(pair[1], "order") or 0, pair[0]))
    result = []
    for position, (_, activity) in enumerate(ranked, start=1):
        item = dict(activity) if isinstance(activity, dict) else {
            "title": activity.title,
            "description": activity.description,
            "duration": activity.duration,
        }
        item["order"] = position
        result.append(item)
    return result


def remove_activity_at(activities, order):
    """Drop the activity numbered ``order`` and close the gap."""
    remaining = [a for a in resequence(activities) if a["order"] != order]
    if len(remaining) == len(activities):
        raise KeyError(order)
    return resequence(remaining)
