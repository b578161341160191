# training/status.py
"""
Training plan status machine.

    DRAFT -> ASSIGNED -> IN_PROGRESS -> COMPLETED

Draft -> Assigned is a coordinator action (it normally happens when a coach
is assigned). Starting and completing a training are coach actions.
COMPLETED is terminal and locks the plan against edits.
"""
import logging

from django.utils import timezone

from users import roles

from .exceptions import InvalidStatusTransition, TransitionNotPermitted
from .models import TrainingPlan

logger = logging.getLogger(__name__)

DRAFT = TrainingPlan.STATUS_DRAFT
ASSIGNED = TrainingPlan.STATUS_ASSIGNED
IN_PROGRESS = TrainingPlan.STATUS_IN_PROGRESS
COMPLETED = TrainingPlan.STATUS_COMPLETED

# (from, to) -> (role check, who may trigger it, action label)
TRANSITIONS = {
    (DRAFT, ASSIGNED): (roles.is_coordinating_role, "a supervisor or admin", "Assign Training"),
    (ASSIGNED, IN_PROGRESS): (roles.is_coaching_role, "a coach", "Start Training"),
    (IN_PROGRESS, COMPLETED): (roles.is_coaching_role, "a coach", "Complete Training"),
}

STATUS_LABELS = dict(TrainingPlan.STATUS_CHOICES)
LABEL_TO_STATUS = {label.lower(): value for value, label in TrainingPlan.STATUS_CHOICES}


def normalize_status(value):
    """Accept both stored values ('IN_PROGRESS') and labels ('InProgress')."""
    if value is None:
        return None
    text = str(value).strip()
    if text.upper() in STATUS_LABELS:
        return text.upper()
    return LABEL_TO_STATUS.get(text.lower())


def allowed_targets(current, role):
    return [to for (frm, to), (check, _, _) in TRANSITIONS.items() if frm == current and check(role)]


def check_transition(current, target, role):
    """Raise unless ``role`` may move a plan from ``current`` to ``target``."""
    rule = TRANSITIONS.get((current, target))
    if rule is None:
        raise InvalidStatusTransition({
            "status": [f"Cannot change status from {STATUS_LABELS.get(current, current)} "
                       f"to {STATUS_LABELS.get(target, target)}."]
        })
    check, who, label = rule
    if not check(role):
        raise TransitionNotPermitted(f"Only {who} can perform '{label}'.")


def transition_plan(actor, plan, target):
    target_status = normalize_status(target)
    if target_status is None:
        raise InvalidStatusTransition({"status": ["Invalid status value."]})

    check_transition(plan.status, target_status, roles.role_of(actor))

    previous = plan.status
    plan.status = target_status
    update_fields = ["status", "updated_at"]
    if target_status == COMPLETED:
        plan.completed_at = timezone.now()
        update_fields.append("completed_at")
    plan.save(update_fields=update_fields)

    logger.info("Training plan %s: %s -> %s by user %s", plan.pk, previous, target_status, actor.pk)
    return plan
