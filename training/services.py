# training/services.py
"""
Training Plan Store.

Every operation takes the acting user explicitly; nothing here reads a
request or a "current user".
"""
import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from teams.utils import active_team_ids, coached_team_ids

from . import scheduling
from .durations import DurationCheck, remove_activity_at, require_consistent_durations, resequence, validate_durations
from .exceptions import PlanLocked
from .models import TrainingActivity, TrainingPlan

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = ("title", "description", "team", "date", "duration", "notes", "attachments",
                  "is_recurring", "assigned_to")


@dataclass
class PlanWriteResult:
    plan: TrainingPlan
    duration_check: DurationCheck
    created: bool = True


# ---- Visibility ----
def visible_plans(actor):
    """
    Plans the actor may read. Sport-type scoping of supervisors is applied
    here, never left to the client.
    """
    qs = TrainingPlan.objects.select_related("team", "created_by", "assigned_to").prefetch_related("activities")

    if actor.is_coordinator():
        sport_types = actor.scoped_sport_types()
        if sport_types:
            qs = qs.filter(team__sport_type__in=sport_types)
        return qs

    if actor.is_coach():
        return qs.filter(Q(team_id__in=coached_team_ids(actor)) | Q(assigned_to=actor)).distinct()

    return qs.filter(team_id__in=active_team_ids(actor))


def list_plans(actor, team=None, status=None, sport_type=None):
    qs = visible_plans(actor)
    if team:
        qs = qs.filter(team_id=team)
    if status:
        qs = qs.filter(status=status)
    if sport_type:
        qs = qs.filter(team__sport_type=sport_type)
    return qs.order_by("date", "id")


def get_plan(actor, pk):
    return get_object_or_404(visible_plans(actor), pk=pk)


# ---- Guards ----
def _ensure_coordinator_for_team(actor, team):
    if not actor.is_coordinator():
        raise PermissionDenied("Only supervisors or admins can manage training plans.")
    sport_types = actor.scoped_sport_types()
    if sport_types and team is not None and team.sport_type not in sport_types:
        raise PermissionDenied(f"You do not supervise {team.sport_type} teams.")


def _ensure_unlocked(plan):
    if plan.is_locked:
        raise PlanLocked()


# ---- Activities ----
def _replace_activities(plan, activities):
    TrainingActivity.objects.filter(plan=plan).delete()
    if getattr(plan, "_prefetched_objects_cache", None):
        plan._prefetched_objects_cache = {}
    TrainingActivity.objects.bulk_create([
        TrainingActivity(
            plan=plan,
            title=a["title"],
            description=a.get("description") or "",
            duration=a["duration"],
            order=a["order"],
        )
        for a in resequence(activities)
    ])


def _current_check(plan):
    return validate_durations(list(plan.activities.all()), plan.duration)


# ---- Create ----
def _find_by_request_key(actor, request_key):
    """Keys belong to their creator; only plans the actor can still see count."""
    if not request_key:
        return None
    return visible_plans(actor).filter(created_by=actor, request_key=request_key).first()


def _create(actor, data, status, activities):
    fields = {k: data[k] for k in MUTABLE_FIELDS if k in data}
    plan = TrainingPlan.objects.create(
        created_by=actor,
        status=status,
        schedule_ref=data.get("schedule_ref"),
        request_key=data.get("request_key") or None,
        **fields,
    )
    _replace_activities(plan, activities)
    return plan


def _create_once(actor, data, status, activities):
    """
    Insert the plan unless the actor already created one with the same
    request key; returns (plan, created).
    """
    existing = _find_by_request_key(actor, data.get("request_key"))
    if existing is not None:
        logger.info("Duplicate create for request key %s, returning plan %s", existing.request_key, existing.pk)
        return existing, False
    try:
        with transaction.atomic():
            return _create(actor, data, status, activities), True
    except IntegrityError:
        # lost a race against a concurrent create with the same request key
        if not data.get("request_key"):
            raise
        existing = _find_by_request_key(actor, data["request_key"])
        if existing is None:
            # the key is taken by a plan the actor can no longer see
            raise ValidationError({"request_key": ["This request key was already used."]})
        return existing, False


def create_plan(actor, data):
    """
    Ad hoc creation. Always starts in Draft; a duration mismatch only comes
    back as a warning.
    """
    _ensure_coordinator_for_team(actor, data["team"])

    data = dict(data)
    booking = data.pop("schedule", None)
    if booking is not None:
        scheduling.apply_schedule(data, booking)

    activities = data.pop("activities", [])
    plan, created = _create_once(actor, data, TrainingPlan.STATUS_DRAFT, activities)
    if not created:
        return PlanWriteResult(plan, _current_check(plan), created=False)

    logger.info("Training plan %s created by user %s for team %s", plan.pk, actor.pk, plan.team_id)
    return PlanWriteResult(plan, validate_durations(activities, plan.duration))


def create_plan_from_schedule(actor, booking, data):
    """
    Schedule-driven creation: the slot is already reserved, so the plan is
    created Assigned and activities must add up to the plan duration.
    """
    data = dict(data)
    data.pop("schedule", None)
    if data.get("team") is None:
        data["team"] = booking.team
    _ensure_coordinator_for_team(actor, data["team"])

    scheduling.apply_schedule(data, booking)
    activities = data.pop("activities", [])
    check = require_consistent_durations(activities, data["duration"])

    plan, created = _create_once(actor, data, TrainingPlan.STATUS_ASSIGNED, activities)
    if not created:
        return PlanWriteResult(plan, _current_check(plan), created=False)

    logger.info("Training plan %s created from booking %s by user %s", plan.pk, booking.pk, actor.pk)
    return PlanWriteResult(plan, check)


# ---- Update ----
def update_plan(actor, plan, data):
    _ensure_unlocked(plan)
    _ensure_coordinator_for_team(actor, data.get("team", plan.team))

    data = dict(data)
    data.pop("request_key", None)
    if "schedule" in data:
        booking = data.pop("schedule")
        if booking is None:
            plan.schedule_ref = None
        else:
            data.setdefault("team", plan.team)
            scheduling.apply_schedule(data, booking)
            plan.schedule_ref = data.pop("schedule_ref")
    elif "team" in data and plan.schedule_ref:
        scheduling.ensure_bound_to_team(plan.schedule_ref, data["team"])

    activities = data.pop("activities", None)

    assigned_before = plan.assigned_to_id
    for field in MUTABLE_FIELDS:
        if field in data:
            setattr(plan, field, data[field])

    # Assigning a coach to a draft moves it on.
    if plan.assigned_to_id and plan.assigned_to_id != assigned_before and plan.status == TrainingPlan.STATUS_DRAFT:
        plan.status = TrainingPlan.STATUS_ASSIGNED

    with transaction.atomic():
        plan.save()
        if activities is not None:
            _replace_activities(plan, activities)

    logger.info("Training plan %s updated by user %s", plan.pk, actor.pk)
    return PlanWriteResult(plan, _current_check(plan), created=False)


def remove_activity(actor, plan, order):
    _ensure_unlocked(plan)
    _ensure_coordinator_for_team(actor, plan.team)

    try:
        remaining = remove_activity_at(list(plan.activities.all()), order)
    except KeyError:
        raise NotFound(f"No activity numbered {order}.")

    with transaction.atomic():
        _replace_activities(plan, remaining)
        plan.save(update_fields=["updated_at"])
    return PlanWriteResult(plan, _current_check(plan), created=False)


# ---- Delete ----
def delete_plan(actor, plan):
    """Plan and its attendance go together or not at all."""
    if not actor.is_coordinator() and plan.created_by_id != actor.pk:
        raise PermissionDenied("Not authorized to delete this plan.")

    plan_id = plan.pk
    with transaction.atomic():
        removed, _ = plan.attendance_records.all().delete()
        plan.delete()

    logger.info("Training plan %s deleted by user %s (%d attendance record(s))", plan_id, actor.pk, removed)
