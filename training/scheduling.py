# training/scheduling.py
"""
Binding of training plans to Booking Directory slots.

A plan only keeps ``schedule_ref`` (the booking id). Reads resolve that id
into a ``ScheduleResolution`` which is attached to the plan for display; a
failed lookup degrades that one plan, it never fails the read.
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone
from rest_framework import serializers

from bookings.models import Booking

from .exceptions import ScheduleLookupFailure

logger = logging.getLogger(__name__)

RESOLVED = "resolved"
UNRESOLVED = "unresolved"
FAILED = "failed"

UNAVAILABLE_MESSAGE = "Schedule info unavailable"


@dataclass(frozen=True)
class ScheduleResolution:
    state: str
    booking: Optional[Booking] = None
    reason: Optional[str] = None

    @classmethod
    def resolved(cls, booking):
        return cls(RESOLVED, booking=booking)

    @classmethod
    def unresolved(cls):
        return cls(UNRESOLVED)

    @classmethod
    def failed(cls, reason):
        return cls(FAILED, reason=reason)

    @property
    def message(self):
        return UNAVAILABLE_MESSAGE if self.state == FAILED else None


# ---- Candidate schedules ----
def candidate_schedules(team, now=None):
    """Future, non-cancelled Training bookings of ``team``, soonest first."""
    return (
        Booking.objects.for_team(team)
        .with_purpose(Booking.PURPOSE_TRAINING)
        .upcoming(now)
        .active()
        .select_related("court", "team")
        .order_by("start_time")
    )


# ---- Binding ----
def apply_schedule(attrs, booking):
    """
    Copy the slot's start time into the plan data and force recurrence on
    when the slot recurs. Detaching a plan leaves ``is_recurring`` as it was.
    """
    if booking.purpose != Booking.PURPOSE_TRAINING:
        raise serializers.ValidationError({"schedule_id": ["Selected schedule is not a Training booking."]})

    team = attrs.get("team")
    if team is not None and booking.team_id is not None and booking.team_id != team.pk:
        raise serializers.ValidationError({"schedule_id": ["Selected schedule belongs to another team."]})

    attrs["schedule_ref"] = booking.pk
    attrs["date"] = booking.start_time
    if booking.is_recurring:
        attrs["is_recurring"] = True
    return attrs


def ensure_bound_to_team(schedule_ref, team):
    """
    Moving a bound plan to another team must not keep the old team's slot.
    A booking that no longer exists is left to degrade on read.
    """
    booking_team_id = Booking.objects.filter(pk=schedule_ref).values_list("team_id", flat=True).first()
    if booking_team_id is not None and booking_team_id != team.pk:
        raise serializers.ValidationError({
            "schedule_id": ["The bound schedule belongs to another team. Select a new schedule or detach it."]
        })


def get_booking(booking_id):
    """Strict lookup used when binding; missing ids are a validation error."""
    try:
        return Booking.objects.select_related("court", "team").get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, TypeError):
        raise serializers.ValidationError({"schedule_id": ["Schedule not found."]})


# ---- Resolution on read ----
def _with_retries(fetch, what):
    attempts = max(1, settings.SCHEDULE_LOOKUP_ATTEMPTS)
    backoff = settings.SCHEDULE_LOOKUP_BACKOFF
    for attempt in range(1, attempts + 1):
        try:
            return fetch()
        except DatabaseError as exc:
            logger.warning("Booking lookup for %s failed (attempt %d/%d): %s", what, attempt, attempts, exc)
            if attempt == attempts:
                raise ScheduleLookupFailure(str(exc)) from exc
            time.sleep(backoff * attempt)


def resolve_schedules(plans):
    """
    Resolve the schedule of every plan with one Booking Directory query.
    Returns {plan.pk: ScheduleResolution}.
    """
    plans = list(plans)
    refs = {p.schedule_ref for p in plans if p.schedule_ref}
    bookings = {}
    lookup_error = None

    if refs:
        try:
            bookings = _with_retries(
                lambda: Booking.objects.select_related("court", "team").in_bulk(refs),
                f"{len(refs)} booking(s)",
            )
        except ScheduleLookupFailure as exc:
            lookup_error = str(exc)

    result = {}
    for plan in plans:
        if not plan.schedule_ref:
            result[plan.pk] = ScheduleResolution.unresolved()
        elif lookup_error is not None:
            result[plan.pk] = ScheduleResolution.failed("lookup_error")
        elif plan.schedule_ref in bookings:
            result[plan.pk] = ScheduleResolution.resolved(bookings[plan.schedule_ref])
        else:
            logger.info("Training plan %s references missing booking %s", plan.pk, plan.schedule_ref)
            result[plan.pk] = ScheduleResolution.failed("not_found")
    return result


def resolve_schedule(plan):
    return resolve_schedules([plan])[plan.pk]
