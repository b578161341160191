# training/attendance.py
import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from users import roles

from .exceptions import AttendanceWriteDenied
from .models import AttendanceRecord, TrainingPlan

logger = logging.getLogger(__name__)

WRITABLE_STATUSES = frozenset({
    TrainingPlan.STATUS_ASSIGNED,
    TrainingPlan.STATUS_IN_PROGRESS,
    TrainingPlan.STATUS_COMPLETED,
})

# Display contract shared with the frontend: status -> colour family.
STATUS_DISPLAY = {
    AttendanceRecord.STATUS_PRESENT: "success",
    AttendanceRecord.STATUS_ABSENT: "error",
    AttendanceRecord.STATUS_LATE: "warning",
    AttendanceRecord.STATUS_EXCUSED: "info",
}


def status_permits_attendance(plan_status):
    return plan_status in WRITABLE_STATUSES


def attendance_write_denial(plan_status, role):
    """
    None when a ``role`` may write attendance on a plan in ``plan_status``,
    otherwise (reason, message). The role is checked first.
    """
    if not roles.is_coaching_role(role):
        return "role", "Only coaches can record attendance."
    if not status_permits_attendance(plan_status):
        return "status", (
            "Attendance can only be recorded once the training plan is assigned. "
            "This plan is still a draft."
        )
    return None


def ensure_can_write(actor, plan):
    denial = attendance_write_denial(plan.status, roles.role_of(actor))
    if denial is not None:
        reason, message = denial
        logger.info("Attendance write on plan %s denied for user %s (%s)", plan.pk, actor.pk, reason)
        raise AttendanceWriteDenied(reason, message)


def seed_from_roster(plan, team=None):
    """
    Create an ABSENT record for every active player of the team that has
    none yet. Existing records are never touched. Returns the number created.
    """
    team = team or plan.team
    player_ids = list(team.get_squad().values_list("user_id", flat=True))
    existing = set(
        AttendanceRecord.objects.filter(plan=plan, player_id__in=player_ids)
        .values_list("player_id", flat=True)
    )
    new_records = [
        AttendanceRecord(plan=plan, player_id=pid)
        for pid in player_ids if pid not in existing
    ]
    if new_records:
        # ignore_conflicts keeps a concurrent seed from failing on the unique key
        AttendanceRecord.objects.bulk_create(new_records, ignore_conflicts=True)
        logger.info("Seeded %d attendance record(s) for plan %s", len(new_records), plan.pk)
    return len(new_records)


def attendance_for(plan):
    return (
        AttendanceRecord.objects.filter(plan=plan)
        .select_related("player", "marked_by")
    )


def get_attendance(actor, plan):
    """
    Records of the plan. The first read of a plan whose status allows
    attendance seeds the roster.
    """
    if status_permits_attendance(plan.status):
        created = seed_from_roster(plan)
        if created:
            logger.info("Attendance roster for plan %s opened by user %s", plan.pk, actor.pk)
    return attendance_for(plan)


def dedupe_by_player(entries):
    """Last entry per player wins; first-seen order is kept."""
    latest = {}
    for entry in entries:
        latest[entry["player"].pk] = entry
    return list(latest.values())


def set_attendance(actor, plan, entries):
    """
    Upsert one record per player. ``entries`` are validated dicts with
    ``player`` (user), ``status`` and optional ``notes``.
    """
    ensure_can_write(actor, plan)
    entries = dedupe_by_player(entries)

    roster = set(plan.team.get_squad().values_list("user_id", flat=True))
    outsiders = [e["player"] for e in entries if e["player"].pk not in roster]
    if outsiders:
        names = ", ".join(p.get_full_name() or p.email for p in outsiders)
        raise ValidationError({"attendance": [f"Not on the {plan.team.name} roster: {names}."]})

    now = timezone.now()

    with transaction.atomic():
        for entry in entries:
            AttendanceRecord.objects.update_or_create(
                plan=plan,
                player=entry["player"],
                defaults={
                    "status": entry["status"],
                    "notes": entry.get("notes") or "",
                    "marked_by": actor,
                    "marked_at": now,
                },
            )

    logger.info("Attendance for plan %s saved by user %s (%d player(s))", plan.pk, actor.pk, len(entries))
    return attendance_for(plan)
