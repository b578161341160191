from django.conf import settings
from django.db import models

from teams.models import Team


def default_description():
    return settings.DEFAULT_PLAN_DESCRIPTION


class TrainingPlan(models.Model):
    STATUS_DRAFT = 'DRAFT'
    STATUS_ASSIGNED = 'ASSIGNED'
    STATUS_IN_PROGRESS = 'IN_PROGRESS'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CHOICES = (
        (STATUS_DRAFT, 'Draft'),
        (STATUS_ASSIGNED, 'Assigned'),
        (STATUS_IN_PROGRESS, 'InProgress'),
        (STATUS_COMPLETED, 'Completed'),
    )

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default=default_description)
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name='training_plans')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='created_training_plans',
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='assigned_training_plans',
        limit_choices_to={'role': 'COACH'},
    )
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    date = models.DateTimeField()
    duration = models.PositiveIntegerField()  # minutes

    # Loose reference into the Booking Directory; the slot may disappear under us.
    schedule_ref = models.PositiveBigIntegerField(null=True, blank=True, db_index=True)
    is_recurring = models.BooleanField(default=False)

    notes = models.TextField(blank=True, default='')
    attachments = models.JSONField(default=list, blank=True)  # [{"name": ..., "url": ...}]

    # Client-supplied key so a retried create does not produce a second plan.
    request_key = models.CharField(max_length=64, null=True, blank=True)

    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['date', 'id']
        indexes = [
            models.Index(fields=['team', 'date'], name='training_plan_team_date_idx'),
            models.Index(fields=['assigned_to', 'status'], name='training_plan_coach_idx'),
        ]
        constraints = [
            models.UniqueConstraint(fields=['created_by', 'request_key'],
                                    name='uniq_plan_request_key_per_creator',
                                    condition=models.Q(request_key__isnull=False)),
        ]

    def __str__(self):
        return f"{self.title} ({self.team.name}, {self.get_status_display()})"

    @property
    def is_locked(self):
        return self.status == self.STATUS_COMPLETED


class TrainingActivity(models.Model):
    plan = models.ForeignKey(TrainingPlan, on_delete=models.CASCADE, related_name='activities')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    duration = models.PositiveIntegerField()  # minutes
    order = models.PositiveIntegerField()

    class Meta:
        ordering = ['order']
        constraints = [
            models.UniqueConstraint(fields=['plan', 'order'], name='uniq_activity_order_per_plan'),
        ]

    def __str__(self):
        return f"{self.order}. {self.title} ({self.duration} min)"


class AttendanceRecord(models.Model):
    STATUS_PRESENT = 'PRESENT'
    STATUS_ABSENT = 'ABSENT'
    STATUS_LATE = 'LATE'
    STATUS_EXCUSED = 'EXCUSED'
    STATUS_CHOICES = (
        (STATUS_PRESENT, 'Present'),
        (STATUS_ABSENT, 'Absent'),
        (STATUS_LATE, 'Late'),
        (STATUS_EXCUSED, 'Excused'),
    )

    plan = models.ForeignKey(TrainingPlan, on_delete=models.CASCADE, related_name='attendance_records')
    player = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='training_attendance',
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ABSENT)
    notes = models.TextField(blank=True, default='')
    marked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='marked_training_attendance',
    )
    marked_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['plan', 'player'], name='uniq_attendance_plan_player'),
        ]
        ordering = ['player__last_name', 'player__first_name']

    def __str__(self):
        return f"{self.player.get_full_name()} - {self.plan.title}: {self.status}"
