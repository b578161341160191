from django.db import models
from django.conf import settings # To refer to AUTH_USER_MODEL
from django.utils import timezone

from teams.models import Team


class Court(models.Model):
    name = models.CharField(max_length=100, unique=True)
    sport_type = models.CharField(max_length=32, choices=Team.SPORT_TYPE_CHOICES)
    location = models.CharField(max_length=255, null=True, blank=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class BookingQuerySet(models.QuerySet):
    def for_team(self, team):
        return self.filter(team=team)

    def with_purpose(self, purpose):
        return self.filter(purpose=purpose)

    def upcoming(self, now=None):
        return self.filter(start_time__gt=now or timezone.now())

    def active(self):
        return self.exclude(status=Booking.STATUS_CANCELLED)


class Booking(models.Model):
    PURPOSE_TRAINING = 'TRAINING'
    PURPOSE_MATCH = 'MATCH'
    PURPOSE_CHOICES = (
        (PURPOSE_TRAINING, 'Training'),
        (PURPOSE_MATCH, 'Match'),
        ('RENTAL', 'Rental'),
        ('OTHER', 'Other'),
    )
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_CHOICES = (
        ('PENDING', 'Pending'),
        ('CONFIRMED', 'Confirmed'),
        (STATUS_CANCELLED, 'Cancelled'),
        ('COMPLETED', 'Completed'),
    )

    court = models.ForeignKey(Court, on_delete=models.CASCADE, related_name='bookings')
    team = models.ForeignKey(
        Team,
        on_delete=models.CASCADE,
        null=True, blank=True,
        related_name='bookings'
    )
    booked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL, # Keep the slot if the user leaves
        null=True, blank=True,
        related_name='bookings',
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    purpose = models.CharField(max_length=10, choices=PURPOSE_CHOICES, default='RENTAL')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='PENDING')
    is_recurring = models.BooleanField(default=False)
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        ordering = ['start_time']
        indexes = [
            models.Index(fields=['court', 'start_time', 'end_time'], name='bookings_court_slot_idx'),
            models.Index(fields=['team', 'purpose', 'start_time'], name='bookings_team_purpose_idx'),
        ]

    def __str__(self):
        return f"{self.get_purpose_display()}: {self.court.name} @ {self.start_time:%Y-%m-%d %H:%M}"

    @property
    def is_training(self):
        return self.purpose == self.PURPOSE_TRAINING
