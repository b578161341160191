from django.core.exceptions import ValidationError
from django.db import models
from django.conf import settings  # AUTH_USER_MODEL


class Team(models.Model):
    SPORT_TYPE_CHOICES = tuple((s, s) for s in (
        'Basketball', 'Football', 'Volleyball', 'Self Defense', 'Karate', 'Gymnastics',
        'Gym', 'Zumba', 'Swimming', 'Ping Pong', 'Fitness', 'Crossfit',
    ))

    name = models.CharField(max_length=100, unique=True)
    sport_type = models.CharField(max_length=32, choices=SPORT_TYPE_CHOICES)
    club_crest = models.ImageField(upload_to='club_crests/', null=True, blank=True)

    head_coach = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='coached_teams',
        limit_choices_to={'role': 'COACH'},  # UI-level filtering
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='owned_teams'
    )

    location = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Team"
        verbose_name_plural = "Teams"
        ordering = ['name']

    def __str__(self):
        return self.name

    # ---- Validation: enforce head_coach is a COACH ----
    def clean(self):
        super().clean()
        if self.head_coach and getattr(self.head_coach, "role", None) != "COACH":
            raise ValidationError({"head_coach": "Selected user is not a COACH."})

    def save(self, *args, **kwargs):
        self.full_clean(exclude=None)
        return super().save(*args, **kwargs)

    def active_memberships(self):
        return self.memberships.filter(active=True).select_related('user')

    def get_squad(self):
        return self.active_memberships().filter(role_on_team='PLAYER')

    def get_staff(self):
        return self.active_memberships().exclude(role_on_team='PLAYER')


class TeamMembership(models.Model):
    ROLE_CHOICES = (
        ('PLAYER', 'Player'),
        ('COACH', 'Coach'),
        ('STAFF', 'Staff'),
    )
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='memberships')
    team = models.ForeignKey('teams.Team', on_delete=models.CASCADE, related_name='memberships')

    role_on_team = models.CharField(max_length=10, choices=ROLE_CHOICES)
    jersey_number = models.PositiveIntegerField(null=True, blank=True)
    position = models.CharField(max_length=64, blank=True)  # free text, e.g. 'Point Guard', 'Setter'
    active = models.BooleanField(default=True)

    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=['team', 'role_on_team', 'active'], name='teams_membership_roster_idx'),
            models.Index(fields=['user', 'team'], name='teams_membership_user_idx'),
        ]
        constraints = [
            models.UniqueConstraint(fields=['team', 'jersey_number'],
                                    name='uniq_team_jersey',
                                    condition=models.Q(jersey_number__isnull=False)),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} @ {self.team_id} ({self.role_on_team})"
