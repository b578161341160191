# users/models.py
from django.db import models
from django.contrib.auth.models import AbstractUser
from django.db.models.functions import Lower

from . import roles
from .managers import CustomUserManager


class CustomUser(AbstractUser):
    ROLE_CHOICES = roles.ROLE_CHOICES

    username = None
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=roles.PLAYER)
    # Sport types a SUPERVISOR may see; empty means no restriction.
    supervisor_sport_types = models.JSONField(default=list, blank=True)
    profile_picture = models.ImageField(upload_to='profile_pics/', null=True, blank=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name', 'role']

    objects = CustomUserManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(Lower('email'), name='uniq_customuser_email_ci')
        ]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def effective_role(self):
        return roles.role_of(self)

    def is_player(self): return self.role == roles.PLAYER
    def is_coach(self): return self.role == roles.COACH
    def is_staff_member(self): return self.role == roles.STAFF
    def is_supervisor(self): return self.role == roles.SUPERVISOR
    def is_admin(self): return self.role == roles.ADMIN or self.is_superuser
    def is_coordinator(self): return roles.is_coordinating_role(self.effective_role)

    def scoped_sport_types(self):
        """Sport types this user is limited to, or None when unrestricted."""
        if self.is_supervisor() and not self.is_superuser and self.supervisor_sport_types:
            return list(self.supervisor_sport_types)
        return None
