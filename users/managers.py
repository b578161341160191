# users/managers.py
from django.contrib.auth.base_user import BaseUserManager

from . import roles

# Everyone but players gets access to staff tooling.
STAFF_ROLES = frozenset({roles.COACH, roles.STAFF, roles.SUPERVISOR, roles.ADMIN})


class CustomUserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("The Email must be set")
        extra_fields.setdefault('role', roles.PLAYER)
        extra_fields.setdefault('is_staff', extra_fields['role'] in STAFF_ROLES)
        extra_fields.setdefault('is_superuser', False)

        user = self.model(email=self.normalize_email(email), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', roles.ADMIN)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        if not extra_fields['is_staff'] or not extra_fields['is_superuser']:
            raise ValueError('Superuser must have is_staff=True and is_superuser=True.')
        return self.create_user(email, password, **extra_fields)
