# users/roles.py
"""
Role classes used by the training core.

Everything here works on the plain role string so callers can check
capabilities without a request or a logged-in user.
"""

PLAYER = 'PLAYER'
COACH = 'COACH'
STAFF = 'STAFF'
SUPERVISOR = 'SUPERVISOR'
ADMIN = 'ADMIN'

ROLE_CHOICES = (
    (PLAYER, 'Player'),
    (COACH, 'Coach'),
    (STAFF, 'Staff'),
    (SUPERVISOR, 'Supervisor'),
    (ADMIN, 'Admin'),
)

COACHING_ROLES = frozenset({COACH})
COORDINATING_ROLES = frozenset({SUPERVISOR, ADMIN})


def is_coaching_role(role):
    return role in COACHING_ROLES


def is_coordinating_role(role):
    return role in COORDINATING_ROLES


def role_of(user):
    """Effective role of a user; superusers always act as ADMIN."""
    if user is None:
        return None
    if getattr(user, 'is_superuser', False):
        return ADMIN
    return getattr(user, 'role', None)
