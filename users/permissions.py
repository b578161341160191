from rest_framework import permissions

from teams.models import TeamMembership


class IsCoordinator(permissions.BasePermission):
    """
    Allows access only to coordinating users ('SUPERVISOR', 'ADMIN' or superuser).
    """
    message = "Only supervisors or admins can manage training plans."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_coordinator())


class IsCoachOrCoordinator(permissions.BasePermission):
    """
    Allows access to coaches and coordinators.
    """
    message = "Only coaches, supervisors or admins can access this resource."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and (user.is_coach() or user.is_coordinator()))


class IsCoachMemberOrCoordinator(permissions.BasePermission):
    """
    Allow coordinators, the team's OWNER, or any active MEMBER of the team.
    Expects obj to be a Team instance.
    """
    def has_object_permission(self, request, view, obj):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_coordinator():
            return True
        if getattr(obj, "owner_id", None) == user.id:
            return True
        return TeamMembership.objects.filter(user_id=user.id, team_id=obj.id, active=True).exists()
