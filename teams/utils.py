from .models import TeamMembership


def active_team_ids(user):
    return list(
        TeamMembership.objects.filter(user=user, active=True)
        .values_list("team_id", flat=True)
    )


def coached_team_ids(user):
    return list(
        TeamMembership.objects.filter(user=user, role_on_team='COACH', active=True)
        .values_list("team_id", flat=True)
    )
