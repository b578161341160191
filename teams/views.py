from rest_framework import viewsets, generics
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from users.permissions import IsCoachMemberOrCoordinator

from .models import Team, TeamMembership
from .serializers import TeamSerializer, TeamRosterSerializer, RosterEntrySerializer


class TeamViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Team Directory, read-only.

    Permissions:
      - list: any authenticated user
      - retrieve/roster: coordinators, the owner, or active members of the team
    """
    queryset = Team.objects.select_related('head_coach', 'owner')
    serializer_class = TeamSerializer
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.action in ["retrieve", "roster"]:
            self.permission_classes = [IsAuthenticated, IsCoachMemberOrCoordinator]
        return super().get_permissions()

    def get_queryset(self):
        qs = super().get_queryset()
        sport_type = self.request.query_params.get("sport_type")
        if sport_type:
            qs = qs.filter(sport_type=sport_type)
        return qs

    def get_serializer_class(self):
        if self.action == "retrieve":
            return TeamRosterSerializer
        return super().get_serializer_class()

    @action(detail=True, methods=["get"])
    def roster(self, request, pk=None):
        """Active players of the team with their positions."""
        team = self.get_object()
        return Response(RosterEntrySerializer(team.get_squad(), many=True).data)


class MyTeamView(generics.RetrieveAPIView):
    """
    Returns the user's current active team (via membership).
    If none, returns the first team they own.
    """
    serializer_class = TeamSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        user = self.request.user
        m = (
            TeamMembership.objects
            .filter(user=user, active=True)
            .select_related("team")
            .order_by("-id")
            .first()
        )
        if m:
            return m.team

        owned = Team.objects.filter(owner=user).order_by("id").first()
        if owned:
            return owned

        raise PermissionDenied("You don’t belong to or own any team.")
