from django.db.models import Q
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated

from teams.utils import active_team_ids

from .models import Booking
from .serializers import BookingSerializer

TRUTHY = ("1", "true", "yes")


class BookingViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Booking Directory lookups (reservation management lives elsewhere).

    Query params: ?team=<id>&purpose=TRAINING&only_future=true
    """
    queryset = Booking.objects.select_related('court', 'team')
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        user = self.request.user
        qs = super().get_queryset()

        if not user.is_coordinator():
            qs = qs.filter(team_id__in=active_team_ids(user))
        else:
            sport_types = user.scoped_sport_types()
            if sport_types:
                qs = qs.filter(Q(court__sport_type__in=sport_types) | Q(team__sport_type__in=sport_types))

        params = self.request.query_params
        team = params.get("team")
        if team:
            if not team.isdigit():
                raise ValidationError({"team": ["Team must be a numeric id."]})
            qs = qs.filter(team_id=team)
        if params.get("purpose"):
            qs = qs.with_purpose(params["purpose"].upper())
        if params.get("only_future", "").lower() in TRUTHY:
            qs = qs.upcoming()
        return qs
