from rest_framework import serializers

from .models import Booking, Court


class CourtSerializer(serializers.ModelSerializer):
    class Meta:
        model = Court
        fields = ('id', 'name', 'sport_type', 'location')


class BookingSerializer(serializers.ModelSerializer):
    court = CourtSerializer(read_only=True)
    team_name = serializers.CharField(source='team.name', read_only=True)
    purpose_display = serializers.CharField(source='get_purpose_display', read_only=True)

    class Meta:
        model = Booking
        fields = (
            'id', 'court', 'team', 'team_name', 'start_time', 'end_time',
            'purpose', 'purpose_display', 'status', 'is_recurring', 'notes',
        )
        read_only_fields = fields
