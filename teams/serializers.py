from rest_framework import serializers

from .models import Team, TeamMembership


class TeamSerializer(serializers.ModelSerializer):
    head_coach_name = serializers.CharField(source='head_coach.get_full_name', read_only=True)
    owner_name = serializers.CharField(source='owner.get_full_name', read_only=True)

    class Meta:
        model = Team
        fields = (
            'id', 'name', 'sport_type', 'club_crest',
            'head_coach', 'head_coach_name',
            'owner', 'owner_name',
            'location', 'created_at', 'updated_at'
        )
        read_only_fields = fields


class TeamBriefSerializer(serializers.ModelSerializer):
    """Denormalized team snapshot embedded in training plans."""
    class Meta:
        model = Team
        fields = ('id', 'name', 'sport_type')


class RosterEntrySerializer(serializers.ModelSerializer):
    """
    One active membership, flattened so the frontend gets a user-like record
    with the team-specific position and jersey number.
    """
    id = serializers.IntegerField(source='user.id', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    first_name = serializers.CharField(source='user.first_name', read_only=True)
    last_name = serializers.CharField(source='user.last_name', read_only=True)
    full_name = serializers.CharField(source='user.get_full_name', read_only=True)

    class Meta:
        model = TeamMembership
        fields = ('id', 'email', 'first_name', 'last_name', 'full_name',
                  'role_on_team', 'position', 'jersey_number')


class TeamRosterSerializer(TeamSerializer):
    players = serializers.SerializerMethodField()
    coaches = serializers.SerializerMethodField()

    class Meta(TeamSerializer.Meta):
        fields = TeamSerializer.Meta.fields + ('players', 'coaches')
        read_only_fields = fields

    def get_players(self, team: Team):
        return RosterEntrySerializer(team.get_squad(), many=True).data

    def get_coaches(self, team: Team):
        return RosterEntrySerializer(team.get_staff().filter(role_on_team='COACH'), many=True).data
