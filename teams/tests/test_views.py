from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from teams.models import Team, TeamMembership

User = get_user_model()


class TeamDirectoryTest(APITestCase):
    def setUp(self):
        self.supervisor = User.objects.create_user(
            email='super@club.test', password='pass', first_name='Sam', last_name='Super', role='SUPERVISOR')
        self.coach = User.objects.create_user(
            email='coach@club.test', password='pass', first_name='Cora', last_name='Coach', role='COACH')
        self.player = User.objects.create_user(
            email='player@club.test', password='pass', first_name='Pia', last_name='Alpha', role='PLAYER')
        self.former = User.objects.create_user(
            email='former@club.test', password='pass', first_name='Fred', last_name='Former', role='PLAYER')
        self.outsider = User.objects.create_user(
            email='out@club.test', password='pass', first_name='Olga', last_name='Out', role='PLAYER')

        self.team = Team.objects.create(name='Falcons', sport_type='Volleyball', head_coach=self.coach)
        Team.objects.create(name='Sharks', sport_type='Football')

        TeamMembership.objects.create(user=self.coach, team=self.team, role_on_team='COACH')
        TeamMembership.objects.create(user=self.player, team=self.team, role_on_team='PLAYER',
                                      position='Setter', jersey_number=4)
        TeamMembership.objects.create(user=self.former, team=self.team, role_on_team='PLAYER', active=False)

    def test_roster_lists_active_players_with_positions(self):
        self.client.force_authenticate(self.coach)
        response = self.client.get(reverse('team-roster', args=[self.team.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        entry = response.data[0]
        self.assertEqual(entry["id"], self.player.pk)
        self.assertEqual(entry["full_name"], "Pia Alpha")
        self.assertEqual(entry["position"], "Setter")
        self.assertEqual(entry["jersey_number"], 4)

    def test_detail_splits_players_and_coaches(self):
        self.client.force_authenticate(self.supervisor)
        response = self.client.get(reverse('team-detail', args=[self.team.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["sport_type"], "Volleyball")
        self.assertEqual([p["id"] for p in response.data["players"]], [self.player.pk])
        self.assertEqual([c["id"] for c in response.data["coaches"]], [self.coach.pk])

    def test_outsider_cannot_read_roster(self):
        self.client.force_authenticate(self.outsider)
        response = self.client.get(reverse('team-roster', args=[self.team.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_filters_by_sport_type(self):
        self.client.force_authenticate(self.outsider)
        response = self.client.get(reverse('team-list'), {"sport_type": "Football"})
        self.assertEqual([t["name"] for t in response.data], ["Sharks"])

    def test_my_team(self):
        self.client.force_authenticate(self.player)
        response = self.client.get(reverse('team_my'))
        self.assertEqual(response.data["name"], "Falcons")

    def test_head_coach_must_be_a_coach(self):
        with self.assertRaises(ValidationError):
            Team.objects.create(name='Owls', sport_type='Karate', head_coach=self.player)
