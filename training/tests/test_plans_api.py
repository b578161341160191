from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from training.models import AttendanceRecord, TrainingActivity, TrainingPlan

from .base import ClubDataMixin


class PlanCreateTest(ClubDataMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.supervisor)
        self.url = reverse('training-plan-list')

    def payload(self, **overrides):
        data = {
            "title": "Shooting session",
            "team": self.team.pk,
            "date": (timezone.now() + timedelta(days=3)).isoformat(),
            "duration": 60,
            "activities": [
                {"title": "Warm-up", "duration": 15, "order": 1},
                {"title": "Shooting", "duration": 45, "order": 2},
            ],
        }
        data.update(overrides)
        return data

    def test_ad_hoc_create_starts_as_draft(self):
        response = self.client.post(self.url, self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], TrainingPlan.STATUS_DRAFT)
        self.assertTrue(response.data["duration_check"]["is_consistent"])
        self.assertEqual(response.data["schedule"], {"state": "unresolved"})
        self.assertEqual(response.data["created_by"], self.supervisor.pk)

    def test_ad_hoc_mismatch_is_only_a_warning(self):
        response = self.client.post(self.url, self.payload(duration=90), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data["duration_check"]["is_consistent"])
        self.assertEqual(response.data["duration_check"]["total_activity_minutes"], 60)
        self.assertIsNotNone(response.data["duration_check"]["warning"])

    def test_blank_description_gets_default(self):
        response = self.client.post(self.url, self.payload(description=""), format='json')
        self.assertEqual(response.data["description"], "Created from scheduling")

    def test_date_required_without_schedule(self):
        data = self.payload()
        del data["date"]
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("date", response.data)

    def test_activities_are_renumbered(self):
        data = self.payload(activities=[
            {"title": "Cool-down", "duration": 10, "order": 9},
            {"title": "Warm-up", "duration": 20, "order": 3},
            {"title": "Drills", "duration": 30, "order": 5},
        ])
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(
            [(a["title"], a["order"]) for a in response.data["activities"]],
            [("Warm-up", 1), ("Drills", 2), ("Cool-down", 3)],
        )

    def test_request_key_deduplicates(self):
        first = self.client.post(self.url, self.payload(), format='json', HTTP_IDEMPOTENCY_KEY='abc-123')
        second = self.client.post(self.url, self.payload(title="Retried"), format='json', HTTP_IDEMPOTENCY_KEY='abc-123')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["id"], second.data["id"])
        self.assertEqual(TrainingPlan.objects.count(), 1)

    def test_request_key_of_another_creator_is_not_shared(self):
        theirs = self.make_plan(team=self.other_team, title='Sharks secret', request_key='k1', created_by=self.admin)
        response = self.client.post(self.url, self.payload(request_key='k1'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotEqual(response.data["id"], theirs.pk)
        self.assertEqual(response.data["title"], "Shooting session")

    def test_request_key_of_out_of_scope_plan_is_refused(self):
        self.make_plan(team=self.other_team, title='Sharks secret', request_key='k1')
        self.supervisor.supervisor_sport_types = ['Basketball']
        self.supervisor.save()
        response = self.client.post(self.url, self.payload(request_key='k1'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("request_key", response.data)
        self.assertNotIn("Sharks secret", str(response.data))
        self.assertEqual(TrainingPlan.objects.count(), 1)

    def test_coach_cannot_create(self):
        self.client.force_authenticate(self.coach)
        response = self.client.post(self.url, self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(TrainingPlan.objects.exists())

    def test_scoped_supervisor_cannot_create_outside_scope(self):
        self.supervisor.supervisor_sport_types = ['Football']
        self.supervisor.save()
        response = self.client.post(self.url, self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class PlanVisibilityTest(ClubDataMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.basketball = self.make_plan(title='Basketball practice')
        self.football = self.make_plan(team=self.other_team, title='Football practice')
        self.url = reverse('training-plan-list')

    def titles(self, response):
        return sorted(p["title"] for p in response.data)

    def test_admin_sees_everything(self):
        self.client.force_authenticate(self.admin)
        self.assertEqual(self.titles(self.client.get(self.url)), ['Basketball practice', 'Football practice'])

    def test_supervisor_scoped_by_sport_type(self):
        self.supervisor.supervisor_sport_types = ['Football']
        self.supervisor.save()
        self.client.force_authenticate(self.supervisor)
        self.assertEqual(self.titles(self.client.get(self.url)), ['Football practice'])

        detail = self.client.get(reverse('training-plan-detail', args=[self.basketball.pk]))
        self.assertEqual(detail.status_code, status.HTTP_404_NOT_FOUND)

    def test_coach_sees_own_teams(self):
        self.client.force_authenticate(self.coach)
        self.assertEqual(self.titles(self.client.get(self.url)), ['Basketball practice'])

    def test_coach_sees_plan_assigned_to_them(self):
        self.football.assigned_to = self.coach
        self.football.save()
        self.client.force_authenticate(self.coach)
        self.assertEqual(self.titles(self.client.get(self.url)), ['Basketball practice', 'Football practice'])

    def test_player_sees_team_plans(self):
        self.client.force_authenticate(self.player1)
        self.assertEqual(self.titles(self.client.get(self.url)), ['Basketball practice'])

    def test_filters(self):
        self.client.force_authenticate(self.admin)
        self.assertEqual(self.titles(self.client.get(self.url, {"team": self.other_team.pk})), ['Football practice'])
        self.assertEqual(self.titles(self.client.get(self.url, {"sport_type": "Basketball"})), ['Basketball practice'])
        self.assertEqual(self.titles(self.client.get(self.url, {"status": "Assigned"})), [])
        self.assertEqual(self.client.get(self.url, {"team": "abc"}).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get(self.url, {"status": "Archived"}).status_code, status.HTTP_400_BAD_REQUEST)


class PlanUpdateTest(ClubDataMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.supervisor)

    def test_completed_plan_is_locked(self):
        plan = self.make_plan(status=TrainingPlan.STATUS_COMPLETED, title='Done')
        url = reverse('training-plan-detail', args=[plan.pk])
        for _ in range(2):
            response = self.client.patch(url, {"title": "Rewritten"}, format='json')
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
            self.assertIn("completed", str(response.data["detail"]))
        plan.refresh_from_db()
        self.assertEqual(plan.title, 'Done')
        self.assertEqual(plan.activities.count(), 2)

    def test_completed_plan_rejects_full_update_before_validation(self):
        plan = self.make_plan(status=TrainingPlan.STATUS_COMPLETED, title='Done')
        url = reverse('training-plan-detail', args=[plan.pk])

        response = self.client.put(url, {"title": "x"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["detail"].code, "plan_locked")

        response = self.client.patch(url, {"schedule_id": 999999}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        plan.refresh_from_db()
        self.assertEqual(plan.title, 'Done')
        self.assertIsNone(plan.schedule_ref)

    def test_partial_update_replaces_activities(self):
        plan = self.make_plan()
        response = self.client.patch(reverse('training-plan-detail', args=[plan.pk]), {
            "activities": [{"title": "Only drill", "duration": 60, "order": 4}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["activities"], [
            {"title": "Only drill", "description": "", "duration": 60, "order": 1},
        ])
        self.assertTrue(response.data["duration_check"]["is_consistent"])

    def test_assigning_coach_moves_draft_to_assigned(self):
        plan = self.make_plan()
        response = self.client.patch(reverse('training-plan-detail', args=[plan.pk]),
                                     {"assigned_to": self.coach.pk}, format='json')
        self.assertEqual(response.data["status"], TrainingPlan.STATUS_ASSIGNED)
        self.assertEqual(response.data["assigned_to_name"], "Cora Coach")

    def test_non_coach_cannot_be_assigned(self):
        plan = self.make_plan()
        response = self.client.patch(reverse('training-plan-detail', args=[plan.pk]),
                                     {"assigned_to": self.player1.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_remove_activity_renumbers(self):
        plan = self.make_plan(activities=((10, 'A'), (20, 'B'), (30, 'C')))
        url = reverse('training-plan-remove-activity', kwargs={'pk': plan.pk, 'order': 2})
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([(a["title"], a["order"]) for a in response.data["activities"]], [("A", 1), ("C", 2)])
        self.assertEqual(response.data["duration_check"]["total_activity_minutes"], 40)

        missing = self.client.delete(reverse('training-plan-remove-activity', kwargs={'pk': plan.pk, 'order': 9}))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)


class PlanDeleteTest(ClubDataMixin, APITestCase):
    def test_delete_cascades_to_attendance_and_activities(self):
        plan = self.make_plan(status=TrainingPlan.STATUS_ASSIGNED)
        AttendanceRecord.objects.create(plan=plan, player=self.player1)
        AttendanceRecord.objects.create(plan=plan, player=self.player2)

        self.client.force_authenticate(self.supervisor)
        response = self.client.delete(reverse('training-plan-detail', args=[plan.pk]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(TrainingPlan.objects.filter(pk=plan.pk).exists())
        self.assertFalse(AttendanceRecord.objects.filter(plan_id=plan.pk).exists())
        self.assertFalse(TrainingActivity.objects.filter(plan_id=plan.pk).exists())

    def test_coach_cannot_delete(self):
        plan = self.make_plan()
        self.client.force_authenticate(self.coach)
        response = self.client.delete(reverse('training-plan-detail', args=[plan.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(TrainingPlan.objects.filter(pk=plan.pk).exists())


class PlanStatusTest(ClubDataMixin, APITestCase):
    def url(self, plan):
        return reverse('training-plan-update-status', args=[plan.pk])

    def test_coach_runs_training(self):
        plan = self.make_plan(status=TrainingPlan.STATUS_ASSIGNED, assigned_to=self.coach)
        self.client.force_authenticate(self.coach)

        response = self.client.patch(self.url(plan), {"status": "InProgress"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], TrainingPlan.STATUS_IN_PROGRESS)

        response = self.client.patch(self.url(plan), {"status": "Completed"}, format='json')
        self.assertEqual(response.data["status"], TrainingPlan.STATUS_COMPLETED)
        self.assertIsNotNone(response.data["completed_at"])

    def test_coach_cannot_assign(self):
        plan = self.make_plan()
        self.client.force_authenticate(self.coach)
        response = self.client.patch(self.url(plan), {"status": "Assigned"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        plan.refresh_from_db()
        self.assertEqual(plan.status, TrainingPlan.STATUS_DRAFT)

    def test_supervisor_cannot_start(self):
        plan = self.make_plan(status=TrainingPlan.STATUS_ASSIGNED)
        self.client.force_authenticate(self.supervisor)
        response = self.client.patch(self.url(plan), {"status": "InProgress"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn("Start Training", str(response.data["detail"]))

    def test_invalid_jump(self):
        plan = self.make_plan()
        self.client.force_authenticate(self.admin)
        response = self.client.patch(self.url(plan), {"status": "Completed"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_status_value(self):
        plan = self.make_plan()
        self.client.force_authenticate(self.admin)
        response = self.client.patch(self.url(plan), {"status": "Archived"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PlanAttendanceApiTest(ClubDataMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.plan = self.make_plan(status=TrainingPlan.STATUS_ASSIGNED)
        self.url = reverse('training-plan-plan-attendance', args=[self.plan.pk])

    def test_first_read_seeds_roster(self):
        self.client.force_authenticate(self.coach)
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        rows = {r["player"]: r for r in response.data["attendance"]}
        self.assertEqual(set(rows), {self.player1.pk, self.player2.pk})
        self.assertEqual(rows[self.player1.pk]["status"], AttendanceRecord.STATUS_ABSENT)
        self.assertEqual(rows[self.player1.pk]["display"], "error")
        self.assertEqual(rows[self.player1.pk]["position"], "Point Guard")

    def test_coach_records_attendance(self):
        self.client.force_authenticate(self.coach)
        response = self.client.put(self.url, {"attendance": [
            {"player": self.player1.pk, "status": "Present"},
            {"player": self.player2.pk, "status": "late", "notes": "Bus"},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = {r["player"]: r for r in response.data["attendance"]}
        self.assertEqual(rows[self.player1.pk]["status"], AttendanceRecord.STATUS_PRESENT)
        self.assertEqual(rows[self.player2.pk]["status"], AttendanceRecord.STATUS_LATE)
        self.assertEqual(rows[self.player2.pk]["marked_by_name"], "Cora Coach")

    def test_supervisor_write_is_refused_with_reason(self):
        self.client.force_authenticate(self.supervisor)
        response = self.client.put(self.url, {"attendance": [
            {"player": self.player1.pk, "status": "Present"},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["reason"], "role")
        self.assertFalse(response.data["success"])

    def test_draft_plan_write_is_refused_with_reason(self):
        draft = self.make_plan(title='Draft')
        self.client.force_authenticate(self.coach)
        response = self.client.put(reverse('training-plan-plan-attendance', args=[draft.pk]), {"attendance": [
            {"player": self.player1.pk, "status": "Present"},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["reason"], "status")

    def test_non_roster_player_is_rejected(self):
        self.client.force_authenticate(self.coach)
        response = self.client.put(self.url, {"attendance": [
            {"player": self.other_coach.pk, "status": "Present"},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(AttendanceRecord.objects.filter(plan=self.plan, player=self.other_coach).exists())

    def test_invalid_status_value(self):
        self.client.force_authenticate(self.coach)
        response = self.client.put(self.url, {"attendance": [
            {"player": self.player1.pk, "status": "Sick"},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_explicit_seed(self):
        self.client.force_authenticate(self.coach)
        url = reverse('training-plan-seed-attendance', args=[self.plan.pk])
        self.assertEqual(self.client.post(url).data["created"], 2)
        self.assertEqual(self.client.post(url).data["created"], 0)

    def test_player_cannot_read(self):
        self.client.force_authenticate(self.player1)
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_403_FORBIDDEN)
