from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.shortcuts import get_object_or_404

from bookings.serializers import BookingSerializer
from teams.models import Team
from teams.utils import active_team_ids
from users.permissions import IsCoachOrCoordinator, IsCoordinator

from . import attendance, scheduling, services
from .exceptions import AttendanceWriteDenied, PlanLocked
from .serializers import (
    AttendanceRecordSerializer,
    AttendanceUpdateSerializer,
    FromScheduleSerializer,
    StatusUpdateSerializer,
    TrainingPlanSerializer,
    TrainingPlanWriteSerializer,
)
from .status import normalize_status, transition_plan


class TrainingPlanViewSet(viewsets.ModelViewSet):
    """
    Training plans, their status, schedule binding and attendance.

    Permissions:
      - list/retrieve: any authenticated user, scoped to the plans they may see
      - create/update/destroy/from_schedule/remove_activity: supervisors and admins
      - status: checked per transition (coaches start and complete trainings)
      - attendance: coaches and coordinators read; only coaches write
    """
    serializer_class = TrainingPlanSerializer
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.action in ["create", "update", "partial_update", "destroy", "from_schedule", "remove_activity"]:
            self.permission_classes = [IsAuthenticated, IsCoordinator]
        elif self.action in ["plan_attendance", "seed_attendance"]:
            self.permission_classes = [IsAuthenticated, IsCoachOrCoordinator]
        return super().get_permissions()

    def get_queryset(self):
        if self.action == "list":
            params = self.request.query_params
            team = params.get("team")
            if team and not team.isdigit():
                raise ValidationError({"team": ["Team must be a numeric id."]})
            status_filter = params.get("status")
            if status_filter and normalize_status(status_filter) is None:
                raise ValidationError({"status": ["Unknown status."]})
            return services.list_plans(
                self.request.user,
                team=team,
                status=normalize_status(status_filter),
                sport_type=params.get("sport_type"),
            )
        return services.visible_plans(self.request.user)

    # ---- Helpers ----
    def _plan_response(self, plan, status_code=status.HTTP_200_OK):
        ctx = {**self.get_serializer_context(), "schedule_resolutions": scheduling.resolve_schedules([plan])}
        return Response(TrainingPlanSerializer(plan, context=ctx).data, status=status_code)

    def _request_key(self, data):
        return data.get("request_key") or self.request.headers.get("Idempotency-Key") or None

    def _attendance_response(self, plan, records, **extra):
        positions = dict(plan.team.get_squad().values_list("user_id", "position"))
        data = AttendanceRecordSerializer(records, many=True, context={"positions": positions}).data
        return Response({"success": True, "attendance": data, **extra}, status=200)

    # ---- Read ----
    def list(self, request, *args, **kwargs):
        plans = list(self.get_queryset())
        ctx = {**self.get_serializer_context(), "schedule_resolutions": scheduling.resolve_schedules(plans)}
        return Response(TrainingPlanSerializer(plans, many=True, context=ctx).data)

    def retrieve(self, request, *args, **kwargs):
        return self._plan_response(services.get_plan(request.user, kwargs["pk"]))

    # ---- Create/Update/Delete ----
    def create(self, request, *args, **kwargs):
        ser = TrainingPlanWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = {**ser.validated_data, "request_key": self._request_key(ser.validated_data)}

        result = services.create_plan(request.user, data)
        return self._plan_response(result.plan, status.HTTP_201_CREATED if result.created else status.HTTP_200_OK)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        plan = self.get_object()
        if plan.is_locked:
            raise PlanLocked()
        ser = TrainingPlanWriteSerializer(data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)

        result = services.update_plan(request.user, plan, ser.validated_data)
        return self._plan_response(result.plan)

    def destroy(self, request, *args, **kwargs):
        plan = self.get_object()
        services.delete_plan(request.user, plan)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"], url_path="from-schedule")
    def from_schedule(self, request):
        """
        Create a plan for a reserved Training slot.
        Payload: plan fields + {"schedule_id": <booking id>}; activities must
        add up to the plan duration.
        """
        ser = FromScheduleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = {**ser.validated_data, "request_key": self._request_key(ser.validated_data)}

        result = services.create_plan_from_schedule(request.user, data["schedule"], data)
        return self._plan_response(result.plan, status.HTTP_201_CREATED if result.created else status.HTTP_200_OK)

    @action(detail=True, methods=["delete"], url_path=r"activities/(?P<order>\d+)")
    def remove_activity(self, request, pk=None, order=None):
        """Remove one activity; the rest are renumbered 1..N."""
        plan = self.get_object()
        result = services.remove_activity(request.user, plan, int(order))
        return self._plan_response(result.plan)

    # ---- Status ----
    @action(detail=True, methods=["put", "patch", "post"], url_path="status")
    def update_status(self, request, pk=None):
        """
        Payload: {"status": "Assigned" | "InProgress" | "Completed"}
        """
        plan = self.get_object()
        ser = StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        transition_plan(request.user, plan, ser.validated_data["status"])
        return self._plan_response(plan)

    # ---- Schedules ----
    @action(detail=False, methods=["get"])
    def schedules(self, request):
        """
        Future Training bookings of a team, offered as schedules to bind.
        Query param: ?team=<id>
        """
        team_id = request.query_params.get("team", "")
        if not team_id.isdigit():
            raise ValidationError({"team": ["A numeric team id is required."]})
        team = get_object_or_404(Team, pk=team_id)

        user = request.user
        if user.is_coordinator():
            sport_types = user.scoped_sport_types()
            if sport_types and team.sport_type not in sport_types:
                raise PermissionDenied(f"You do not supervise {team.sport_type} teams.")
        elif team.pk not in active_team_ids(user):
            raise PermissionDenied("You are not a member of this team.")

        return Response(BookingSerializer(scheduling.candidate_schedules(team), many=True).data)

    # ---- Attendance ----
    @action(detail=True, methods=["get", "put"], url_path="attendance")
    def plan_attendance(self, request, pk=None):
        """
        GET: {"success": true, "attendance": [...]}; seeds the roster on first read.
        PUT: {"attendance": [{"player": id, "status": "Present", "notes": ""}, ...]}
        """
        plan = self.get_object()

        if request.method == "GET":
            return self._attendance_response(plan, attendance.get_attendance(request.user, plan))

        ser = AttendanceUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            records = attendance.set_attendance(request.user, plan, ser.validated_data["attendance"])
        except AttendanceWriteDenied as exc:
            return Response(
                {"success": False, "error": exc.message, "reason": exc.reason},
                status=status.HTTP_403_FORBIDDEN,
            )
        return self._attendance_response(plan, records)

    @action(detail=True, methods=["post"], url_path="attendance/seed")
    def seed_attendance(self, request, pk=None):
        """Add default (Absent) records for roster players without one."""
        plan = self.get_object()
        try:
            attendance.ensure_can_write(request.user, plan)
        except AttendanceWriteDenied as exc:
            return Response(
                {"success": False, "error": exc.message, "reason": exc.reason},
                status=status.HTTP_403_FORBIDDEN,
            )
        created = attendance.seed_from_roster(plan)
        return self._attendance_response(plan, attendance.attendance_for(plan), created=created)
