from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import serializers

from bookings.serializers import BookingSerializer
from teams.models import Team
from teams.serializers import TeamBriefSerializer

from . import scheduling
from .attendance import STATUS_DISPLAY
from .durations import validate_durations
from .models import AttendanceRecord, TrainingActivity, TrainingPlan
from .status import normalize_status

User = get_user_model()


class ActivitySerializer(serializers.ModelSerializer):
    class Meta:
        model = TrainingActivity
        fields = ('title', 'description', 'duration', 'order')
        extra_kwargs = {
            'description': {'required': False, 'allow_blank': True},
            'duration': {'min_value': 1},
            'order': {'min_value': 1},
        }


class AttachmentSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    url = serializers.URLField(max_length=500)


# ---- Input ----
class TrainingPlanWriteSerializer(serializers.Serializer):
    """
    Create/update payload. ``schedule_id`` is resolved to a booking and handed
    to the service layer as ``schedule``.
    """
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    team = serializers.PrimaryKeyRelatedField(queryset=Team.objects.all())
    date = serializers.DateTimeField(required=False)
    duration = serializers.IntegerField(min_value=1)
    activities = ActivitySerializer(many=True, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    attachments = AttachmentSerializer(many=True, required=False)
    schedule_id = serializers.IntegerField(required=False, allow_null=True)
    is_recurring = serializers.BooleanField(required=False)
    assigned_to = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role='COACH'), required=False, allow_null=True,
    )
    request_key = serializers.CharField(required=False, allow_blank=True, max_length=64)

    def validate(self, attrs):
        if "schedule_id" in attrs:
            schedule_id = attrs.pop("schedule_id")
            attrs["schedule"] = scheduling.get_booking(schedule_id) if schedule_id is not None else None

        if "description" in attrs and not attrs["description"]:
            attrs["description"] = settings.DEFAULT_PLAN_DESCRIPTION

        if not self.partial and not attrs.get("date") and not attrs.get("schedule"):
            raise serializers.ValidationError({"date": ["Date is required unless a schedule is selected."]})
        return attrs


class FromScheduleSerializer(TrainingPlanWriteSerializer):
    """Schedule-driven creation: the booking supplies date and team."""
    team = serializers.PrimaryKeyRelatedField(queryset=Team.objects.all(), required=False)
    schedule_id = serializers.IntegerField()

    def validate(self, attrs):
        attrs = super().validate(attrs)
        booking = attrs["schedule"]
        if attrs.get("team") is None and booking.team_id is None:
            raise serializers.ValidationError({"team": ["Team is required for a schedule without a team."]})
        return attrs


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()

    def validate_status(self, value):
        status = normalize_status(value)
        if status is None:
            raise serializers.ValidationError("Invalid status value.")
        return status


class AttendanceEntrySerializer(serializers.Serializer):
    player = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    status = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_status(self, value):
        status = str(value).strip().upper()
        if status not in dict(AttendanceRecord.STATUS_CHOICES):
            raise serializers.ValidationError("Status must be Present, Absent, Late or Excused.")
        return status


class AttendanceUpdateSerializer(serializers.Serializer):
    attendance = AttendanceEntrySerializer(many=True, allow_empty=True)


# ---- Output ----
class TrainingPlanSerializer(serializers.ModelSerializer):
    team_detail = TeamBriefSerializer(source='team', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    activities = ActivitySerializer(many=True, read_only=True)
    created_by_name = serializers.CharField(source='created_by.get_full_name', read_only=True, default=None)
    assigned_to_name = serializers.CharField(source='assigned_to.get_full_name', read_only=True, default=None)
    schedule = serializers.SerializerMethodField()
    duration_check = serializers.SerializerMethodField()

    class Meta:
        model = TrainingPlan
        fields = (
            'id', 'title', 'description', 'team', 'team_detail', 'status', 'status_display',
            'date', 'duration', 'activities', 'duration_check',
            'schedule_ref', 'schedule', 'is_recurring', 'notes', 'attachments',
            'created_by', 'created_by_name', 'assigned_to', 'assigned_to_name',
            'completed_at', 'created_at', 'updated_at',
        )
        read_only_fields = fields

    def get_schedule(self, plan):
        resolutions = self.context.get('schedule_resolutions') or {}
        resolution = resolutions.get(plan.pk) or scheduling.resolve_schedule(plan)
        data = {'state': resolution.state}
        if resolution.booking is not None:
            data['booking'] = BookingSerializer(resolution.booking).data
        if resolution.message:
            data['message'] = resolution.message
        return data

    def get_duration_check(self, plan):
        return validate_durations(list(plan.activities.all()), plan.duration).as_dict()


class AttendanceRecordSerializer(serializers.ModelSerializer):
    player_name = serializers.CharField(source='player.get_full_name', read_only=True)
    marked_by_name = serializers.CharField(source='marked_by.get_full_name', read_only=True, default=None)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    display = serializers.SerializerMethodField()
    position = serializers.SerializerMethodField()

    class Meta:
        model = AttendanceRecord
        fields = (
            'id', 'plan', 'player', 'player_name', 'position', 'status', 'status_display', 'display',
            'notes', 'marked_by', 'marked_by_name', 'marked_at',
        )
        read_only_fields = fields

    def get_display(self, obj):
        return STATUS_DISPLAY.get(obj.status)

    def get_position(self, obj):
        return self.context.get('positions', {}).get(obj.player_id) or None
