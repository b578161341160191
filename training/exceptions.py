# training/exceptions.py
from rest_framework import status
from rest_framework.exceptions import APIException, PermissionDenied, ValidationError


class PlanLocked(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Cannot edit a completed training plan. Completed plans are locked for historical accuracy."
    default_code = "plan_locked"


class DurationMismatch(ValidationError):
    default_code = "duration_mismatch"

    def __init__(self, check):
        self.check = check
        super().__init__({
            "duration": [
                f"Total activity duration ({check.total_activity_minutes} min) "
                f"doesn't match plan duration ({check.plan_duration} min)."
            ]
        }, code=self.default_code)


class InvalidStatusTransition(ValidationError):
    default_code = "invalid_status_transition"


class TransitionNotPermitted(PermissionDenied):
    default_code = "transition_not_permitted"


class AttendanceWriteDenied(PermissionDenied):
    """
    reason is 'role' or 'status' so the client can explain the refusal.
    """
    default_code = "attendance_write_denied"

    def __init__(self, reason, message):
        self.reason = reason
        self.message = message
        super().__init__(message, code=self.default_code)


class ScheduleLookupFailure(Exception):
    """Booking Directory lookup failed; callers degrade instead of propagating."""
