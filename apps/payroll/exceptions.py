from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler


class PayrollError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Payroll operation failed."
    default_code = "payroll_error"


class NotFound(PayrollError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class DuplicatePeriod(PayrollError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Payroll already exists for this month."
    default_code = "duplicate_period"


class InvalidState(PayrollError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation not allowed in the current payroll state."
    default_code = "invalid_state"


class ConcurrentModification(PayrollError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Payroll was modified by another request."
    default_code = "concurrent_modification"


class MissingSalaryStructure(PayrollError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "No active salary structure."
    default_code = "missing_salary_structure"


class OverlappingSalaryStructure(PayrollError):
    default_detail = "Salary structure overlaps an existing one."
    default_code = "overlapping_salary_structure"


class InvalidAttendanceData(PayrollError):
    default_detail = "Invalid attendance data."
    default_code = "invalid_attendance_data"


def payroll_exception_handler(exc, context):
    """
    DRF's handler, plus a machine readable ``code`` on every error body so
    clients can tell e.g. "already submitted" apart from "not found".
    """
    response = exception_handler(exc, context)
    if response is None:
        return response
    if isinstance(response.data, list):
        response.data = {"detail": response.data}
    if isinstance(response.data, dict) and "code" not in response.data:
        codes = exc.get_codes() if isinstance(exc, APIException) else None
        # Field errors carry per-field codes; the body gets the exception's own
        response.data["code"] = codes if isinstance(codes, str) else getattr(exc, "default_code", "error")
    return response
