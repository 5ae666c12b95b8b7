import logging
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from django.conf import settings

from .models import Attendance, Leave

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceFacts:
    """Point-in-time attendance snapshot of one employee for one month."""
    working_days: int
    present_days: int
    paid_leaves: int
    unpaid_leaves: int
    overtime_hours: Decimal


def weekly_off_days():
    return set(getattr(settings, "PAYROLL_WEEKLY_OFF_DAYS", [6]))


def count_working_days(year, month):
    off_days = weekly_off_days()
    last_day = monthrange(year, month)[1]
    return sum(
        1 for day in range(1, last_day + 1)
        if date(year, month, day).weekday() not in off_days
    )


def _overtime_hours(attendance, standard_hours):
    if not attendance.in_time or not attendance.out_time:
        return Decimal("0")
    worked = (
        datetime.combine(attendance.date, attendance.out_time)
        - datetime.combine(attendance.date, attendance.in_time)
    )
    hours = Decimal(worked.total_seconds()) / Decimal(3600)
    return max(hours - standard_hours, Decimal("0"))


def get_attendance_facts(employee, year, month):
    off_days = weekly_off_days()
    standard_hours = Decimal(getattr(settings, "PAYROLL_STANDARD_WORK_HOURS", 8))
    start = date(year, month, 1)
    end = date(year, month, monthrange(year, month)[1])

    present_dates = set()
    overtime = Decimal("0")
    attendances = Attendance.objects.filter(
        employee=employee, date__range=(start, end), is_present=True
    )
    for attendance in attendances:
        # Skip weekly off days
        if attendance.date.weekday() in off_days:
            continue
        present_dates.add(attendance.date)
        overtime += _overtime_hours(attendance, standard_hours)

    paid_leaves = 0
    unpaid_leaves = 0
    leaves = Leave.objects.filter(
        employee=employee, date__range=(start, end), approved=True
    ).select_related("leave_type")
    for leave in leaves:
        # Attendance wins over a leave recorded for the same day
        if leave.date.weekday() in off_days or leave.date in present_dates:
            continue
        if leave.leave_type.is_paid:
            paid_leaves += 1
        else:
            unpaid_leaves += 1

    facts = AttendanceFacts(
        working_days=count_working_days(year, month),
        present_days=len(present_dates),
        paid_leaves=paid_leaves,
        unpaid_leaves=unpaid_leaves,
        overtime_hours=overtime.quantize(Decimal("0.01")),
    )
    logger.debug(f"Attendance facts for {employee.employee_code} {month}/{year}: {facts}")
    return facts
