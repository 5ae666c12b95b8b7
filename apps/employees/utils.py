from django.db.models import Q

from apps.payroll.exceptions import NotFound
from .models import EmployeeProfile


def get_employee(employee_id):
    try:
        return EmployeeProfile.objects.get(pk=employee_id)
    except (EmployeeProfile.DoesNotExist, ValueError):
        raise NotFound(f"Employee {employee_id} not found")


def get_employee_by_username(username):
    try:
        return EmployeeProfile.objects.get(username=username)
    except EmployeeProfile.DoesNotExist:
        raise NotFound(f"No employee profile is linked to user '{username}'")


def payroll_eligible_employees(period_start, period_end):
    """
    Employees to include in a payroll month: active, joined on or before the
    last day of the month, and not gone before its first day.
    """
    return (
        EmployeeProfile.objects
        .filter(is_active=True, date_of_joining__lte=period_end)
        .filter(Q(last_working_day__isnull=True) | Q(last_working_day__gte=period_start))
        .order_by("employee_code")
    )
