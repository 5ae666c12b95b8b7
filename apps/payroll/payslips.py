import logging

from django.utils import timezone

from .exceptions import NotFound
from .models import Payslip

logger = logging.getLogger(__name__)


def issue_payslip(entry, period):
    """
    Create the payslip for an approved entry. Keyed by (employee, month,
    year), so a retried approval rewrites the same row instead of adding one.
    """
    payslip, created = Payslip.objects.update_or_create(
        employee_id=entry.employee_id,
        month=period.month,
        year=period.year,
        defaults={
            "payroll_entry": entry,
            "employee_name": entry.employee_name,
            "basic_salary": entry.basic_salary,
            "allowances": dict(entry.allowances),
            "deductions": dict(entry.deductions),
            "gross_salary": entry.gross_salary,
            "net_salary": entry.net_salary,
            "working_days": entry.working_days,
            "present_days": entry.present_days,
            "paid_leaves": entry.paid_leaves,
            "unpaid_leaves": entry.unpaid_leaves,
            "overtime_hours": entry.overtime_hours,
            "generated_at": timezone.now(),
        },
    )
    if not created:
        logger.warning(
            f"Payslip for employee {entry.employee_id} {period.month:02d}/{period.year} already existed; reissued"
        )
    return payslip


def delete_payslips_for(employee_id, month, year):
    deleted, _ = Payslip.objects.filter(employee_id=employee_id, month=month, year=year).delete()
    return deleted


def payslips_for_employee(employee_id):
    return Payslip.objects.filter(employee_id=employee_id).order_by("-year", "-month")


def get_payslip(employee_id, month, year):
    try:
        return Payslip.objects.get(employee_id=employee_id, month=month, year=year)
    except Payslip.DoesNotExist:
        raise NotFound(f"Payslip not found for employee {employee_id} {month:02d}/{year}")
