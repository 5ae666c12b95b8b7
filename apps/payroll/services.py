"""
Payroll workflow.

    DRAFT --submit--> PENDING_APPROVAL --approve--> APPROVED
                                       --reject---> REJECTED

Every mutating call runs in one transaction holding a row lock on the
period, so two requests racing on the same period are serialized. Callers
may also pass the ``version`` they last read; a mismatch raises
ConcurrentModification instead of silently overwriting.
"""
import logging
from calendar import monthrange
from datetime import date

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, Sum
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from apps.attendance.facts import get_attendance_facts
from apps.employees.utils import payroll_eligible_employees
from apps.salary.calculator import calculate_salary
from apps.salary.models import SalaryStructure
from apps.salary.utils import normalize_amounts, to_decimal
from .exceptions import (
    ConcurrentModification,
    DuplicatePeriod,
    InvalidAttendanceData,
    InvalidState,
    MissingSalaryStructure,
    NotFound,
)
from .models import PayrollEntry, PayrollPeriod
from .payslips import delete_payslips_for, issue_payslip

logger = logging.getLogger(__name__)

EDITABLE_ENTRY_FIELDS = (
    "basic_salary",
    "allowances",
    "working_days",
    "present_days",
    "paid_leaves",
    "unpaid_leaves",
    "overtime_hours",
    "penalties",
    "notes",
)


def period_bounds(period):
    last_day = monthrange(period.year, period.month)[1]
    return date(period.year, period.month, 1), date(period.year, period.month, last_day)


def _validate_month_year(month, year):
    errors = {}
    if not isinstance(month, int) or not 1 <= month <= 12:
        errors["month"] = "Month must be between 1 and 12."
    if not isinstance(year, int) or not 1900 <= year <= 9999:
        errors["year"] = "Year must be a four digit year."
    if errors:
        raise ValidationError(errors)


def _get_period(period_id, queryset=None):
    queryset = queryset if queryset is not None else PayrollPeriod.objects.all()
    try:
        return queryset.get(pk=period_id)
    except (PayrollPeriod.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound(f"Payroll {period_id} not found")


def _get_entry(entry_id, queryset=None):
    queryset = queryset if queryset is not None else PayrollEntry.objects.select_related("period")
    try:
        return queryset.get(pk=entry_id)
    except (PayrollEntry.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound(f"Payroll entry {entry_id} not found")


def _locked_period(period_id, expected_version=None):
    period = _get_period(period_id, PayrollPeriod.objects.select_for_update())
    if expected_version is not None and int(expected_version) != period.version:
        raise ConcurrentModification(
            f"Payroll {period.pk} is at version {period.version}, request was based on {expected_version}"
        )
    return period


def _require_status(period, allowed, action):
    if period.status not in allowed:
        raise InvalidState(
            f"Cannot {action} payroll {period.month:02d}/{period.year} while it is {period.status}"
        )


def _save(period, fields):
    period.version += 1
    period.save(update_fields=list(fields) + ["version"])


def _refresh_totals(period):
    totals = period.entries.aggregate(count=Count("id"), amount=Sum("net_salary"))
    period.total_employees = totals["count"] or 0
    period.total_amount = totals["amount"] or 0


# Queries

def list_periods():
    return PayrollPeriod.objects.order_by("-year", "-month")


def get_period(period_id):
    return _get_period(period_id)


def list_entries(period_id):
    period = _get_period(period_id)
    return period.entries.select_related("employee").order_by("employee_name")


def get_entry(entry_id):
    return _get_entry(entry_id)


# Transitions

def create_period(month, year, notes="", actor=None, actor_name=None):
    _validate_month_year(month, year)
    if PayrollPeriod.objects.filter(month=month, year=year).exists():
        raise DuplicatePeriod(f"Payroll already exists for {month}/{year}")
    try:
        with transaction.atomic():
            period = PayrollPeriod.objects.create(
                month=month,
                year=year,
                status=PayrollPeriod.DRAFT,
                created_by=actor,
                created_by_name=actor_name,
                hr_notes=notes or "",
                total_employees=0,
                total_amount=0,
            )
    except IntegrityError:
        # Lost the race against a concurrent create
        raise DuplicatePeriod(f"Payroll already exists for {month}/{year}")
    logger.info(f"Payroll {period.pk} created for {month:02d}/{year} by {actor}")
    return period


def generate_entries(period_id, facts_provider=None, expected_version=None):
    """
    (Re)build every entry of a DRAFT period. Prior entries are replaced, so
    running it twice gives the same entry set. Employees without a salary
    structure or with unusable attendance are skipped and recorded on the
    period; they never abort the batch.
    """
    facts_provider = facts_provider or get_attendance_facts
    with transaction.atomic():
        period = _locked_period(period_id, expected_version)
        _require_status(period, (PayrollPeriod.DRAFT,), "generate entries for")
        start, end = period_bounds(period)

        replaced, _ = period.entries.all().delete()
        if replaced:
            logger.info(f"Payroll {period.pk}: replacing {replaced} previously generated entries")

        skipped = []
        for employee in payroll_eligible_employees(start, end):
            employee_name = employee.name or employee.employee_code
            try:
                structure = SalaryStructure.objects.resolve(employee.pk, end)
                facts = facts_provider(employee, period.year, period.month)
                breakdown = calculate_salary(
                    basic_salary=structure.basic_salary,
                    allowances=structure.allowances,
                    tax_percentage=structure.tax_percentage,
                    pf_percentage=structure.pf_percentage,
                    working_days=facts.working_days,
                    unpaid_leaves=facts.unpaid_leaves,
                    penalties=0,
                )
            except (MissingSalaryStructure, InvalidAttendanceData) as e:
                logger.warning(f"Payroll {period.pk}: skipping {employee.employee_code}: {e.detail}")
                skipped.append({
                    "employee_id": employee.pk,
                    "employee_name": employee_name,
                    "reason": e.default_code,
                    "detail": str(e.detail),
                })
                continue

            entry = PayrollEntry(
                period=period,
                employee=employee,
                employee_name=employee_name,
                tax_percentage=structure.tax_percentage,
                pf_percentage=structure.pf_percentage,
                working_days=facts.working_days,
                present_days=facts.present_days,
                paid_leaves=facts.paid_leaves,
                unpaid_leaves=facts.unpaid_leaves,
                overtime_hours=facts.overtime_hours,
                penalties=0,
                status=PayrollEntry.GENERATED,
            )
            entry.apply_breakdown(breakdown)
            entry.save()

        period.skipped_employees = skipped
        period.generated_at = timezone.now()
        _refresh_totals(period)
        _save(period, ["skipped_employees", "generated_at", "total_employees", "total_amount"])

    logger.info(
        f"Payroll {period.pk}: generated {period.total_employees} entries, "
        f"total {period.total_amount}, skipped {len(skipped)}"
    )
    return period


def update_entry(entry_id, patch, expected_version=None):
    unknown = set(patch) - set(EDITABLE_ENTRY_FIELDS)
    if unknown:
        raise ValidationError({name: "This field cannot be edited." for name in sorted(unknown)})

    entry = get_entry(entry_id)
    with transaction.atomic():
        period = _locked_period(entry.period_id, expected_version)
        _require_status(period, (PayrollPeriod.DRAFT,), "edit entries of")
        # Generation may have replaced the entry while we waited for the lock
        entry = _get_entry(entry.pk, PayrollEntry.objects.select_for_update())

        try:
            if "allowances" in patch:
                patch = dict(patch, allowances=normalize_amounts(patch["allowances"]))
            for name in ("basic_salary", "overtime_hours", "penalties"):
                if name in patch:
                    value = to_decimal(patch[name], name)
                    if value < 0:
                        raise ValueError(f"{name} must not be negative")
                    patch = dict(patch, **{name: value})
        except ValueError as e:
            raise ValidationError({"detail": str(e)})

        for name, value in patch.items():
            setattr(entry, name, value)

        breakdown = calculate_salary(
            basic_salary=entry.basic_salary,
            allowances=entry.allowances,
            tax_percentage=entry.tax_percentage,
            pf_percentage=entry.pf_percentage,
            working_days=entry.working_days,
            unpaid_leaves=entry.unpaid_leaves,
            penalties=entry.penalties,
        )
        entry.apply_breakdown(breakdown)
        entry.save()

        _refresh_totals(period)
        _save(period, ["total_employees", "total_amount"])

    logger.info(f"Payroll entry {entry.pk} updated: {', '.join(sorted(patch))}")
    return entry


def submit_period(period_id, expected_version=None):
    with transaction.atomic():
        period = _locked_period(period_id, expected_version)
        _require_status(period, (PayrollPeriod.DRAFT,), "submit")
        period.status = PayrollPeriod.PENDING_APPROVAL
        period.submitted_at = timezone.now()
        _save(period, ["status", "submitted_at"])
    logger.info(f"Payroll {period.pk} submitted for approval")
    return period


def approve_period(period_id, admin_id, notes="", admin_name=None, expected_version=None):
    with transaction.atomic():
        period = _locked_period(period_id, expected_version)
        _require_status(period, (PayrollPeriod.PENDING_APPROVAL,), "approve")

        period.entries.update(status=PayrollEntry.APPROVED)
        issued = 0
        for entry in period.entries.all():
            issue_payslip(entry, period)
            issued += 1

        period.status = PayrollPeriod.APPROVED
        period.approved_by = admin_id
        period.approved_by_name = admin_name
        period.admin_notes = notes or ""
        period.approved_at = timezone.now()
        _save(period, ["status", "approved_by", "approved_by_name", "admin_notes", "approved_at"])
    logger.info(f"Payroll {period.pk} approved by {admin_id}; {issued} payslips issued")
    return period


def reject_period(period_id, admin_id, reason="", admin_name=None, expected_version=None):
    with transaction.atomic():
        period = _locked_period(period_id, expected_version)
        _require_status(period, (PayrollPeriod.PENDING_APPROVAL,), "reject")
        period.status = PayrollPeriod.REJECTED
        period.approved_by = admin_id
        period.approved_by_name = admin_name
        period.rejection_reason = reason or ""
        period.rejected_at = timezone.now()
        _save(period, ["status", "approved_by", "approved_by_name", "rejection_reason", "rejected_at"])
    logger.info(f"Payroll {period.pk} rejected by {admin_id}")
    return period


def delete_period(period_id, expected_version=None):
    """Remove a period in any state, with its entries and their payslips."""
    with transaction.atomic():
        period = _locked_period(period_id, expected_version)
        payslips = 0
        for entry in period.entries.all():
            payslips += delete_payslips_for(entry.employee_id, period.month, period.year)
        entries, _ = period.entries.all().delete()
        period.delete()
    logger.info(
        f"Payroll {period_id} ({period.month:02d}/{period.year}) deleted "
        f"with {entries} entries and {payslips} payslips"
    )


# Scheduled housekeeping

def prepare_period(month, year, actor=None, facts_provider=None):
    """
    Make sure a DRAFT payroll with fresh entries exists for the month. Meant
    to be called by an external scheduler through ``manage.py prepare_payroll``.
    Periods already submitted or decided are left untouched.
    """
    try:
        period = create_period(month, year, notes="Prepared automatically", actor=actor)
    except DuplicatePeriod:
        period = PayrollPeriod.objects.get(month=month, year=year)

    if period.status != PayrollPeriod.DRAFT:
        logger.info(f"Payroll {period.pk} is {period.status}; nothing to prepare")
        return period
    return generate_entries(period.pk, facts_provider=facts_provider)
