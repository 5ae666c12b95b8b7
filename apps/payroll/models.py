import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone

from apps.salary.utils import to_storage


class PayrollPeriod(models.Model):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    STATUS_CHOICES = (
        (DRAFT, "Draft"),
        (PENDING_APPROVAL, "Pending Approval"),
        (APPROVED, "Approved"),
        (REJECTED, "Rejected"),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    month = models.PositiveSmallIntegerField()
    year = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=DRAFT)

    created_by = models.CharField(max_length=150, null=True, blank=True)
    created_by_name = models.CharField(max_length=200, null=True, blank=True)
    approved_by = models.CharField(max_length=150, null=True, blank=True)
    approved_by_name = models.CharField(max_length=200, null=True, blank=True)

    total_employees = models.PositiveIntegerField(default=0)
    total_amount = models.DecimalField(max_digits=24, decimal_places=8, default=0)

    hr_notes = models.TextField(blank=True, default="")
    admin_notes = models.TextField(blank=True, default="")
    rejection_reason = models.TextField(blank=True, default="")
    # [{"employee_id": ..., "employee_name": ..., "reason": ...}] from the last generation
    skipped_employees = models.JSONField(default=list, blank=True)

    # Bumped on every mutation; clients may send it back to detect lost updates
    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(default=timezone.now)
    generated_at = models.DateTimeField(null=True, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(fields=["month", "year"], name="uq_payroll_period_month_year"),
        ]

    def __str__(self):
        return f"Payroll {self.month:02d}/{self.year} ({self.status})"


class PayrollEntry(models.Model):
    GENERATED = "GENERATED"
    APPROVED = "APPROVED"
    STATUS_CHOICES = (
        (GENERATED, "Generated"),
        (APPROVED, "Approved"),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    period = models.ForeignKey(PayrollPeriod, on_delete=models.CASCADE, related_name="entries")
    employee = models.ForeignKey('employees.EmployeeProfile', on_delete=models.CASCADE, related_name="payroll_entries")
    employee_name = models.CharField(max_length=200, blank=True, default="")

    basic_salary = models.DecimalField(max_digits=24, decimal_places=8, default=0)
    allowances = models.JSONField(default=dict, blank=True)
    deductions = models.JSONField(default=dict, blank=True)
    tax_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    pf_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    gross_salary = models.DecimalField(max_digits=24, decimal_places=8, default=0)
    net_salary = models.DecimalField(max_digits=24, decimal_places=8, default=0)

    working_days = models.PositiveIntegerField(default=0)
    present_days = models.PositiveIntegerField(default=0)
    paid_leaves = models.PositiveIntegerField(default=0)
    unpaid_leaves = models.PositiveIntegerField(default=0)
    overtime_hours = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    penalties = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    notes = models.TextField(blank=True, default="")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=GENERATED)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["employee_name"]
        constraints = [
            models.UniqueConstraint(fields=["period", "employee"], name="uq_payroll_entry_period_employee"),
        ]

    def apply_breakdown(self, breakdown):
        """
        Copy a SalaryBreakdown onto the entry. Components are stored first
        and the totals are derived from the stored values, so
        gross == basic + sum(allowances) and net == gross - sum(deductions)
        hold exactly on what is persisted.
        """
        basic = to_storage(breakdown.basic_salary)
        stored_allowances = {name: to_storage(amount) for name, amount in breakdown.allowances.items()}
        stored_deductions = {name: to_storage(amount) for name, amount in breakdown.deductions.items()}
        gross = basic + sum(stored_allowances.values(), Decimal("0"))

        self.basic_salary = basic
        self.allowances = {name: str(amount) for name, amount in stored_allowances.items()}
        self.deductions = {name: str(amount) for name, amount in stored_deductions.items()}
        self.gross_salary = gross
        self.net_salary = gross - sum(stored_deductions.values(), Decimal("0"))

    def __str__(self):
        return f"{self.employee_name} - {self.period}"


class Payslip(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    payroll_entry = models.ForeignKey(PayrollEntry, on_delete=models.SET_NULL, null=True, blank=True, related_name="payslips")
    employee = models.ForeignKey('employees.EmployeeProfile', on_delete=models.CASCADE, related_name="payslips")
    employee_name = models.CharField(max_length=200, blank=True, default="")

    month = models.PositiveSmallIntegerField()
    year = models.PositiveIntegerField()

    basic_salary = models.DecimalField(max_digits=24, decimal_places=8)
    allowances = models.JSONField(default=dict)
    deductions = models.JSONField(default=dict)
    gross_salary = models.DecimalField(max_digits=24, decimal_places=8)
    net_salary = models.DecimalField(max_digits=24, decimal_places=8)

    working_days = models.PositiveIntegerField(default=0)
    present_days = models.PositiveIntegerField(default=0)
    paid_leaves = models.PositiveIntegerField(default=0)
    unpaid_leaves = models.PositiveIntegerField(default=0)
    overtime_hours = models.DecimalField(max_digits=8, decimal_places=2, default=0)

    generated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(fields=["employee", "month", "year"], name="uq_payslip_employee_month_year"),
        ]

    def __str__(self):
        return f"Payslip {self.employee_name} {self.month:02d}/{self.year}"
