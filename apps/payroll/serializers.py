from rest_framework import serializers

from apps.salary.serializers import MoneyField, MoneyMapField
from .models import PayrollPeriod, PayrollEntry, Payslip


class PayrollPeriodSerializer(serializers.ModelSerializer):
    total_amount = MoneyField()

    class Meta:
        model = PayrollPeriod
        fields = [
            "id", "month", "year", "status",
            "created_by", "created_by_name", "approved_by", "approved_by_name",
            "total_employees", "total_amount",
            "hr_notes", "admin_notes", "rejection_reason",
            "skipped_employees", "version",
            "created_at", "generated_at", "submitted_at", "approved_at", "rejected_at",
        ]
        read_only_fields = fields


class CreatePayrollPeriodSerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=1900, max_value=9999)
    hr_notes = serializers.CharField(required=False, allow_blank=True, default="")


class VersionedActionSerializer(serializers.Serializer):
    version = serializers.IntegerField(required=False, min_value=0)


class ApprovePayrollSerializer(VersionedActionSerializer):
    admin_notes = serializers.CharField(required=False, allow_blank=True, default="")


class RejectPayrollSerializer(VersionedActionSerializer):
    rejection_reason = serializers.CharField(required=False, allow_blank=True, default="")


class PayrollEntrySerializer(serializers.ModelSerializer):
    period = serializers.PrimaryKeyRelatedField(read_only=True)
    employee_code = serializers.CharField(source="employee.employee_code", read_only=True)
    basic_salary = MoneyField()
    allowances = MoneyMapField(read_only=True)
    deductions = MoneyMapField(read_only=True)
    gross_salary = MoneyField()
    net_salary = MoneyField()

    class Meta:
        model = PayrollEntry
        fields = [
            "id", "period", "employee", "employee_name", "employee_code",
            "basic_salary", "allowances", "deductions",
            "tax_percentage", "pf_percentage",
            "gross_salary", "net_salary",
            "working_days", "present_days", "paid_leaves", "unpaid_leaves",
            "overtime_hours", "penalties", "notes", "status",
            "created_at", "updated_at",
        ]
        read_only_fields = fields


class UpdatePayrollEntrySerializer(VersionedActionSerializer):
    basic_salary = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    allowances = MoneyMapField(required=False)
    working_days = serializers.IntegerField(min_value=0, required=False)
    present_days = serializers.IntegerField(min_value=0, required=False)
    paid_leaves = serializers.IntegerField(min_value=0, required=False)
    unpaid_leaves = serializers.IntegerField(min_value=0, required=False)
    overtime_hours = serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0, required=False)
    penalties = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class PayslipSerializer(serializers.ModelSerializer):
    basic_salary = MoneyField()
    allowances = MoneyMapField(read_only=True)
    deductions = MoneyMapField(read_only=True)
    gross_salary = MoneyField()
    net_salary = MoneyField()

    class Meta:
        model = Payslip
        fields = [
            "id", "payroll_entry", "employee", "employee_name", "month", "year",
            "basic_salary", "allowances", "deductions", "gross_salary", "net_salary",
            "working_days", "present_days", "paid_leaves", "unpaid_leaves", "overtime_hours",
            "generated_at",
        ]
        read_only_fields = fields
