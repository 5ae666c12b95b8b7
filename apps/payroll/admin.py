from django.contrib import admin
from .models import PayrollPeriod, PayrollEntry, Payslip


class PayrollEntryInline(admin.TabularInline):
    model = PayrollEntry
    extra = 0
    can_delete = False
    fields = ("employee_name", "basic_salary", "gross_salary", "net_salary", "status")
    readonly_fields = fields


@admin.register(PayrollPeriod)
class PayrollPeriodAdmin(admin.ModelAdmin):
    # State changes go through the workflow API, never through the admin
    list_display = ("month", "year", "status", "total_employees", "total_amount", "created_by", "approved_by")
    list_filter = ("status", "year")
    inlines = [PayrollEntryInline]

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Payslip)
class PayslipAdmin(admin.ModelAdmin):
    list_display = ("employee_name", "month", "year", "gross_salary", "net_salary", "generated_at")
    list_filter = ("year", "month")
    search_fields = ("employee_name", "employee__employee_code")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
