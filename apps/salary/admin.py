from django.contrib import admin
from .models import SalaryStructure


@admin.register(SalaryStructure)
class SalaryStructureAdmin(admin.ModelAdmin):
    list_display = ("employee", "basic_salary", "tax_percentage", "pf_percentage", "effective_from", "effective_to")
    list_filter = ("effective_from",)
    search_fields = ("employee__employee_code", "employee__name")
    readonly_fields = ("created_by", "created_at", "updated_at")
