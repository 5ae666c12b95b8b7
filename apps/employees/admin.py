from django.contrib import admin
from .models import Department, Designation, EmployeeProfile

admin.site.register(Department)
admin.site.register(Designation)

@admin.register(EmployeeProfile)
class EmployeeProfileAdmin(admin.ModelAdmin):
    list_display = (
        "employee_code",
        "name",
        "username",
        "department",
        "designation",
        "status",
        "is_active",
    )
    search_fields = ("employee_code", "name", "username")
    list_filter = ("department", "designation", "status", "is_active")
    readonly_fields = ("created_at", "updated_at")
