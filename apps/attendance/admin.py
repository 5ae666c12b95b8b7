from django.contrib import admin
from .models import Attendance, Leave, LeaveType


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("employee", "date", "is_present", "in_time", "out_time", "marked_manually")
    list_filter = ("is_present", "marked_manually")


@admin.register(Leave)
class LeaveAdmin(admin.ModelAdmin):
    list_display = ("employee", "date", "leave_type", "approved")
    list_filter = ("approved", "leave_type")


admin.site.register(LeaveType)
