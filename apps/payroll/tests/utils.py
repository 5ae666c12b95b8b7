from decimal import Decimal

from apps.attendance.facts import AttendanceFacts


def fixed_facts(working_days=22, unpaid_leaves=2):
    """Attendance provider returning the same counters for every employee."""
    def provider(employee, year, month):
        return AttendanceFacts(
            working_days=working_days,
            present_days=working_days - unpaid_leaves,
            paid_leaves=0,
            unpaid_leaves=unpaid_leaves,
            overtime_hours=Decimal("1.50"),
        )
    return provider
