from datetime import date, time
from decimal import Decimal

from django.test import TestCase, override_settings

from apps.attendance.facts import count_working_days, get_attendance_facts
from apps.attendance.models import Attendance, Leave, LeaveType
from apps.employees.models import EmployeeProfile


class AttendanceFactsTests(TestCase):
    def setUp(self):
        self.employee = EmployeeProfile.objects.create(
            name="Ravi Kumar", employee_code="EMP-010", date_of_joining=date(2023, 1, 1)
        )
        self.casual = LeaveType.objects.create(name="Casual", is_paid=True)
        self.unpaid = LeaveType.objects.create(name="Loss of Pay", is_paid=False)

    def test_working_days_skip_sundays(self):
        # February 2024: 29 days, four Sundays
        self.assertEqual(count_working_days(2024, 2), 25)

    @override_settings(PAYROLL_WEEKLY_OFF_DAYS=[5, 6])
    def test_working_days_follow_configured_weekend(self):
        # February 2024: four Saturdays and four Sundays
        self.assertEqual(count_working_days(2024, 2), 21)

    def test_counts_present_days_leaves_and_overtime(self):
        Attendance.objects.create(
            employee=self.employee, date=date(2024, 2, 5), is_present=True,
            in_time=time(9, 0), out_time=time(19, 30),
        )
        Attendance.objects.create(employee=self.employee, date=date(2024, 2, 6), is_present=True)
        # Sunday work is not a working day
        Attendance.objects.create(employee=self.employee, date=date(2024, 2, 4), is_present=True)
        Attendance.objects.create(employee=self.employee, date=date(2024, 2, 12), is_present=False)
        # Other month
        Attendance.objects.create(employee=self.employee, date=date(2024, 3, 1), is_present=True)

        Leave.objects.create(employee=self.employee, date=date(2024, 2, 7), leave_type=self.casual, approved=True)
        Leave.objects.create(employee=self.employee, date=date(2024, 2, 8), leave_type=self.unpaid, approved=True)
        Leave.objects.create(employee=self.employee, date=date(2024, 2, 9), leave_type=self.unpaid, approved=False)

        facts = get_attendance_facts(self.employee, 2024, 2)

        self.assertEqual(facts.working_days, 25)
        self.assertEqual(facts.present_days, 2)
        self.assertEqual(facts.paid_leaves, 1)
        self.assertEqual(facts.unpaid_leaves, 1)
        self.assertEqual(facts.overtime_hours, Decimal("2.50"))

    def test_no_records(self):
        facts = get_attendance_facts(self.employee, 2024, 2)

        self.assertEqual(facts.present_days, 0)
        self.assertEqual(facts.paid_leaves, 0)
        self.assertEqual(facts.unpaid_leaves, 0)
        self.assertEqual(facts.overtime_hours, Decimal("0"))

    def test_present_day_with_leave_counts_once(self):
        Attendance.objects.create(employee=self.employee, date=date(2024, 2, 5), is_present=True)
        Leave.objects.create(employee=self.employee, date=date(2024, 2, 5), leave_type=self.unpaid, approved=True)

        facts = get_attendance_facts(self.employee, 2024, 2)

        self.assertEqual(facts.present_days, 1)
        self.assertEqual(facts.unpaid_leaves, 0)
        self.assertEqual(facts.present_days + facts.unpaid_leaves, 1)
