from datetime import date
from io import StringIO

from django.contrib.auth.models import User
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.employees.models import EmployeeProfile
from apps.payroll.models import PayrollEntry, PayrollPeriod, Payslip
from apps.salary.models import SalaryStructure


class PayrollAPITestCase(TestCase):
    def setUp(self):
        self.hr = User.objects.create_user(username="hr1", password="pw", is_staff=True)
        self.admin = User.objects.create_superuser(username="boss", password="pw", email="boss@example.com")
        self.staff = User.objects.create_user(username="asha", password="pw")

        self.employee = EmployeeProfile.objects.create(
            name="Asha Menon", employee_code="EMP-001", username="asha", date_of_joining=date(2023, 1, 1)
        )
        SalaryStructure.objects.put(
            employee=self.employee, basic_salary="50000", allowances={"HRA": "10000", "DA": "5000"},
            tax_percentage="10", pf_percentage="12", effective_from=date(2024, 1, 1),
        )
        self.client = APIClient()
        self.client.force_authenticate(self.hr)

    def create_period(self, month=2, year=2024):
        return self.client.post("/api/payroll/periods/", {"month": month, "year": year}, format="json")

    def period_url(self, period_id, suffix=""):
        return f"/api/payroll/periods/{period_id}/{suffix}"


class PayrollPeriodAPITests(PayrollAPITestCase):
    def test_create_and_duplicate(self):
        resp = self.create_period()
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["status"], PayrollPeriod.DRAFT)
        self.assertEqual(resp.data["total_amount"], "0.00")
        self.assertEqual(resp.data["created_by"], "hr1")

        resp = self.create_period()
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["code"], "duplicate_period")

    def test_invalid_month(self):
        resp = self.create_period(month=13)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("month", resp.data)
        self.assertEqual(resp.data["code"], "invalid")

    def test_requires_hr(self):
        self.client.force_authenticate(self.staff)
        resp = self.create_period()
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_full_cycle(self):
        period_id = self.create_period().data["id"]

        resp = self.client.post(self.period_url(period_id, "generate/"), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["total_employees"], 1)
        # No attendance recorded, so no unpaid leave
        self.assertEqual(resp.data["total_amount"], "52500.00")

        entries = self.client.get(self.period_url(period_id, "entries/")).data
        self.assertEqual(len(entries), 1)
        entry = entries[0]
        self.assertEqual(entry["gross_salary"], "65000.00")
        self.assertEqual(entry["deductions"], {"Tax": "6500.00", "PF": "6000.00"})
        self.assertEqual(entry["working_days"], 25)

        resp = self.client.patch(f"/api/payroll/entries/{entry['id']}/", {"unpaid_leaves": 5}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["deductions"]["UnpaidLeave"], "10000.00")
        self.assertEqual(resp.data["net_salary"], "42500.00")
        self.assertEqual(self.client.get(self.period_url(period_id)).data["total_amount"], "42500.00")

        resp = self.client.post(self.period_url(period_id, "submit/"), {}, format="json")
        self.assertEqual(resp.data["status"], PayrollPeriod.PENDING_APPROVAL)

        resp = self.client.post(self.period_url(period_id, "submit/"), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["code"], "invalid_state")

        resp = self.client.patch(f"/api/payroll/entries/{entry['id']}/", {"penalties": "10"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

        resp = self.client.post(self.period_url(period_id, "approve/"), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        resp = self.client.post(self.period_url(period_id, "approve/"), {"admin_notes": "ok"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["status"], PayrollPeriod.APPROVED)
        self.assertEqual(resp.data["approved_by"], "boss")
        self.assertEqual(PayrollEntry.objects.get(pk=entry["id"]).status, PayrollEntry.APPROVED)

        self.client.force_authenticate(self.staff)
        resp = self.client.get("/api/payroll/payslips/my/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]["net_salary"], "42500.00")

        resp = self.client.get("/api/payroll/payslips/my/2/2024/")
        self.assertEqual(resp.data["unpaid_leaves"], 5)
        resp = self.client.get("/api/payroll/payslips/my/3/2024/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["code"], "not_found")

    def test_reject(self):
        period_id = self.create_period().data["id"]
        self.client.post(self.period_url(period_id, "generate/"), {}, format="json")
        self.client.post(self.period_url(period_id, "submit/"), {}, format="json")

        self.client.force_authenticate(self.admin)
        resp = self.client.post(
            self.period_url(period_id, "reject/"), {"rejection_reason": "Check HRA"}, format="json"
        )
        self.assertEqual(resp.data["status"], PayrollPeriod.REJECTED)
        self.assertEqual(resp.data["rejection_reason"], "Check HRA")
        self.assertFalse(Payslip.objects.exists())

    def test_stale_version_is_refused(self):
        created = self.create_period().data
        self.client.post(self.period_url(created["id"], "generate/"), {}, format="json")

        resp = self.client.post(
            self.period_url(created["id"], "submit/"), {"version": created["version"]}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["code"], "concurrent_modification")

    def test_register_export_and_delete(self):
        period_id = self.create_period().data["id"]
        self.client.post(self.period_url(period_id, "generate/"), {}, format="json")

        resp = self.client.get(self.period_url(period_id, "register.xlsx"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            resp["Content-Type"], "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )

        resp = self.client.delete(self.period_url(period_id))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PayrollPeriod.objects.exists())
        self.assertFalse(PayrollEntry.objects.exists())

        resp = self.client.get(self.period_url(period_id))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


class SalaryStructureAPITests(PayrollAPITestCase):
    def test_create_supersedes_and_resolves(self):
        resp = self.client.post("/api/salary/structures/", {
            "employee": self.employee.pk,
            "basic_salary": "55000",
            "allowances": {"HRA": "11000"},
            "tax_percentage": "10",
            "pf_percentage": "12",
            "effective_from": "2024-06-01",
        }, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["gross_salary"], "66000.00")
        self.assertEqual(resp.data["created_by"], "hr1")

        url = f"/api/salary/structures/active/{self.employee.pk}/"
        self.assertEqual(self.client.get(url, {"as_of": "2024-05-31"}).data["gross_salary"], "65000.00")
        self.assertEqual(self.client.get(url, {"as_of": "2024-06-01"}).data["gross_salary"], "66000.00")

        resp = self.client.get(url, {"as_of": "2023-12-31"})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["code"], "missing_salary_structure")

    def test_overlap_and_bad_input(self):
        payload = {"employee": self.employee.pk, "basic_salary": "1000", "effective_from": "2024-01-01"}
        resp = self.client.post("/api/salary/structures/", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "overlapping_salary_structure")

        payload = dict(payload, effective_from="2024-03-01", tax_percentage="120")
        resp = self.client.post("/api/salary/structures/", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["code"], "invalid")
        self.assertIn("tax_percentage", resp.data)


class PreparePayrollCommandTests(PayrollAPITestCase):
    def test_prepare_is_repeatable(self):
        out = StringIO()
        call_command("prepare_payroll", month=2, year=2024, stdout=out)
        call_command("prepare_payroll", month=2, year=2024, stdout=out)

        self.assertEqual(PayrollPeriod.objects.filter(month=2, year=2024).count(), 1)
        self.assertEqual(PayrollEntry.objects.count(), 1)
        self.assertIn("02/2024 is DRAFT", out.getvalue())
