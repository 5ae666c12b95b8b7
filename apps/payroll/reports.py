import io

from openpyxl import Workbook
from openpyxl.styles import Alignment
from openpyxl.utils import get_column_letter

from apps.salary.calculator import TAX, PF, UNPAID_LEAVE, PENALTIES
from apps.salary.utils import money, decimal_map, sum_amounts

DEDUCTION_COLUMNS = (TAX, PF, UNPAID_LEAVE, PENALTIES)


def build_payroll_register(period):
    """One row per entry of the period, amounts rounded for presentation."""
    entries = period.entries.select_related("employee").order_by("employee_name")

    wb = Workbook()
    ws = wb.active
    ws.title = f"Payroll {period.month:02d}-{period.year}"
    headers = [
        "Employee", "Code", "Working Days", "Present Days", "Paid Leaves", "Unpaid Leaves",
        "Overtime Hours", "Basic Salary", "Total Allowances", "Gross Salary",
        "Tax", "PF", "Unpaid Leave", "Penalties", "Total Deductions", "Net Salary", "Status",
    ]
    transformed = []
    for h in headers:
        parts = h.split()
        if len(parts) == 2:
            transformed.append(f"{parts[0]}\n{parts[1]}")
        else:
            transformed.append(h)
    ws.append(transformed)

    for e in entries:
        deductions = decimal_map(e.deductions)
        ws.append([
            e.employee_name,
            e.employee.employee_code,
            e.working_days,
            e.present_days,
            e.paid_leaves,
            e.unpaid_leaves,
            float(e.overtime_hours or 0),
            float(money(e.basic_salary)),
            float(money(sum_amounts(e.allowances))),
            float(money(e.gross_salary)),
            *[float(money(deductions.get(name, 0))) for name in DEDUCTION_COLUMNS],
            float(money(sum_amounts(e.deductions))),
            float(money(e.net_salary)),
            e.status,
        ])

    ws.append([])
    ws.append(["Total"] + [""] * (len(headers) - 3) + [float(money(period.total_amount)), period.status])

    for cell in ws[1]:
        cell.alignment = Alignment(wrap_text=True, horizontal="center")
    for col in range(1, len(headers) + 1):
        max_length = 0
        column = get_column_letter(col)
        for cell in ws[column]:
            val = str(cell.value) if cell.value is not None else ""
            if len(val) > max_length:
                max_length = len(val)
        ws.column_dimensions[column].width = min(max_length + 2, 25)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
