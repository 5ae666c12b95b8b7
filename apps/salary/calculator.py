"""
Salary calculation.

Pure functions only: no database access, so entries can be recomputed from
their stored inputs and the maths can be tested without a store.

    gross       = basic + sum(allowances)
    Tax         = gross * tax% / 100
    PF          = basic * pf% / 100
    UnpaidLeave = basic / working_days * unpaid_leaves   (only if unpaid_leaves > 0)
    Penalties   = penalties                              (only if penalties > 0)
    net         = gross - sum(deductions)

Everything is carried at full Decimal precision; rounding is the caller's
job when presenting (see ``apps.salary.utils.money``).
"""
from dataclasses import dataclass, field
from decimal import Decimal

from apps.payroll.exceptions import InvalidAttendanceData
from .utils import to_decimal, decimal_map

TAX = "Tax"
PF = "PF"
UNPAID_LEAVE = "UnpaidLeave"
PENALTIES = "Penalties"

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class SalaryBreakdown:
    basic_salary: Decimal
    allowances: dict = field(default_factory=dict)
    deductions: dict = field(default_factory=dict)
    gross_salary: Decimal = Decimal("0")
    net_salary: Decimal = Decimal("0")

    @property
    def total_allowances(self):
        return sum(self.allowances.values(), Decimal("0"))

    @property
    def total_deductions(self):
        return sum(self.deductions.values(), Decimal("0"))


def _count(value, name):
    try:
        value = to_decimal(value, name)
    except ValueError as e:
        raise InvalidAttendanceData(str(e))
    if value < 0:
        raise InvalidAttendanceData(f"{name} must not be negative")
    return value


def calculate_salary(basic_salary, allowances, tax_percentage, pf_percentage,
                     working_days, unpaid_leaves=0, penalties=0):
    basic = to_decimal(basic_salary, "basic_salary")
    allowance_amounts = decimal_map(allowances)
    working_days = _count(working_days, "working_days")
    unpaid_leaves = _count(unpaid_leaves, "unpaid_leaves")
    penalties = to_decimal(penalties, "penalties")

    if working_days == 0:
        raise InvalidAttendanceData("working_days must be greater than zero")
    if unpaid_leaves > working_days:
        raise InvalidAttendanceData(
            f"unpaid_leaves ({unpaid_leaves}) cannot exceed working_days ({working_days})"
        )

    gross = basic + sum(allowance_amounts.values(), Decimal("0"))

    deductions = {
        TAX: gross * to_decimal(tax_percentage, "tax_percentage") / HUNDRED,
        PF: basic * to_decimal(pf_percentage, "pf_percentage") / HUNDRED,
    }
    if unpaid_leaves > 0:
        deductions[UNPAID_LEAVE] = basic / working_days * unpaid_leaves
    if penalties > 0:
        deductions[PENALTIES] = penalties

    net = gross - sum(deductions.values(), Decimal("0"))
    return SalaryBreakdown(
        basic_salary=basic,
        allowances=allowance_amounts,
        deductions=deductions,
        gross_salary=gross,
        net_salary=net,
    )
