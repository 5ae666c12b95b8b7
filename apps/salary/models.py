import logging
import uuid
from datetime import timedelta
from decimal import Decimal

from django.db import models, transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from apps.payroll.exceptions import MissingSalaryStructure, OverlappingSalaryStructure
from .utils import normalize_amounts, to_decimal, decimal_map, sum_amounts

logger = logging.getLogger(__name__)


class SalaryStructureQuerySet(models.QuerySet):
    def active_on(self, as_of):
        return self.filter(effective_from__lte=as_of).filter(
            Q(effective_to__isnull=True) | Q(effective_to__gte=as_of)
        )


class SalaryStructureManager(models.Manager.from_queryset(SalaryStructureQuerySet)):

    def for_employee(self, employee_id):
        return self.filter(employee_id=employee_id).order_by("-effective_from", "-created_at")

    def resolve(self, employee_id, as_of):
        """
        Structure in effect for the employee on ``as_of``. Overlapping
        records are tolerated: the latest effective_from wins, then the most
        recently created.
        """
        structure = (
            self.filter(employee_id=employee_id)
            .active_on(as_of)
            .order_by("-effective_from", "-created_at", "-pk")
            .first()
        )
        if structure is None:
            raise MissingSalaryStructure(
                f"No salary structure in effect for employee {employee_id} on {as_of.isoformat()}"
            )
        return structure

    def put(self, employee=None, effective_from=None, basic_salary=0, allowances=None,
            tax_percentage=0, pf_percentage=Decimal("12"), effective_to=None, created_by=None):
        """
        Issue a new structure. An open-ended new structure supersedes an
        open-ended window that started earlier (closed the day before); any
        other overlap is rejected.
        """
        errors = {}
        if employee is None:
            errors["employee"] = "This field is required."
        if effective_from is None:
            errors["effective_from"] = "This field is required."
        if errors:
            raise ValidationError(errors)
        if effective_to is not None and effective_to < effective_from:
            raise ValidationError({"effective_to": "Must not be before effective_from."})

        try:
            basic_salary = to_decimal(basic_salary, "basic_salary")
            tax_percentage = to_decimal(tax_percentage, "tax_percentage")
            pf_percentage = to_decimal(pf_percentage, "pf_percentage")
            allowances = normalize_amounts(allowances)
        except ValueError as e:
            raise ValidationError({"detail": str(e)})
        for name, value in (("basic_salary", basic_salary), ("tax_percentage", tax_percentage),
                            ("pf_percentage", pf_percentage)):
            if value < 0:
                raise ValidationError({name: "Must not be negative."})
        for name, value in (("tax_percentage", tax_percentage), ("pf_percentage", pf_percentage)):
            if value > 100:
                raise ValidationError({name: "Must not exceed 100."})

        with transaction.atomic():
            existing = list(self.select_for_update().filter(employee=employee))
            superseded = []
            for current in existing:
                starts_before_end = effective_to is None or current.effective_from <= effective_to
                ends_after_start = current.effective_to is None or current.effective_to >= effective_from
                if not (starts_before_end and ends_after_start):
                    continue
                # Only an open-ended structure may take over an open-ended one
                if effective_to is None and current.effective_to is None and current.effective_from < effective_from:
                    superseded.append(current)
                    continue
                raise OverlappingSalaryStructure(
                    f"Overlaps structure {current.pk} effective "
                    f"{current.effective_from.isoformat()} to "
                    f"{current.effective_to.isoformat() if current.effective_to else 'open'}"
                )

            for current in superseded:
                current.effective_to = effective_from - timedelta(days=1)
                current.save(update_fields=["effective_to", "updated_at"])
                logger.info(f"Salary structure {current.pk} superseded, closed on {current.effective_to}")

            structure = self.create(
                employee=employee,
                basic_salary=basic_salary,
                allowances=allowances,
                tax_percentage=tax_percentage,
                pf_percentage=pf_percentage,
                effective_from=effective_from,
                effective_to=effective_to,
                created_by=created_by,
            )
        logger.info(f"Salary structure {structure.pk} issued for employee {structure.employee_id} from {effective_from}")
        return structure


class SalaryStructure(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    employee = models.ForeignKey('employees.EmployeeProfile', on_delete=models.CASCADE, related_name="salary_structures")

    basic_salary = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    # name -> amount as a decimal string, e.g. {"HRA": "10000.00"}
    allowances = models.JSONField(default=dict, blank=True)

    tax_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    pf_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("12"))

    effective_from = models.DateField()
    effective_to = models.DateField(null=True, blank=True)

    created_by = models.CharField(max_length=150, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SalaryStructureManager()

    class Meta:
        ordering = ["employee_id", "-effective_from"]
        indexes = [models.Index(fields=["employee", "effective_from"])]

    @property
    def allowance_amounts(self):
        return decimal_map(self.allowances)

    @property
    def gross_salary(self):
        return to_decimal(self.basic_salary) + sum_amounts(self.allowances)

    def __str__(self):
        return f"{self.employee_id} from {self.effective_from}"
