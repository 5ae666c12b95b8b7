from django.db import models
from django.utils import timezone


class Department(models.Model):
    name = models.CharField(max_length=100)

    def __str__(self):
        return self.name

class Designation(models.Model):
    title = models.CharField(max_length=100)

    def __str__(self):
        return self.title


class EmployeeProfile(models.Model):
    # Basic Details
    name = models.CharField(max_length=200, null=True, blank=True)
    employee_code = models.CharField(max_length=50, unique=True)
    # Login name of the employee's user account, used for self-service payslips
    username = models.CharField(max_length=150, unique=True, null=True, blank=True)
    department = models.ForeignKey(Department, on_delete=models.SET_NULL, null=True, blank=True)
    designation = models.ForeignKey(Designation, on_delete=models.SET_NULL, null=True, blank=True)

    # Employment Dates
    date_of_joining = models.DateField()
    date_of_resignation = models.DateField(null=True, blank=True)
    last_working_day = models.DateField(null=True, blank=True)

    STATUS_CHOICES = (
        ("working", "Working"),
        ("resigned", "Resigned"),
        ("terminated", "Terminated"),
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="working")

    # Meta fields
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["employee_code"]

    def save(self, *args, **kwargs):
        if self.pk:
            self.updated_at = timezone.now()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} ({self.employee_code})"
