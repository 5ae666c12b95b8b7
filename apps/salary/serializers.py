from rest_framework import serializers

from apps.employees.models import EmployeeProfile
from .models import SalaryStructure
from .utils import money, decimal_map


class MoneyField(serializers.Field):
    """Read-only amount, rounded half-up to two places."""

    def __init__(self, **kwargs):
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        return str(money(value))


class MoneyMapField(serializers.Field):
    """name -> amount mapping; amounts rounded half-up to two places on output."""

    def to_representation(self, value):
        return {name: str(money(amount)) for name, amount in decimal_map(value).items()}

    def to_internal_value(self, data):
        if not isinstance(data, dict):
            raise serializers.ValidationError("Expected a mapping of name to amount.")
        return data


class SalaryStructureSerializer(serializers.ModelSerializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=EmployeeProfile.objects.all())
    employee_name = serializers.CharField(source="employee.name", read_only=True)
    employee_code = serializers.CharField(source="employee.employee_code", read_only=True)
    allowances = MoneyMapField(required=False)
    gross_salary = MoneyField()

    class Meta:
        model = SalaryStructure
        fields = [
            "id",
            "employee", "employee_name", "employee_code",
            "basic_salary", "allowances", "gross_salary",
            "tax_percentage", "pf_percentage",
            "effective_from", "effective_to",
            "created_by", "created_at", "updated_at",
        ]
        read_only_fields = ["created_by", "created_at", "updated_at"]

    def create(self, validated_data):
        return SalaryStructure.objects.put(**validated_data)
