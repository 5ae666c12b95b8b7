from rest_framework import serializers
from .models import Department, Designation, EmployeeProfile


class DepartmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ['id', 'name']

class DesignationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Designation
        fields = ['id', 'title']


class EmployeeProfileSerializer(serializers.ModelSerializer):
    department = DepartmentSerializer(read_only=True)
    designation = DesignationSerializer(read_only=True)

    department_id = serializers.PrimaryKeyRelatedField(
        source="department", queryset=Department.objects.all(), write_only=True, required=False, allow_null=True
    )
    designation_id = serializers.PrimaryKeyRelatedField(
        source="designation", queryset=Designation.objects.all(), write_only=True, required=False, allow_null=True
    )

    class Meta:
        model = EmployeeProfile
        fields = [
            "id",
            "name",
            "employee_code",
            "username",
            "department", "designation",
            "department_id", "designation_id",
            "date_of_joining", "date_of_resignation", "last_working_day",
            "status",
            "is_active",
        ]
        read_only_fields = ["is_active"]

    def validate(self, attrs):
        status = attrs.get("status", getattr(self.instance, "status", "working"))
        resignation_date = attrs.get(
            "date_of_resignation", getattr(self.instance, "date_of_resignation", None)
        )

        if status in ["resigned", "terminated"] and not resignation_date:
            raise serializers.ValidationError({
                "date_of_resignation": "Resignation date must be provided if status is resigned or terminated."
            })

        return attrs

    def create(self, validated_data):
        validated_data["is_active"] = validated_data.get("status", "working") == "working"
        return super().create(validated_data)

    def update(self, instance, validated_data):
        status = validated_data.get("status", instance.status)
        # Leavers drop out of payroll generation
        instance.is_active = status not in ["resigned", "terminated"]
        return super().update(instance, validated_data)
