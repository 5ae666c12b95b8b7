from datetime import date

from rest_framework import mixins, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.employees.utils import get_employee
from apps.payroll.permissions import IsHRUser
from .models import SalaryStructure
from .serializers import SalaryStructureSerializer


class SalaryStructureViewSet(mixins.CreateModelMixin,
                             mixins.ListModelMixin,
                             mixins.RetrieveModelMixin,
                             viewsets.GenericViewSet):
    """
    Structures are issued and superseded, never edited or deleted in place.
    """
    queryset = SalaryStructure.objects.select_related("employee").all()
    serializer_class = SalaryStructureSerializer
    permission_classes = [IsHRUser]

    def get_queryset(self):
        qs = super().get_queryset()
        employee_id = self.request.query_params.get("employee")
        if employee_id:
            qs = qs.filter(employee_id=employee_id)
        return qs

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user.get_username())


class ActiveSalaryStructureAPIView(APIView):
    permission_classes = [IsHRUser]

    def get(self, request, employee_id):
        as_of = request.query_params.get("as_of")
        try:
            as_of = date.fromisoformat(as_of) if as_of else date.today()
        except ValueError:
            return Response({"error": "Invalid date format. Use YYYY-MM-DD."}, status=status.HTTP_400_BAD_REQUEST)

        employee = get_employee(employee_id)
        structure = SalaryStructure.objects.resolve(employee.pk, as_of)
        return Response(SalaryStructureSerializer(structure).data)
