from django.http import HttpResponse
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.employees.utils import get_employee, get_employee_by_username
from . import services
from .payslips import get_payslip, payslips_for_employee
from .permissions import IsHRUser, IsPayrollAdmin
from .reports import build_payroll_register
from .serializers import (
    ApprovePayrollSerializer,
    CreatePayrollPeriodSerializer,
    PayrollEntrySerializer,
    PayrollPeriodSerializer,
    PayslipSerializer,
    RejectPayrollSerializer,
    UpdatePayrollEntrySerializer,
    VersionedActionSerializer,
)


def _actor(request):
    user = request.user
    return user.get_username(), (user.get_full_name() or user.get_username())


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class PayrollPeriodViewSet(viewsets.ViewSet):
    """
    HR drafts, generates and submits; an administrator approves or rejects.
    """
    permission_classes = [IsHRUser]

    def get_permissions(self):
        if self.action in ("approve", "reject"):
            return [IsPayrollAdmin()]
        return super().get_permissions()

    def list(self, request):
        return Response(PayrollPeriodSerializer(services.list_periods(), many=True).data)

    def create(self, request):
        data = _validated(CreatePayrollPeriodSerializer, request.data)
        actor, actor_name = _actor(request)
        period = services.create_period(
            data["month"], data["year"], notes=data["hr_notes"], actor=actor, actor_name=actor_name
        )
        return Response(PayrollPeriodSerializer(period).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response(PayrollPeriodSerializer(services.get_period(pk)).data)

    def destroy(self, request, pk=None):
        data = _validated(VersionedActionSerializer, request.query_params)
        services.delete_period(pk, expected_version=data.get("version"))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def generate(self, request, pk=None):
        data = _validated(VersionedActionSerializer, request.data)
        period = services.generate_entries(pk, expected_version=data.get("version"))
        return Response(PayrollPeriodSerializer(period).data)

    @action(detail=True, methods=["get"])
    def entries(self, request, pk=None):
        return Response(PayrollEntrySerializer(services.list_entries(pk), many=True).data)

    @action(detail=True, methods=["post"])
    def submit(self, request, pk=None):
        data = _validated(VersionedActionSerializer, request.data)
        period = services.submit_period(pk, expected_version=data.get("version"))
        return Response(PayrollPeriodSerializer(period).data)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        data = _validated(ApprovePayrollSerializer, request.data)
        admin_id, admin_name = _actor(request)
        period = services.approve_period(
            pk, admin_id, notes=data["admin_notes"], admin_name=admin_name,
            expected_version=data.get("version"),
        )
        return Response(PayrollPeriodSerializer(period).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        data = _validated(RejectPayrollSerializer, request.data)
        admin_id, admin_name = _actor(request)
        period = services.reject_period(
            pk, admin_id, reason=data["rejection_reason"], admin_name=admin_name,
            expected_version=data.get("version"),
        )
        return Response(PayrollPeriodSerializer(period).data)


class PayrollEntryViewSet(viewsets.ViewSet):
    permission_classes = [IsHRUser]

    def retrieve(self, request, pk=None):
        return Response(PayrollEntrySerializer(services.get_entry(pk)).data)

    def partial_update(self, request, pk=None):
        patch = dict(_validated(UpdatePayrollEntrySerializer, request.data))
        version = patch.pop("version", None)
        entry = services.update_entry(pk, patch, expected_version=version)
        return Response(PayrollEntrySerializer(entry).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk)


class PayrollRegisterExcelAPIView(APIView):
    permission_classes = [IsHRUser]

    def get(self, request, pk):
        period = services.get_period(pk)
        content = build_payroll_register(period)
        resp = HttpResponse(content, content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
        resp['Content-Disposition'] = f'attachment; filename="payroll_register_{period.month:02d}_{period.year}.xlsx"'
        return resp


class MyPayslipsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        employee = get_employee_by_username(request.user.get_username())
        return Response(PayslipSerializer(payslips_for_employee(employee.pk), many=True).data)


class MyPayslipAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, month, year):
        employee = get_employee_by_username(request.user.get_username())
        return Response(PayslipSerializer(get_payslip(employee.pk, month, year)).data)


class EmployeePayslipAPIView(APIView):
    permission_classes = [IsHRUser]

    def get(self, request, employee_id, month, year):
        employee = get_employee(employee_id)
        return Response(PayslipSerializer(get_payslip(employee.pk, month, year)).data)
