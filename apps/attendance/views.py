from rest_framework import viewsets
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

from apps.employees.utils import get_employee
from apps.payroll.permissions import IsHRUser
from .facts import get_attendance_facts
from .models import Attendance, Leave, LeaveType
from .serializers import AttendanceSerializer, LeaveSerializer, LeaveTypeSerializer, AttendanceFactsSerializer


class AttendanceViewSet(viewsets.ModelViewSet):
    queryset = Attendance.objects.select_related('employee').all()
    serializer_class = AttendanceSerializer
    permission_classes = [IsHRUser]

class LeaveViewSet(viewsets.ModelViewSet):
    queryset = Leave.objects.select_related('employee', 'leave_type').all()
    serializer_class = LeaveSerializer
    permission_classes = [IsHRUser]

class LeaveTypeViewSet(viewsets.ModelViewSet):
    queryset = LeaveType.objects.all()
    serializer_class = LeaveTypeSerializer
    permission_classes = [IsHRUser]


class AttendanceFactsAPIView(APIView):
    """Monthly attendance counters as the payroll engine sees them."""
    permission_classes = [IsHRUser]

    def get(self, request, employee_id):
        try:
            year = int(request.query_params.get("year"))
            month = int(request.query_params.get("month"))
        except (TypeError, ValueError):
            return Response({"error": "year and month query parameters are required."}, status=status.HTTP_400_BAD_REQUEST)
        if not 1 <= month <= 12:
            return Response({"error": "month must be between 1 and 12."}, status=status.HTTP_400_BAD_REQUEST)

        employee = get_employee(employee_id)
        facts = get_attendance_facts(employee, year, month)
        return Response(AttendanceFactsSerializer(facts).data)
