from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    EmployeePayslipAPIView,
    MyPayslipAPIView,
    MyPayslipsAPIView,
    PayrollEntryViewSet,
    PayrollPeriodViewSet,
    PayrollRegisterExcelAPIView,
)

router = DefaultRouter()
router.register(r'periods', PayrollPeriodViewSet, basename='payroll-period')
router.register(r'entries', PayrollEntryViewSet, basename='payroll-entry')


urlpatterns = [
    path('periods/<uuid:pk>/register.xlsx', PayrollRegisterExcelAPIView.as_view(), name='payroll-register-excel'),
    path('payslips/my/', MyPayslipsAPIView.as_view(), name='my-payslips'),
    path('payslips/my/<int:month>/<int:year>/', MyPayslipAPIView.as_view(), name='my-payslip'),
    path('payslips/<int:employee_id>/<int:month>/<int:year>/', EmployeePayslipAPIView.as_view(), name='employee-payslip'),
    path('', include(router.urls)),
]
