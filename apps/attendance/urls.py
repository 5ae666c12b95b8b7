from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    AttendanceViewSet,
    LeaveViewSet,
    LeaveTypeViewSet,
    AttendanceFactsAPIView,
)


router = DefaultRouter()
router.register(r'attendance', AttendanceViewSet)
router.register(r'leaves', LeaveViewSet)
router.register(r'leave-types', LeaveTypeViewSet)

urlpatterns = [
    path('facts/<int:employee_id>/', AttendanceFactsAPIView.as_view(), name='attendance_facts'),
    path('', include(router.urls)),
]
