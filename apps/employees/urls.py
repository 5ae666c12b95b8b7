# apps/employees/urls.py

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    AdminLoginView,
    DepartmentViewSet,
    DesignationViewSet,
    EmployeeProfileViewSet,
)

router = DefaultRouter()
router.register(r'departments', DepartmentViewSet)
router.register(r'designations', DesignationViewSet)
router.register(r'profiles', EmployeeProfileViewSet)

urlpatterns = [
    path('admin-login/', AdminLoginView.as_view(), name='admin_login'),
    path('', include(router.urls)),
]
