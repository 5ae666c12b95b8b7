from django.urls import path, include
from .views import SalaryStructureViewSet, ActiveSalaryStructureAPIView

from rest_framework.routers import DefaultRouter

router = DefaultRouter()
router.register(r'structures', SalaryStructureViewSet)


urlpatterns = [
    path('structures/active/<int:employee_id>/', ActiveSalaryStructureAPIView.as_view(), name='active-salary-structure'),
    path('', include(router.urls)),
]
