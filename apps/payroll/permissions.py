from rest_framework.permissions import BasePermission

HR_GROUP = "HR"
ADMIN_GROUP = "Admin"


def _in_group(user, name):
    return user.groups.filter(name=name).exists()


class IsHRUser(BasePermission):
    message = "HR access required."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_staff or user.is_superuser or _in_group(user, HR_GROUP)


class IsPayrollAdmin(BasePermission):
    message = "Only an administrator can approve or reject payroll."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_superuser or _in_group(user, ADMIN_GROUP)
