"""
Authz permissions.

Role checks are expressed over the closed RoleChoices enum. Ownership of a
prescription is decided by ``can_mutate_prescription`` so every endpoint
applies the same rule.

RBAC matrix:
    - Admin: everything, including user management and audit logs
    - Doctor: create prescriptions, read/mutate own prescriptions
    - Pharmacist: catalog and own notifications only
"""
from rest_framework import permissions
from apps.authz.models import RoleChoices


def can_mutate_prescription(role, is_owner):
    """Admins may change any prescription; everyone else only their own."""
    return role == RoleChoices.ADMIN or bool(is_owner)


def denied_message(allowed_roles, role):
    return (
        f'Access denied. Required role(s): {", ".join(allowed_roles)}. '
        f'Your role: {role}'
    )


class RolePermission(permissions.BasePermission):
    """
    Allow only authenticated users whose role is in ``allowed_roles``.

    Subclasses set ``allowed_roles``. The 403 message names the required
    role(s) and the caller's role.
    """
    allowed_roles = ()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        if user.role in self.allowed_roles:
            return True

        self.message = denied_message(self.allowed_roles, user.role)
        return False


class IsAdmin(RolePermission):
    """Admin only: user administration and audit log endpoints."""
    allowed_roles = (RoleChoices.ADMIN,)


class IsDoctorOrAdmin(RolePermission):
    """Prescription authoring."""
    allowed_roles = (RoleChoices.DOCTOR, RoleChoices.ADMIN)
