from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsBrandAccount(BasePermission):
    """
    Allows access only to authenticated brand accounts.
    """
    message = "Only brand accounts can perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_brand)


class IsStaffOrReadOnly(BasePermission):
    """
    Safe methods are public; writes are reserved for staff.
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and user.is_staff)
