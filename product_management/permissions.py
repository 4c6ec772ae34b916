from rest_framework.permissions import BasePermission, SAFE_METHODS


class CanManageProduct(BasePermission):
    """
    Restricts product writes to staff and to the brand account owning the
    product's brand. Creating a product requires a brand account with a
    registered brand (or staff).
    """
    message = "Only the owning brand account or an admin can manage this product."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if view.action != 'create':
            return True
        return user.is_staff or (user.is_brand and hasattr(user, 'brand'))

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return obj.is_managed_by(request.user)


class BrandPermission(BasePermission):
    """
    - Safe methods are public.
    - Staff can do anything.
    - A brand account may create a brand (it becomes the owner) and update
      the brand it owns. Deleting brands is reserved for staff.
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.is_staff:
            return True
        if request.method == 'POST':
            return user.is_brand
        return request.method in ('PUT', 'PATCH')

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS or request.user.is_staff:
            return True
        return obj.owner_id == request.user.id
