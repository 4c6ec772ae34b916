from django.contrib import admin
from .models import User
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _


class CustomUserAdmin(BaseUserAdmin):
    model = User

    list_display = (
        "id", "email", "username", "user_type", "is_verified", "is_active", "is_staff"
    )
    list_filter = ("user_type", "is_verified", "is_staff", "is_active")

    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        (None, {
            "fields": ("id", "username", "email", "password", "user_type")
        }),
        (_("Profile"), {
            "fields": ("bio", "avatar", "phone", "website", "is_verified")
        }),
        (_("Permissions"), {
            "fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions"),
        }),
        (_("Important dates"), {
            "fields": ("last_login", "date_joined", "created_at", "updated_at"),
        }),
    )

    # Fields shown when creating a new user via admin
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "username", "user_type", "password1", "password2"),
        }),
    )

    search_fields = ("email", "username")
    ordering = ("email",)


admin.site.register(User, CustomUserAdmin)
