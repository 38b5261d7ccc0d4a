"""Admin registrations for Accounts models."""

from __future__ import annotations

from django.contrib import admin

from accounts.models import ApiToken, Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """Admin configuration for Profile."""

    list_display = ("alias", "user", "email_validated", "updated_at")
    search_fields = ("alias", "user__email")


@admin.register(ApiToken)
class ApiTokenAdmin(admin.ModelAdmin):
    """Admin configuration for ApiToken."""

    list_display = ("profile", "account_name", "world", "primary", "valid", "stub")
    list_filter = ("valid", "primary", "stub")
    search_fields = ("account_name", "profile__alias")
