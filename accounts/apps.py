"""Django app configuration for Accounts."""

from __future__ import annotations

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """AppConfig for armory profiles and API keys."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"

    def ready(self) -> None:
        """Register Accounts signal handlers."""

        from accounts import signals  # noqa: F401
