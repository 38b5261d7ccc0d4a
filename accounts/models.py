"""Database models for armory users and their GW2 API keys."""

from __future__ import annotations

from django.conf import settings
from django.db import models


class Profile(models.Model):
    """Public armory identity attached to a Django auth user.

    The alias is the user's handle in public URLs (`/<alias>`), so it is unique.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    alias = models.CharField(max_length=64, unique=True)
    email_validated = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        """Return the alias for display contexts."""

        return self.alias


class ApiToken(models.Model):
    """A GW2 API key registered by a profile.

    `permissions` and `guilds` mirror the comma-separated lists returned by the
    GW2 API so they can be filtered with simple `contains` lookups.
    """

    profile = models.ForeignKey(Profile, on_delete=models.CASCADE, related_name="api_tokens")
    token = models.CharField(max_length=128, unique=True)
    account_id = models.CharField(max_length=64, db_index=True)
    account_name = models.CharField(max_length=64, db_index=True)
    world = models.CharField(max_length=32, blank=True, default="")
    permissions = models.CharField(max_length=255, blank=True, default="")
    guilds = models.TextField(blank=True, default="")
    primary = models.BooleanField(default=False)
    valid = models.BooleanField(default=True)
    stub = models.BooleanField(
        default=False,
        help_text="Placeholder rows skipped by scheduled fetches.",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "API Token"
        verbose_name_plural = "API Tokens"

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"ApiToken(account={self.account_name}, primary={self.primary}, valid={self.valid})"

    @property
    def permission_list(self) -> list[str]:
        """Return permissions as a list."""

        return [item for item in self.permissions.split(",") if item]

    @property
    def guild_ids(self) -> list[str]:
        """Return guild ids as a list."""

        return [item for item in self.guilds.split(",") if item]
