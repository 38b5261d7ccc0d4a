"""Create Profile and ApiToken.

Profiles hold the public alias used in armory URLs; API tokens hold the GW2
keys each profile registered along with the account metadata read at
registration time.
"""

from __future__ import annotations

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Initial schema for the accounts app."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("alias", models.CharField(max_length=64, unique=True)),
                ("email_validated", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="ApiToken",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("token", models.CharField(max_length=128, unique=True)),
                ("account_id", models.CharField(db_index=True, max_length=64)),
                ("account_name", models.CharField(db_index=True, max_length=64)),
                ("world", models.CharField(blank=True, default="", max_length=32)),
                ("permissions", models.CharField(blank=True, default="", max_length=255)),
                ("guilds", models.TextField(blank=True, default="")),
                ("primary", models.BooleanField(default=False)),
                ("valid", models.BooleanField(default=True)),
                (
                    "stub",
                    models.BooleanField(
                        default=False,
                        help_text="Placeholder rows skipped by scheduled fetches.",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "profile",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="api_tokens",
                        to="accounts.profile",
                    ),
                ),
            ],
            options={
                "verbose_name": "API Token",
                "verbose_name_plural": "API Tokens",
            },
        ),
    ]
