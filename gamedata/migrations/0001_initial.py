"""Create Guild, Character and PvpStanding.

Characters keep a nullable link to the API token they were read through so a
revoked key does not delete public history.
"""

from __future__ import annotations

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    """Initial schema for the gamedata app."""

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Guild",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("guild_id", models.CharField(max_length=64, unique=True)),
                ("name", models.CharField(max_length=64, unique=True)),
                ("tag", models.CharField(blank=True, default="", max_length=8)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="Character",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=64, unique=True)),
                ("race", models.CharField(max_length=16)),
                ("gender", models.CharField(max_length=16)),
                ("profession", models.CharField(max_length=16)),
                ("level", models.PositiveSmallIntegerField(default=1)),
                ("created", models.DateTimeField(blank=True, null=True)),
                ("age", models.PositiveIntegerField(default=0)),
                ("deaths", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "api_token",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="characters",
                        to="accounts.apitoken",
                    ),
                ),
                (
                    "guild",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="characters",
                        to="gamedata.guild",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="PvpStanding",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("season_id", models.CharField(db_index=True, max_length=64)),
                (
                    "region",
                    models.CharField(choices=[("na", "North America"), ("eu", "Europe")], max_length=2),
                ),
                ("rank", models.PositiveIntegerField()),
                ("account_name", models.CharField(max_length=64)),
                ("rating", models.IntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "PvP Standing",
                "verbose_name_plural": "PvP Standings",
                "ordering": ("region", "rank"),
            },
        ),
        migrations.AddConstraint(
            model_name="pvpstanding",
            constraint=models.UniqueConstraint(
                fields=("season_id", "region", "rank"), name="uniq_pvp_standing_season_region_rank"
            ),
        ),
    ]
