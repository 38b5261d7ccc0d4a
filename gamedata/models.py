"""Database models for game data ingested from the GW2 API."""

from __future__ import annotations

from django.db import models

from accounts.models import ApiToken


class Guild(models.Model):
    """A guild referenced by at least one registered account."""

    guild_id = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=64, unique=True)
    tag = models.CharField(max_length=8, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"{self.name} [{self.tag}]" if self.tag else self.name


class Character(models.Model):
    """A character read through an owner's API key.

    Character names are globally unique in GW2, which is what allows public
    URLs of the form `/<alias>/c/<name>`. Every character belongs to exactly
    one API key; deleting the key deletes its characters.
    """

    api_token = models.ForeignKey(
        ApiToken,
        on_delete=models.CASCADE,
        related_name="characters",
    )
    name = models.CharField(max_length=64, unique=True)
    race = models.CharField(max_length=16)
    gender = models.CharField(max_length=16)
    profession = models.CharField(max_length=16)
    level = models.PositiveSmallIntegerField(default=1)
    guild = models.ForeignKey(
        Guild,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="characters",
    )
    created = models.DateTimeField(null=True, blank=True)
    age = models.PositiveIntegerField(default=0)
    deaths = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"Character({self.name}, {self.profession}, level={self.level})"


class PvpStanding(models.Model):
    """One row of a season's public PvP ladder."""

    class Region(models.TextChoices):
        NA = "na", "North America"
        EU = "eu", "Europe"

    season_id = models.CharField(max_length=64, db_index=True)
    region = models.CharField(max_length=2, choices=Region.choices)
    rank = models.PositiveIntegerField()
    account_name = models.CharField(max_length=64)
    rating = models.IntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "PvP Standing"
        verbose_name_plural = "PvP Standings"
        ordering = ("region", "rank")
        constraints = [
            models.UniqueConstraint(
                fields=["season_id", "region", "rank"], name="uniq_pvp_standing_season_region_rank"
            ),
        ]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"PvpStanding({self.region} #{self.rank} {self.account_name})"
