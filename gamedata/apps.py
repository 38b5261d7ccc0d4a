"""Django app configuration for GameData."""

from __future__ import annotations

from django.apps import AppConfig


class GameDataConfig(AppConfig):
    """AppConfig for data ingested from the GW2 API."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "gamedata"
