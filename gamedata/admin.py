"""Admin registrations for GameData models."""

from __future__ import annotations

from django.contrib import admin

from gamedata.models import Character, Guild, PvpStanding


@admin.register(Guild)
class GuildAdmin(admin.ModelAdmin):
    """Admin configuration for Guild."""

    list_display = ("name", "tag", "guild_id", "updated_at")
    search_fields = ("name", "tag")


@admin.register(Character)
class CharacterAdmin(admin.ModelAdmin):
    """Admin configuration for Character."""

    list_display = ("name", "profession", "level", "api_token", "guild", "updated_at")
    list_filter = ("profession", "race")
    search_fields = ("name", "api_token__account_name")
    list_select_related = ("api_token", "guild")


@admin.register(PvpStanding)
class PvpStandingAdmin(admin.ModelAdmin):
    """Admin configuration for PvpStanding."""

    list_display = ("season_id", "region", "rank", "account_name", "rating", "updated_at")
    list_filter = ("region", "season_id")
