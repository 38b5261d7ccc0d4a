"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("users/me/tokens/", views.add_api_token, name="add_api_token"),
    path("users/<str:alias>/", views.user_detail, name="user_detail"),
    path("guilds/<str:name>/", views.guild_detail, name="guild_detail"),
    path("characters/<str:name>/", views.character_detail, name="character_detail"),
    path("leaderboards/pvp/", views.pvp_leaderboard, name="pvp_leaderboard"),
    path("leaderboards/pvp/<str:region>/", views.pvp_leaderboard, name="pvp_leaderboard_region"),
    path("sitemap.xml", views.sitemap_index, name="sitemap_index"),
    path("sitemap-<slug:resource>-<int:page>.xml", views.sitemap_page, name="sitemap_page"),
]
