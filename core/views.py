"""Views for public armory resources, API key registration and sitemaps."""

from __future__ import annotations

import json

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from accounts.services import add_token_for_profile, read_public_user
from core.clients import get_request_gw2_client
from core.services import read_character, read_guild, read_pvp_leaderboard
from core.sitemap import DjangoResourceStore, SitemapConfig, SitemapService, UnsupportedResourceError
from gamedata.models import PvpStanding
from gw2 import Gw2ApiError

XML_CONTENT_TYPE = "application/xml"


def _sitemap_service() -> SitemapService:
    """Return a sitemap service wired to the ORM and current settings."""

    return SitemapService(DjangoResourceStore(), SitemapConfig.from_settings())


@require_GET
def user_detail(request: HttpRequest, alias: str) -> JsonResponse:
    """Return a user's public profile and characters."""

    payload = read_public_user(alias)
    if payload is None:
        raise Http404(f"Unknown user: {alias}")
    return JsonResponse(payload)


@require_GET
def guild_detail(request: HttpRequest, name: str) -> JsonResponse:
    """Return a guild and its registered members."""

    payload = read_guild(name)
    if payload is None:
        raise Http404(f"Unknown guild: {name}")
    return JsonResponse(payload)


@require_GET
def character_detail(request: HttpRequest, name: str) -> JsonResponse:
    """Return a character and its owner."""

    payload = read_character(name)
    if payload is None:
        raise Http404(f"Unknown character: {name}")
    return JsonResponse(payload)


@require_GET
def pvp_leaderboard(request: HttpRequest, region: str | None = None) -> JsonResponse:
    """Return the latest PvP ladder, optionally for one region."""

    if region is not None and region not in PvpStanding.Region.values:
        raise Http404(f"Unknown region: {region}")
    return JsonResponse({"region": region, "standings": read_pvp_leaderboard(region)})


@login_required
@require_POST
def add_api_token(request: HttpRequest) -> JsonResponse:
    """Register a GW2 API key for the signed-in user.

    Expects a JSON body `{"apiToken": str, "makePrimary": bool}`.
    """

    try:
        body = json.loads(request.body or b"{}")
    except json.JSONDecodeError:
        return JsonResponse({"errors": {"body": ["is not valid JSON"]}}, status=400)
    api_token = str(body.get("apiToken") or "").strip()
    if not api_token:
        return JsonResponse({"errors": {"apiToken": ["is required"]}}, status=400)

    try:
        token = add_token_for_profile(
            request.user.profile,
            api_token,
            client=get_request_gw2_client(),
            make_primary=bool(body.get("makePrimary")),
        )
    except ValidationError as exc:
        return JsonResponse({"errors": exc.message_dict}, status=400)
    except Gw2ApiError as exc:
        status = 400 if exc.is_auth_failure else 502
        return JsonResponse({"errors": {"apiToken": [str(exc)]}}, status=status)

    return JsonResponse(
        {
            "accountName": token.account_name,
            "world": token.world,
            "primary": token.primary,
            "permissions": token.permission_list,
        },
        status=201,
    )


@require_GET
async def sitemap_index(request: HttpRequest) -> HttpResponse:
    """Return the sitemap index document."""

    xml = await _sitemap_service().index()
    return HttpResponse(xml, content_type=XML_CONTENT_TYPE)


@require_GET
async def sitemap_page(request: HttpRequest, resource: str, page: int) -> HttpResponse:
    """Return one sitemap page for a resource."""

    try:
        xml = await _sitemap_service().generate(resource, page)
    except UnsupportedResourceError as exc:
        raise Http404(str(exc)) from exc
    return HttpResponse(xml, content_type=XML_CONTENT_TYPE)
