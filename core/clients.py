"""Factories for external API clients configured from Django settings."""

from __future__ import annotations

from django.conf import settings

from gw2 import Gw2Client


def get_gw2_client() -> Gw2Client:
    """Return a GW2 API client using the project settings."""

    return Gw2Client(
        settings.GW2_API_ENDPOINT,
        timeout=settings.GW2_API_TIMEOUT_SECONDS,
        retries=settings.GW2_API_RETRIES,
    )


def get_request_gw2_client() -> Gw2Client:
    """Return a GW2 API client for use inside a web request.

    Request handlers block a worker while the upstream API responds, so this
    client uses the tighter `GW2_API_REQUEST_*` limits instead of the ones used
    by scheduled ingestion.
    """

    return Gw2Client(
        settings.GW2_API_ENDPOINT,
        timeout=settings.GW2_API_REQUEST_TIMEOUT_SECONDS,
        retries=settings.GW2_API_REQUEST_RETRIES,
    )
