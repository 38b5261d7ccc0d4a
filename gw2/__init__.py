"""Guild Wars 2 API access (no Django dependencies)."""

from __future__ import annotations

from .client import LADDER_REGIONS, Gw2ApiError, Gw2Client

__all__ = ["LADDER_REGIONS", "Gw2ApiError", "Gw2Client"]
