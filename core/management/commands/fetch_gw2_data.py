"""Fetch account, character, guild and ladder data from the GW2 API.

This command refreshes every valid, non-stub API token (or a single token via
`--token`) and the latest season's PvP ladder.

Design goals:
- one transaction per account so a failing key does not block others,
- keys rejected by the API are marked invalid instead of aborting the run,
- safe dry-run mode via `--check` that performs no API calls or writes.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from accounts.models import ApiToken
from core.clients import get_gw2_client
from gamedata.ingestion import IngestSummary, ingest_account, ingest_pvp_ladder
from gw2 import LADDER_REGIONS, Gw2ApiError


class Command(BaseCommand):
    """Refresh stored game data from the GW2 API."""

    help = "Fetch GW2 account, character, guild and PvP ladder data."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--token",
            type=int,
            default=None,
            help="Only refresh the ApiToken with this id.",
        )
        parser.add_argument(
            "--skip-ladder",
            action="store_true",
            help="Do not refresh the PvP ladder.",
        )
        parser.add_argument(
            "--check",
            action="store_true",
            help="Dry-run: list what would be fetched without calling the API.",
        )
        parser.add_argument(
            "--write",
            action="store_true",
            help="Fetch and write changes to the database.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        token_id: int | None = options["token"]
        skip_ladder: bool = options["skip_ladder"]
        check: bool = options["check"]
        write: bool = options["write"]

        if check and write:
            raise CommandError("Use either --check or --write, not both.")
        if not check and not write:
            raise CommandError("Refusing to write without explicit intent; pass --check or --write.")

        tokens = ApiToken.objects.filter(stub=False, valid=True).order_by("id")
        if token_id is not None:
            tokens = tokens.filter(id=token_id)
            if not tokens.exists():
                raise CommandError(f"Unknown or invalid token id: {token_id}")

        if check:
            for token in tokens:
                self.stdout.write(f"[CHECK] account={token.account_name} token_id={token.id}")
            if not skip_ladder:
                self.stdout.write(f"[CHECK] ladder regions={','.join(LADDER_REGIONS)}")
            return None

        client = get_gw2_client()
        summary = IngestSummary()
        failures = 0
        for token in tokens:
            try:
                summary = summary + ingest_account(token, client=client)
            except Gw2ApiError as exc:
                failures += 1
                self.stderr.write(f"[WRITE] account={token.account_name} failed: {exc}")

        if not skip_ladder:
            try:
                summary = summary + ingest_pvp_ladder(client=client)
            except Gw2ApiError as exc:
                failures += 1
                self.stderr.write(f"[WRITE] ladder failed: {exc}")

        self.stdout.write(f"[WRITE] summary={summary} failures={failures}")
        return None
