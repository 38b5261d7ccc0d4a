"""Service-layer functions for profiles and GW2 API tokens.

Services coordinate ORM access with the GW2 API client. They accept a client
instance instead of constructing one so tests can substitute a fake.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.core.exceptions import ValidationError
from django.db import transaction

from accounts.models import ApiToken, Profile
from gamedata.models import Character, Guild
from gw2 import Gw2Client

logger = logging.getLogger(__name__)

REQUIRED_TOKEN_PERMISSIONS: frozenset[str] = frozenset({"characters", "builds"})


@dataclass(frozen=True, slots=True)
class TokenData:
    """Values needed to persist an API token.

    Attributes:
        api_token: The raw GW2 API key.
        profile: Owning profile.
        account_id: GW2 account id read from `/v2/account`.
        account_name: GW2 account name (e.g. `name.1234`).
        world: World id as a string.
        permissions: Permissions granted to the key.
        guilds: Guild ids the account belongs to.
        make_primary: Whether the token becomes the profile's primary key.
    """

    api_token: str
    profile: Profile
    account_id: str
    account_name: str
    world: str = ""
    permissions: tuple[str, ...] = ()
    guilds: tuple[str, ...] = ()
    make_primary: bool = False

    def as_fields(self) -> dict[str, Any]:
        """Return model field values for ApiToken."""

        return {
            "token": self.api_token,
            "profile": self.profile,
            "account_id": self.account_id,
            "account_name": self.account_name,
            "world": self.world,
            "permissions": ",".join(self.permissions),
            "guilds": ",".join(self.guilds),
            "primary": self.make_primary,
            "valid": True,
        }


def list_tokens() -> list[ApiToken]:
    """Return every non-stub token."""

    return list(ApiToken.objects.filter(stub=False).order_by("id"))


def read_token(token_id: int) -> ApiToken | None:
    return ApiToken.objects.filter(id=token_id).first()


def create_token(data: TokenData) -> ApiToken:
    return ApiToken.objects.create(**data.as_fields())


def replace_token(data: TokenData) -> ApiToken:
    """Swap the key of the single invalid token registered for an account.

    Raises:
        ValueError: When zero or several invalid tokens match the account name.
    """

    fields = data.as_fields()
    fields.pop("profile")
    count = ApiToken.objects.filter(account_name=data.account_name, valid=False).update(**fields)
    if count != 1:
        raise ValueError(
            f"Trying to replace api token failed. Updated {count} instead of 1 for {data.account_name!r}."
        )
    return ApiToken.objects.get(token=data.api_token)


def set_token_validity(token: str, *, valid: bool) -> int:
    """Mark a token valid or invalid.

    Returns:
        Number of rows updated (0 when the token is unknown).
    """

    updated = ApiToken.objects.filter(token=token).update(valid=valid)
    if updated and not valid:
        logger.info("Marked API token for %s as invalid", _token_label(token))
    return updated


def validate_token(api_token: str, *, client: Gw2Client) -> dict[str, Any]:
    """Check that a key can be registered.

    Args:
        api_token: Raw GW2 API key.
        client: GW2 API client used to inspect the key.

    Returns:
        The account document read with the key.

    Raises:
        ValidationError: When the key is already stored, lacks the required
            permissions, or the account already has a registered key.
    """

    if ApiToken.objects.filter(token=api_token).exists():
        raise ValidationError({"api_token": "is already being used"})

    info = client.read_token_info(api_token)
    permissions = set(info.get("permissions") or [])
    if not REQUIRED_TOKEN_PERMISSIONS.issubset(permissions):
        raise ValidationError({"api_token": "needs characters and builds permission"})

    account = client.read_account(api_token)
    if ApiToken.objects.filter(account_id=account["id"]).exists():
        raise ValidationError({"api_token": f"key for {account['name']} already exists"})
    account["permissions"] = sorted(permissions)
    return account


def add_token_for_profile(
    profile: Profile, api_token: str, *, client: Gw2Client, make_primary: bool = False
) -> ApiToken:
    """Validate a key and store it for a profile.

    The first token registered by a profile always becomes primary; making a
    later token primary demotes the previous one.
    """

    account = validate_token(api_token, client=client)
    with transaction.atomic():
        has_tokens = profile.api_tokens.exists()
        primary = make_primary or not has_tokens
        if primary and has_tokens:
            profile.api_tokens.update(primary=False)
        token = create_token(
            TokenData(
                api_token=api_token,
                profile=profile,
                account_id=account["id"],
                account_name=account["name"],
                world=str(account.get("world", "")),
                permissions=tuple(account["permissions"]),
                guilds=tuple(account.get("guilds") or ()),
                make_primary=primary,
            )
        )
    logger.info("Registered API token for %s (profile=%s)", token.account_name, profile.alias)
    return token


def list_guild_members(guild_id: str) -> list[dict[str, str]]:
    """Return `{alias, accountName}` rows for accounts in a guild."""

    tokens = (
        ApiToken.objects.filter(guilds__contains=guild_id, stub=False)
        .select_related("profile")
        .order_by("account_name")
    )
    return [{"alias": token.profile.alias, "accountName": token.account_name} for token in tokens]


def is_user_in_guild(email: str, guild_name: str) -> bool:
    """Return True when a user's registered accounts include the named guild.

    Raises:
        Guild.DoesNotExist: When no guild has that name.
    """

    guild = Guild.objects.get(name=guild_name)
    return ApiToken.objects.filter(guilds__contains=guild.guild_id, profile__user__email=email).exists()


def get_profile_by_email(email: str) -> Profile | None:
    return Profile.objects.filter(user__email=email).first()


def get_profile_id_by_alias(alias: str) -> int:
    """Return the profile id for an alias.

    Raises:
        Profile.DoesNotExist: When the alias is unknown.
    """

    return Profile.objects.values_list("id", flat=True).get(alias=alias)


def get_primary_token(alias: str) -> str:
    """Return the raw primary API key for an alias.

    Raises:
        Profile.DoesNotExist: When the alias is unknown.
        ApiToken.DoesNotExist: When the profile has no primary token.
    """

    profile_id = get_profile_id_by_alias(alias)
    return ApiToken.objects.values_list("token", flat=True).get(profile_id=profile_id, primary=True)


def read_user_by_token(api_token: str) -> dict[str, str] | None:
    """Return `{alias, accountName, apiToken}` for a stored key, or None."""

    token = ApiToken.objects.filter(token=api_token).select_related("profile").first()
    if token is None:
        return None
    return {"alias": token.profile.alias, "accountName": token.account_name, "apiToken": api_token}


def read_public_user(alias: str) -> dict[str, Any] | None:
    """Return the public representation of a profile.

    Returns:
        A dict with `alias`, `createdAt` and the profile's characters, or None
        when the alias is unknown.
    """

    profile = Profile.objects.filter(alias=alias).first()
    if profile is None:
        return None
    characters = (
        Character.objects.filter(api_token__profile=profile)
        .select_related("api_token")
        .order_by("name")
    )
    return {
        "alias": profile.alias,
        "createdAt": profile.created_at.isoformat(),
        "characters": [
            {
                "accountName": character.api_token.account_name,
                "world": character.api_token.world,
                "name": character.name,
                "gender": character.gender,
                "profession": character.profession,
                "level": character.level,
                "race": character.race,
            }
            for character in characters
        ],
    }


def _token_label(token: str) -> str:
    """Return a log-safe abbreviation of an API key."""

    return f"{token[:8]}…" if len(token) > 8 else "…"
