"""Signals for Profile lifecycle."""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from accounts.models import Profile

UserModel = get_user_model()


@receiver(post_save, sender=UserModel)
def ensure_profile_for_user(sender, instance, created: bool, **kwargs) -> None:
    """Create a Profile whenever a new User is created.

    The alias defaults to the username; an existing profile is left untouched.
    """

    if kwargs.get("raw", False):
        return

    if not created:
        return

    if Profile.objects.filter(user=instance).exists():
        return

    Profile.objects.create(user=instance, alias=instance.get_username())
