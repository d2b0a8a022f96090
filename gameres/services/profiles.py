"""Lookup of per-game naming and endpoint data."""

from ..models.game import GAME_PROFILES, GameBiz, GameProfile
from .errors import UnknownGameIdentityError


def get_game_profile(biz: GameBiz) -> GameProfile:
    """Profile for ``biz``.

    Raises:
        UnknownGameIdentityError: If ``biz`` is not a recognised identity
    """
    profile = GAME_PROFILES.get(biz) if isinstance(biz, GameBiz) else None
    if profile is None:
        raise UnknownGameIdentityError(biz)
    return profile


def parse_game_biz(value: str) -> GameBiz:
    """Parse a biz tag such as ``hk4e_global``."""
    try:
        return GameBiz(value.strip().lower())
    except ValueError:
        raise UnknownGameIdentityError(value) from None
