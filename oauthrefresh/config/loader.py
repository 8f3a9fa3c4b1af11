"""Profile lookup."""

from __future__ import annotations

from typing import Mapping

from oauthrefresh.config.schema import PROFILES, Profile
from oauthrefresh.errors import ConfigurationError

PROFILE_ENV_VAR = "OAUTHREFRESH_PROFILE"
DEFAULT_PROFILE = "env"


def list_profiles() -> list[str]:
    return sorted(PROFILES)


def resolve_profile_name(explicit: str | None, environ: Mapping[str, str]) -> str:
    """Pick the profile name: explicit option, then environment, then default."""
    if explicit:
        return explicit
    return environ.get(PROFILE_ENV_VAR, "").strip() or DEFAULT_PROFILE


def get_profile(name: str) -> Profile:
    try:
        return PROFILES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown profile {name!r} (expected one of: {', '.join(list_profiles())})"
        ) from None
