"""Read, refresh and republish OAuth tokens for a CI job."""

from __future__ import annotations

import logging
import time
from typing import Awaitable, Protocol

from oauthrefresh.auth.freshness import FreshnessPolicy
from oauthrefresh.auth.models import Clock, ExchangeResult, TokenState
from oauthrefresh.ci.environment import CIEnvironment
from oauthrefresh.config.schema import InputSource, Profile, TokenNames
from oauthrefresh.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Exchanger(Protocol):
    def exchange(self, refresh_token: str) -> Awaitable[ExchangeResult]: ...


def _read_value(env: CIEnvironment, profile: Profile, name: str) -> str | None:
    if profile.input_source is InputSource.ACTION:
        return env.get_input(name)
    return env.get_env(name)


def oauth_enabled(env: CIEnvironment, profile: Profile) -> bool:
    """Whether the profile's opt-in input (if any) is set to ``"true"``."""
    if profile.use_oauth_input is None:
        return True
    return env.get_input(profile.use_oauth_input) == "true"


def read_token_state(env: CIEnvironment, profile: Profile) -> TokenState | None:
    """
    Build the current TokenState from the CI job.

    Returns None when the profile is gated by an opt-in input that is not
    enabled. Raises ConfigurationError when any required value is missing or
    the expiry is not an integer.
    """
    if not oauth_enabled(env, profile):
        logger.debug("OAuth disabled by %s input", profile.use_oauth_input)
        return None

    names = profile.inputs
    access = _read_value(env, profile, names.access_token)
    refresh = _read_value(env, profile, names.refresh_token)
    expires_raw = _read_value(env, profile, names.expires_at)

    missing = [
        name
        for name, value in zip(names.as_tuple(), (access, refresh, expires_raw))
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Required input(s) not set: {', '.join(missing)}")

    try:
        expires_at = int(expires_raw.strip())
    except ValueError:
        raise ConfigurationError(f"{names.expires_at} must be an integer timestamp") from None

    return TokenState(access_token=access, refresh_token=refresh, expires_at=expires_at)


async def get_valid_tokens(
    state: TokenState,
    policy: FreshnessPolicy,
    exchanger: Exchanger,
    clock: Clock = time.time,
) -> TokenState:
    """Return ``state`` if it is still fresh, otherwise exchange it for a new one."""
    if not policy.is_expired(state.expires_at, policy.unit.now(clock)):
        logger.info("Token is not expired, using existing tokens")
        return state

    logger.info("Token is expired or expiring soon, refreshing")
    result = await exchanger.exchange(state.refresh_token)
    # Expiry is anchored to the clock after the round trip.
    refreshed = result.to_token_state(policy.unit.now(clock), policy.unit)
    logger.info("Token refreshed successfully")
    return refreshed


def publish_tokens(env: CIEnvironment, state: TokenState, names: TokenNames) -> None:
    """Mask every credential, then export all three together for later job steps."""
    values = (state.access_token, state.refresh_token, str(state.expires_at))
    for value in values:
        env.mask(value)
    env.export_many(zip(names.as_tuple(), values))


async def refresh_oauth_tokens(
    env: CIEnvironment,
    profile: Profile,
    exchanger: Exchanger,
    clock: Clock = time.time,
) -> TokenState | None:
    """Run one refresh job end to end. Returns None when OAuth is disabled."""
    state = read_token_state(env, profile)
    if state is None:
        return None

    valid = await get_valid_tokens(state, profile.policy, exchanger, clock=clock)
    publish_tokens(env, valid, profile.outputs)
    return valid
