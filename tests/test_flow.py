import io

import pytest

from oauthrefresh.auth.flow import (
    get_valid_tokens,
    publish_tokens,
    read_token_state,
    refresh_oauth_tokens,
)
from oauthrefresh.auth.freshness import FIVE_MINUTE_BUFFER, ZERO_BUFFER
from oauthrefresh.auth.models import ExchangeResult, TokenState
from oauthrefresh.ci.environment import GitHubActionsEnvironment
from oauthrefresh.config.schema import ACTION_PROFILE, ENV_PROFILE
from oauthrefresh.errors import ConfigurationError, TokenExchangeError

NOW_S = 1_700_000_000
NOW_MS = NOW_S * 1000

NEW_TOKENS = ExchangeResult(
    access_token="A",
    refresh_token="B",
    expires_in=3600,
    token_type="Bearer",
)


def _env_inputs(expires_at: int) -> dict[str, str]:
    return {
        "CLAUDE_ACCESS_TOKEN": "old-access",
        "CLAUDE_REFRESH_TOKEN": "old-refresh",
        "CLAUDE_EXPIRES_AT": str(expires_at),
    }


def _action_inputs(expires_at: int, use_oauth: str = "true") -> dict[str, str]:
    return {
        "use_oauth": use_oauth,
        "claude_access_token": "old-access",
        "claude_refresh_token": "old-refresh",
        "claude_expires_at": str(expires_at),
    }


def test_read_token_state_from_env(fake_env_factory) -> None:
    env = fake_env_factory(env=_env_inputs(NOW_S))
    assert read_token_state(env, ENV_PROFILE) == TokenState("old-access", "old-refresh", NOW_S)


def test_read_token_state_reports_every_missing_input(fake_env_factory) -> None:
    env = fake_env_factory(env={"CLAUDE_EXPIRES_AT": "123"})
    with pytest.raises(ConfigurationError) as exc_info:
        read_token_state(env, ENV_PROFILE)
    assert "CLAUDE_ACCESS_TOKEN" in str(exc_info.value)
    assert "CLAUDE_REFRESH_TOKEN" in str(exc_info.value)
    assert exc_info.value.kind == "configuration"


def test_read_token_state_rejects_non_numeric_expiry(fake_env_factory) -> None:
    env = fake_env_factory(env={**_env_inputs(0), "CLAUDE_EXPIRES_AT": "tomorrow"})
    with pytest.raises(ConfigurationError, match="CLAUDE_EXPIRES_AT"):
        read_token_state(env, ENV_PROFILE)


def test_read_token_state_action_disabled_returns_none(fake_env_factory) -> None:
    env = fake_env_factory(inputs=_action_inputs(NOW_MS, use_oauth="false"))
    assert read_token_state(env, ACTION_PROFILE) is None
    assert read_token_state(fake_env_factory(), ACTION_PROFILE) is None


def test_read_token_state_action_ignores_plain_env(fake_env_factory) -> None:
    env = fake_env_factory(env=_env_inputs(NOW_S), inputs={"use_oauth": "true"})
    with pytest.raises(ConfigurationError, match="claude_refresh_token"):
        read_token_state(env, ACTION_PROFILE)


@pytest.mark.asyncio
async def test_fresh_token_is_returned_unchanged(clock, exchanger_factory) -> None:
    state = TokenState("old-access", "old-refresh", NOW_S + 1)
    exchanger = exchanger_factory(NEW_TOKENS)

    result = await get_valid_tokens(state, ZERO_BUFFER, exchanger, clock=clock)

    assert result == state
    assert exchanger.calls == []


@pytest.mark.asyncio
async def test_expired_token_seconds_unit(clock, exchanger_factory) -> None:
    state = TokenState("old-access", "old-refresh", NOW_S)
    exchanger = exchanger_factory(NEW_TOKENS)

    result = await get_valid_tokens(state, ZERO_BUFFER, exchanger, clock=clock)

    assert exchanger.calls == ["old-refresh"]
    assert result == TokenState("A", "B", NOW_S + 3600)


@pytest.mark.asyncio
async def test_expired_token_milliseconds_unit(clock, exchanger_factory) -> None:
    state = TokenState("old-access", "old-refresh", NOW_MS + 3 * 60 * 1000)
    exchanger = exchanger_factory(NEW_TOKENS)

    result = await get_valid_tokens(state, FIVE_MINUTE_BUFFER, exchanger, clock=clock)

    assert result.expires_at == NOW_MS + 3_600_000
    # A refreshed token must be fresh under the same policy that requested it.
    assert not FIVE_MINUTE_BUFFER.is_expired(result.expires_at, NOW_MS)


@pytest.mark.asyncio
async def test_exchange_failure_propagates(clock, exchanger_factory) -> None:
    state = TokenState("old-access", "old-refresh", NOW_S - 10)
    exchanger = exchanger_factory(error=TokenExchangeError("Token refresh failed", 401, "invalid_grant"))

    with pytest.raises(TokenExchangeError, match="invalid_grant"):
        await get_valid_tokens(state, ZERO_BUFFER, exchanger, clock=clock)


def test_publish_masks_before_exporting(fake_env_factory) -> None:
    env = fake_env_factory()
    publish_tokens(env, TokenState("A", "B", 42), ENV_PROFILE.outputs)

    assert env.events == [
        ("mask", "A"),
        ("mask", "B"),
        ("mask", "42"),
        ("export", "UPDATED_CLAUDE_ACCESS_TOKEN", "A"),
        ("export", "UPDATED_CLAUDE_REFRESH_TOKEN", "B"),
        ("export", "UPDATED_CLAUDE_EXPIRES_AT", "42"),
    ]


def _assert_masked_before_export(events: list[tuple[str, ...]]) -> None:
    masked: set[str] = set()
    for event in events:
        if event[0] == "mask":
            masked.add(event[1])
        else:
            assert event[2] in masked, f"{event[1]} exported before its value was masked"


@pytest.mark.asyncio
async def test_refresh_fresh_path_republishes_inputs(clock, fake_env_factory, exchanger_factory) -> None:
    env = fake_env_factory(env=_env_inputs(NOW_S + 600))
    exchanger = exchanger_factory(NEW_TOKENS)

    result = await refresh_oauth_tokens(env, ENV_PROFILE, exchanger, clock=clock)

    assert result == TokenState("old-access", "old-refresh", NOW_S + 600)
    assert exchanger.calls == []
    assert env.exported == {
        "UPDATED_CLAUDE_ACCESS_TOKEN": "old-access",
        "UPDATED_CLAUDE_REFRESH_TOKEN": "old-refresh",
        "UPDATED_CLAUDE_EXPIRES_AT": str(NOW_S + 600),
    }
    _assert_masked_before_export(env.events)


@pytest.mark.asyncio
async def test_refresh_stale_path_publishes_new_tokens(clock, fake_env_factory, exchanger_factory) -> None:
    env = fake_env_factory(inputs=_action_inputs(NOW_MS + 60 * 1000))
    exchanger = exchanger_factory(NEW_TOKENS)

    result = await refresh_oauth_tokens(env, ACTION_PROFILE, exchanger, clock=clock)

    assert result == TokenState("A", "B", NOW_MS + 3_600_000)
    assert env.exported == {
        "CLAUDE_ACCESS_TOKEN_REFRESHED": "A",
        "CLAUDE_REFRESH_TOKEN_REFRESHED": "B",
        "CLAUDE_EXPIRES_AT_REFRESHED": str(NOW_MS + 3_600_000),
    }
    _assert_masked_before_export(env.events)


@pytest.mark.asyncio
async def test_refresh_missing_input_fails_before_network(clock, fake_env_factory, exchanger_factory) -> None:
    env = fake_env_factory(env={"CLAUDE_ACCESS_TOKEN": "old-access", "CLAUDE_EXPIRES_AT": "1"})
    exchanger = exchanger_factory(NEW_TOKENS)

    with pytest.raises(ConfigurationError, match="CLAUDE_REFRESH_TOKEN"):
        await refresh_oauth_tokens(env, ENV_PROFILE, exchanger, clock=clock)

    assert exchanger.calls == []
    assert env.events == []


@pytest.mark.asyncio
async def test_refresh_failure_exports_nothing(clock, fake_env_factory, exchanger_factory) -> None:
    env = fake_env_factory(env=_env_inputs(NOW_S - 1))
    exchanger = exchanger_factory(error=TokenExchangeError("Token refresh failed", 401, "invalid_grant"))

    with pytest.raises(TokenExchangeError):
        await refresh_oauth_tokens(env, ENV_PROFILE, exchanger, clock=clock)

    assert env.events == []


@pytest.mark.asyncio
async def test_refresh_disabled_action_short_circuits(clock, fake_env_factory, exchanger_factory) -> None:
    env = fake_env_factory(inputs={"use_oauth": "false"})
    exchanger = exchanger_factory(NEW_TOKENS)

    assert await refresh_oauth_tokens(env, ACTION_PROFILE, exchanger, clock=clock) is None
    assert exchanger.calls == []
    assert env.events == []


def test_publish_exports_nothing_when_a_value_cannot_be_written(tmp_path) -> None:
    env_file = tmp_path / "github_env"
    env_file.touch()
    env = GitHubActionsEnvironment(environ={"GITHUB_ENV": str(env_file)}, stream=io.StringIO())

    with pytest.raises(ConfigurationError):
        publish_tokens(env, TokenState("A", "B\nX", 42), ENV_PROFILE.outputs)

    assert env_file.read_text(encoding="utf-8") == ""
