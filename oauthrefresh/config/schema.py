"""Deployment profiles."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import httpx

from oauthrefresh.auth.constants import (
    CLAUDE_AI_TOKEN_URL,
    CLIENT_ID,
    CONSOLE_TOKEN_URL,
    DEFAULT_TIMEOUT_SEC,
    OAUTH_BETA_VERSION,
    USER_AGENT,
)
from oauthrefresh.auth.exchange import RequestEncoding, TokenExchanger
from oauthrefresh.auth.freshness import FIVE_MINUTE_BUFFER, ZERO_BUFFER, FreshnessPolicy
from oauthrefresh.ci.environment import ExportStyle


class InputSource(str, Enum):
    """Where the current token triple is read from."""

    ENV = "env"
    ACTION = "action"


@dataclass(frozen=True)
class TokenNames:
    """Variable names for the access token, refresh token and expiry."""

    access_token: str
    refresh_token: str
    expires_at: str

    def as_tuple(self) -> tuple[str, str, str]:
        return (self.access_token, self.refresh_token, self.expires_at)


@dataclass(frozen=True)
class Profile:
    """One deployment variant: buffer policy, unit, wire encoding and names."""

    name: str
    token_url: str
    encoding: RequestEncoding
    policy: FreshnessPolicy
    input_source: InputSource
    inputs: TokenNames
    outputs: TokenNames
    export_style: ExportStyle = ExportStyle.LINE
    use_oauth_input: str | None = None
    client_id: str = CLIENT_ID
    headers: dict[str, str] = field(default_factory=dict)

    def build_exchanger(
        self,
        timeout: float | None = DEFAULT_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TokenExchanger:
        return TokenExchanger(
            self.token_url,
            client_id=self.client_id,
            encoding=self.encoding,
            headers=self.headers,
            timeout=timeout,
            transport=transport,
        )


ENV_PROFILE = Profile(
    name="env",
    token_url=CONSOLE_TOKEN_URL,
    encoding=RequestEncoding.JSON,
    policy=ZERO_BUFFER,
    input_source=InputSource.ENV,
    inputs=TokenNames("CLAUDE_ACCESS_TOKEN", "CLAUDE_REFRESH_TOKEN", "CLAUDE_EXPIRES_AT"),
    outputs=TokenNames(
        "UPDATED_CLAUDE_ACCESS_TOKEN",
        "UPDATED_CLAUDE_REFRESH_TOKEN",
        "UPDATED_CLAUDE_EXPIRES_AT",
    ),
    export_style=ExportStyle.LINE,
    headers={
        "anthropic-beta": OAUTH_BETA_VERSION,
        "User-Agent": USER_AGENT,
    },
)

ACTION_PROFILE = Profile(
    name="action",
    token_url=CLAUDE_AI_TOKEN_URL,
    encoding=RequestEncoding.FORM,
    policy=FIVE_MINUTE_BUFFER,
    input_source=InputSource.ACTION,
    inputs=TokenNames("claude_access_token", "claude_refresh_token", "claude_expires_at"),
    outputs=TokenNames(
        "CLAUDE_ACCESS_TOKEN_REFRESHED",
        "CLAUDE_REFRESH_TOKEN_REFRESHED",
        "CLAUDE_EXPIRES_AT_REFRESHED",
    ),
    export_style=ExportStyle.DELIMITED,
    use_oauth_input="use_oauth",
)

PROFILES: dict[str, Profile] = {p.name: p for p in (ENV_PROFILE, ACTION_PROFILE)}
