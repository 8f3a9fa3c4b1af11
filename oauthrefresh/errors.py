"""Error types raised while refreshing OAuth tokens."""

from __future__ import annotations


class TokenRefreshError(Exception):
    """Base class for every failure that aborts a refresh run."""

    kind = "error"


class ConfigurationError(TokenRefreshError):
    """A required input is missing or malformed."""

    kind = "configuration"


class TokenExchangeError(TokenRefreshError):
    """The token endpoint could not be reached or returned an unusable response."""

    kind = "exchange"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        self.status_code = status_code
        self.body = body
        detail = message
        if status_code is not None:
            detail = f"{detail}: {status_code}"
        if body:
            detail = f"{detail} - {body}"
        super().__init__(detail)
