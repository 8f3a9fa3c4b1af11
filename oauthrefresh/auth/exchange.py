"""Refresh-token exchange against the OAuth token endpoint."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

import httpx

from oauthrefresh.auth.constants import CLIENT_ID, DEFAULT_TIMEOUT_SEC, GRANT_TYPE
from oauthrefresh.auth.models import ExchangeResult
from oauthrefresh.errors import ConfigurationError, TokenExchangeError

logger = logging.getLogger(__name__)


class RequestEncoding(str, Enum):
    """Body encoding of the refresh request."""

    JSON = "json"
    FORM = "form"


def _parse_token_payload(payload: Any, status_code: int) -> ExchangeResult:
    # 2xx bodies may hold live credentials and stay out of error messages.
    if not isinstance(payload, dict):
        raise TokenExchangeError("Token refresh response is not a JSON object", status_code)
    access = payload.get("access_token")
    refresh = payload.get("refresh_token")
    expires_in = payload.get("expires_in")
    invalid = [
        name
        for name, ok in (
            ("access_token", isinstance(access, str) and bool(access)),
            ("refresh_token", isinstance(refresh, str) and bool(refresh)),
            ("expires_in", isinstance(expires_in, (int, float)) and not isinstance(expires_in, bool)),
        )
        if not ok
    ]
    if invalid:
        raise TokenExchangeError(
            f"Token refresh response missing or invalid fields ({', '.join(invalid)})", status_code
        )
    return ExchangeResult(
        access_token=access,
        refresh_token=refresh,
        expires_in=expires_in,
        token_type=payload.get("token_type"),
        scope=payload.get("scope"),
        organization=payload.get("organization"),
        account=payload.get("account"),
        raw=payload,
    )


class TokenExchanger:
    """Trade a refresh token for a new access/refresh token pair in one POST."""

    def __init__(
        self,
        token_url: str,
        client_id: str = CLIENT_ID,
        encoding: RequestEncoding = RequestEncoding.JSON,
        headers: dict[str, str] | None = None,
        timeout: float | None = DEFAULT_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token_url = token_url
        self.client_id = client_id
        self.encoding = encoding
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._transport = transport

    def _request_kwargs(self, refresh_token: str) -> dict[str, Any]:
        if self.encoding is RequestEncoding.JSON:
            headers = {"Content-Type": "application/json", **self.headers}
            body = {
                "grant_type": GRANT_TYPE,
                "refresh_token": refresh_token,
                "client_id": self.client_id,
            }
            return {"json": body, "headers": headers}

        headers = {"Content-Type": "application/x-www-form-urlencoded", **self.headers}
        data = {
            "grant_type": GRANT_TYPE,
            "refresh_token": refresh_token,
        }
        return {"data": data, "headers": headers}

    async def exchange(self, refresh_token: str) -> ExchangeResult:
        """POST the refresh token and return the decoded response."""
        if not refresh_token:
            raise ConfigurationError("Refresh token is empty")

        logger.debug("Refreshing OAuth token at %s (%s body)", self.token_url, self.encoding.value)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.token_url, **self._request_kwargs(refresh_token))
        except httpx.HTTPError as exc:
            raise TokenExchangeError(f"Token refresh request failed ({exc.__class__.__name__}: {exc})") from exc

        logger.debug("Token endpoint responded with HTTP %s", response.status_code)
        if not response.is_success:
            raise TokenExchangeError("Token refresh failed", response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            raise TokenExchangeError(
                "Token refresh returned a non-JSON body", response.status_code, response.text
            ) from exc

        return _parse_token_payload(payload, response.status_code)
