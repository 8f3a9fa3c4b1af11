"""OAuth token freshness checks and refresh-token exchange."""

from oauthrefresh.auth.exchange import RequestEncoding, TokenExchanger
from oauthrefresh.auth.freshness import FIVE_MINUTE_BUFFER, ZERO_BUFFER, FreshnessPolicy, is_expired
from oauthrefresh.auth.models import ExchangeResult, ExpiryUnit, TokenState

__all__ = [
    "ExchangeResult",
    "ExpiryUnit",
    "FIVE_MINUTE_BUFFER",
    "FreshnessPolicy",
    "RequestEncoding",
    "TokenExchanger",
    "TokenState",
    "ZERO_BUFFER",
    "is_expired",
]
