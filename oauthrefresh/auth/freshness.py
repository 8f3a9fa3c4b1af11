"""Token freshness checks."""

from __future__ import annotations

from dataclasses import dataclass

from oauthrefresh.auth.constants import EXPIRY_BUFFER_SEC
from oauthrefresh.auth.models import ExpiryUnit


def is_expired(expires_at: int, now: int, buffer: int = 0) -> bool:
    """
    Return True when a token expiring at ``expires_at`` must not be used at ``now``.

    All three values share one unit. A token is treated as expired once ``now``
    reaches ``expires_at - buffer``; the boundary itself counts as expired.
    """
    return now >= expires_at - buffer


@dataclass(frozen=True)
class FreshnessPolicy:
    """Safety buffer applied before a token is considered expired."""

    buffer_seconds: int
    unit: ExpiryUnit

    @property
    def buffer(self) -> int:
        return self.unit.from_seconds(self.buffer_seconds)

    def is_expired(self, expires_at: int, now: int) -> bool:
        return is_expired(expires_at, now, self.buffer)


ZERO_BUFFER = FreshnessPolicy(buffer_seconds=0, unit=ExpiryUnit.SECONDS)
FIVE_MINUTE_BUFFER = FreshnessPolicy(buffer_seconds=EXPIRY_BUFFER_SEC, unit=ExpiryUnit.MILLISECONDS)
