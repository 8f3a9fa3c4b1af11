"""OAuth token data models."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

Clock = Callable[[], float]


class ExpiryUnit(str, Enum):
    """Unit in which absolute expiry instants are expressed."""

    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"

    @property
    def per_second(self) -> int:
        return 1000 if self is ExpiryUnit.MILLISECONDS else 1

    def from_seconds(self, seconds: int | float) -> int:
        """Convert a duration in seconds to this unit."""
        return int(seconds * self.per_second)

    def now(self, clock: Clock = time.time) -> int:
        """Current wall-clock instant in this unit."""
        return int(clock() * self.per_second)


@dataclass(frozen=True)
class TokenState:
    """Access/refresh token pair with its absolute expiry."""

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    expires_at: int


@dataclass
class ExchangeResult:
    """Decoded token endpoint response."""

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    expires_in: int | float
    token_type: str | None = None
    scope: str | None = None
    organization: dict[str, Any] | None = None
    account: dict[str, Any] | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    def to_token_state(self, now: int, unit: ExpiryUnit) -> TokenState:
        """Build a TokenState expiring ``expires_in`` seconds after ``now``."""
        return TokenState(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expires_at=now + unit.from_seconds(self.expires_in),
        )
