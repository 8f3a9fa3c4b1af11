from __future__ import annotations

import pytest


class FakeEnvironment:
    """In-memory CI environment that records masks and exports in order."""

    def __init__(self, env: dict[str, str] | None = None, inputs: dict[str, str] | None = None):
        self.env = dict(env or {})
        self.inputs = dict(inputs or {})
        self.events: list[tuple[str, ...]] = []
        self.exported: dict[str, str] = {}

    def get_env(self, name: str) -> str | None:
        return self.env.get(name)

    def get_input(self, name: str) -> str | None:
        return self.inputs.get(name)

    def mask(self, value: str) -> None:
        self.events.append(("mask", value))

    def export(self, name: str, value: str) -> None:
        self.export_many([(name, value)])

    def export_many(self, entries) -> None:
        for name, value in entries:
            self.events.append(("export", name, value))
            self.exported[name] = value

    @property
    def masked(self) -> list[str]:
        return [event[1] for event in self.events if event[0] == "mask"]


class CountingExchanger:
    """Exchanger stub returning a fixed result and counting calls."""

    def __init__(self, result=None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[str] = []

    async def exchange(self, refresh_token: str):
        self.calls.append(refresh_token)
        if self.error is not None:
            raise self.error
        return self.result


NOW = 1_700_000_000.0


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def fake_env_factory():
    return FakeEnvironment


@pytest.fixture
def exchanger_factory():
    return CountingExchanger
