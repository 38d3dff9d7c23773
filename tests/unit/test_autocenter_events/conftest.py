"""Shared doubles for engine tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from autocenter_events.envelope import DeliveryOutcome, DeliveryReport, NotificationMessage, RecipientToken
from autocenter_events.registry.sqlite import SqliteTokenRegistry


class FakeGateway:
    """Records multicast calls; tokens not listed in ``outcomes`` are delivered."""

    def __init__(self) -> None:
        self.calls: list[tuple[NotificationMessage, list[str]]] = []
        self.outcomes: dict[str, DeliveryOutcome] = {}
        self.error: Exception | None = None

    async def send_multicast(self, message: NotificationMessage, tokens: list[str]) -> DeliveryReport:
        self.calls.append((message, list(tokens)))
        if self.error is not None:
            raise self.error
        return DeliveryReport.from_outcomes([self.outcomes.get(t, DeliveryOutcome.delivered()) for t in tokens])


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
async def registry(tmp_path: Path) -> SqliteTokenRegistry:  # type: ignore[misc]
    token_registry = SqliteTokenRegistry(db_path=tmp_path / "device_tokens.db")
    await token_registry.init()
    yield token_registry  # type: ignore[misc]
    await token_registry.close()


@pytest.fixture
def seed_tokens(registry: SqliteTokenRegistry):
    async def _seed(*tokens: RecipientToken) -> None:
        for token in tokens:
            await registry.upsert(token)

    return _seed
