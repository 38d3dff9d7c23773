"""Pipeline runtime — sequential cartridge executor for one change event."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from autocenter_events.catalog import CategoryCatalog, WorkItemCategory
from autocenter_events.delivery.base import DeliveryError, ErrorClassifier, PushGateway
from autocenter_events.envelope import (
    ChangeEvent,
    DeliveryReport,
    NotificationMessage,
    RecipientToken,
    WorkItemSnapshot,
)
from autocenter_events.registry.base import TokenRegistry


@dataclass
class PipelineContext:
    catalog: CategoryCatalog
    registry: TokenRegistry
    gateway: PushGateway
    classifier: ErrorClassifier = field(default_factory=ErrorClassifier)


@dataclass
class Dispatch:
    """State of one event as it moves through the cartridges."""

    category: WorkItemCategory
    event: ChangeEvent
    snapshot: WorkItemSnapshot | None = None
    recipients: list[RecipientToken] = field(default_factory=list)
    message: NotificationMessage | None = None
    report: DeliveryReport | None = None
    pruned: list[str] = field(default_factory=list)
    # Set when only part of the batch was sent; raised once reconciliation is done.
    error: DeliveryError | None = None

    @property
    def tokens(self) -> list[str]:
        return [r.token for r in self.recipients]


class Cartridge(Protocol):
    name: str

    async def process(self, dispatch: Dispatch, context: PipelineContext) -> Dispatch | None: ...


class Pipeline:
    def __init__(self, cartridges: list[Cartridge], context: PipelineContext) -> None:
        self._cartridges = cartridges
        self._context = context

    @property
    def context(self) -> PipelineContext:
        return self._context

    async def execute(self, dispatch: Dispatch) -> Dispatch | None:
        current: Dispatch | None = dispatch
        for cartridge in self._cartridges:
            if current is None:
                return None
            current = await cartridge.process(current, self._context)
        return current
