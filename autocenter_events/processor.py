"""Notification engine — runs one change event through the dispatch pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from autocenter_events.cartridges import default_cartridges
from autocenter_events.catalog import CategoryCatalog, build_default_catalog
from autocenter_events.delivery.base import ErrorClassifier, PushGateway
from autocenter_events.envelope import Category, ChangeEvent
from autocenter_events.logging_config import get_logger
from autocenter_events.pipeline import Cartridge, Dispatch, Pipeline, PipelineContext
from autocenter_events.registry.base import TokenRegistry

if TYPE_CHECKING:
    from autocenter_events.config.schema import EngineConfig

logger = get_logger(__name__)


class NotificationEngine:
    """Reactive handler: trigger → recipients → compose → deliver → reconcile.

    Holds no per-event state, so unrelated events may be handled concurrently.
    """

    def __init__(
        self,
        catalog: CategoryCatalog,
        registry: TokenRegistry,
        gateway: PushGateway,
        classifier: ErrorClassifier | None = None,
        cartridges: list[Cartridge] | None = None,
    ) -> None:
        self._catalog = catalog
        context = PipelineContext(
            catalog=catalog,
            registry=registry,
            gateway=gateway,
            classifier=classifier or ErrorClassifier(),
        )
        self._pipeline = Pipeline(cartridges or default_cartridges(), context)

    @classmethod
    def from_config(cls, config: "EngineConfig", registry: TokenRegistry, gateway: PushGateway) -> "NotificationEngine":
        return cls(
            catalog=build_default_catalog(config),
            registry=registry,
            gateway=gateway,
            classifier=ErrorClassifier(
                permanent_codes=config.gateway.permanent_error_codes,
                transient_codes=config.gateway.transient_error_codes,
            ),
        )

    @property
    def catalog(self) -> CategoryCatalog:
        return self._catalog

    async def handle(self, event: ChangeEvent) -> Dispatch | None:
        """Process one event; returns the final dispatch state, or ``None`` if nothing was sent."""
        category = self._catalog.get(event.category)
        result = await self._pipeline.execute(Dispatch(category=category, event=event))
        if result is not None and result.error is not None:
            logger.error(
                "notification partially dispatched",
                category=event.category.value,
                document_id=event.document_id,
                sent=len(result.report.outcomes) if result.report else 0,
                recipients=len(result.recipients),
                pruned=len(result.pruned),
            )
            raise result.error
        if result is not None:
            logger.info(
                "notification dispatched",
                category=event.category.value,
                document_id=event.document_id,
                recipients=len(result.recipients),
                pruned=len(result.pruned),
            )
        return result

    async def handle_documents(
        self,
        category: Category | str,
        before: dict[str, Any] | None,
        after: dict[str, Any] | None,
        document_id: str | None = None,
    ) -> Dispatch | None:
        """Convenience entry for raw document dicts as delivered by the change source."""
        if before is None and after is None:
            return None
        return await self.handle(ChangeEvent.from_documents(category, before, after, document_id))
