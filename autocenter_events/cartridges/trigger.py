"""Trigger cartridge — drops writes that are not a qualifying transition."""

from __future__ import annotations

from autocenter_events.logging_config import get_logger
from autocenter_events.pipeline import Dispatch, PipelineContext

logger = get_logger(__name__)


class TriggerCartridge:
    name = "trigger"

    async def process(self, dispatch: Dispatch, context: PipelineContext) -> Dispatch | None:
        event = dispatch.event
        if event.is_deletion:
            logger.debug("trigger: ignoring deletion", category=event.category.value, document_id=event.document_id)
            return None

        if not dispatch.category.qualifies(event.before, event.after):
            logger.debug(
                "trigger: not a qualifying transition",
                category=event.category.value,
                document_id=event.document_id,
            )
            return None

        dispatch.snapshot = event.after
        return dispatch
