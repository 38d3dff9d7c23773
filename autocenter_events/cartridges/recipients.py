"""Recipient cartridge — resolves the tokens a qualifying work item should reach."""

from __future__ import annotations

from autocenter_events.logging_config import get_logger
from autocenter_events.pipeline import Dispatch, PipelineContext

logger = get_logger(__name__)


class RecipientResolverCartridge:
    name = "recipients"

    async def process(self, dispatch: Dispatch, context: PipelineContext) -> Dispatch | None:
        if dispatch.snapshot is None:
            return None

        query = dispatch.category.recipient_query(dispatch.snapshot)
        found = await context.registry.query(query)

        # One send per token.
        unique = {recipient.token: recipient for recipient in found}
        if not unique:
            logger.info(
                "no recipient tokens",
                category=dispatch.event.category.value,
                roles=query.roles,
                username=query.username,
            )
            return None

        dispatch.recipients = list(unique.values())
        return dispatch
