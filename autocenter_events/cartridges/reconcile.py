"""Reconciler cartridge — prunes tokens the gateway reported as permanently invalid."""

from __future__ import annotations

import asyncio

from autocenter_events.envelope import FailureKind
from autocenter_events.logging_config import get_logger
from autocenter_events.pipeline import Dispatch, PipelineContext

logger = get_logger(__name__)


def stale_tokens(dispatch: Dispatch, context: PipelineContext) -> list[str]:
    """Tokens whose outcome is a permanent failure, in submission order.

    Outcomes are matched to tokens by position.
    """
    if dispatch.report is None:
        return []

    stale: list[str] = []
    for token, outcome in zip(dispatch.tokens, dispatch.report.outcomes):
        if outcome.success:
            continue
        kind = outcome.failure or context.classifier.classify(outcome.error_code)
        if kind is FailureKind.PERMANENTLY_INVALID:
            stale.append(token)
        else:
            logger.warning(
                "delivery failed; not retrying",
                token_prefix=token[:8],
                error_code=outcome.error_code,
                failure=kind.value,
            )
    return list(dict.fromkeys(stale))


class FailureReconcilerCartridge:
    name = "reconcile"

    async def process(self, dispatch: Dispatch, context: PipelineContext) -> Dispatch | None:
        stale = stale_tokens(dispatch, context)
        if not stale:
            return dispatch

        results = await asyncio.gather(*(context.registry.delete(token) for token in stale), return_exceptions=True)
        for token, result in zip(stale, results):
            if isinstance(result, BaseException):
                logger.error("failed to delete stale token", token_prefix=token[:8], error=str(result))
                continue
            dispatch.pruned.append(token)

        logger.info("pruned stale tokens", category=dispatch.event.category.value, count=len(dispatch.pruned))
        return dispatch
