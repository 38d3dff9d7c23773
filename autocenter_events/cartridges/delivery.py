"""Delivery cartridge — one multicast call for every resolved token."""

from __future__ import annotations

from autocenter_events.delivery.base import DeliveryContractError, PartialDeliveryError
from autocenter_events.envelope import DeliveryReport
from autocenter_events.logging_config import get_logger
from autocenter_events.pipeline import Dispatch, PipelineContext

logger = get_logger(__name__)


class DeliveryCartridge:
    name = "delivery"

    async def process(self, dispatch: Dispatch, context: PipelineContext) -> Dispatch | None:
        tokens = dispatch.tokens
        if not tokens or dispatch.message is None:
            return None

        # Whole-batch failures propagate to the host runtime.
        try:
            report = await context.gateway.send_multicast(dispatch.message, tokens)
        except PartialDeliveryError as exc:
            self._check_alignment(exc.report, tokens, partial=True)
            logger.warning(
                "multicast partially sent",
                category=dispatch.event.category.value,
                document_id=dispatch.event.document_id,
                sent=len(exc.report.outcomes),
                total=len(tokens),
                error=str(exc),
            )
            dispatch.report = exc.report
            dispatch.error = exc
            return dispatch

        self._check_alignment(report, tokens)
        logger.info(
            "multicast sent",
            category=dispatch.event.category.value,
            document_id=dispatch.event.document_id,
            success_count=report.success_count,
            failure_count=report.failure_count,
        )
        dispatch.report = report
        return dispatch

    @staticmethod
    def _check_alignment(report: DeliveryReport, tokens: list[str], partial: bool = False) -> None:
        count = len(report.outcomes)
        if count > len(tokens) or (not partial and count != len(tokens)):
            raise DeliveryContractError(f"gateway returned {count} outcomes for {len(tokens)} tokens")
