"""Logging delivery adapter — records the multicast instead of sending it."""

from __future__ import annotations

from collections import deque

from autocenter_events.envelope import DeliveryOutcome, DeliveryReport, NotificationMessage
from autocenter_events.logging_config import get_logger

logger = get_logger(__name__)

# Most recent multicasts kept in ``sent``
SENT_HISTORY = 100


class LoggingPushGateway:
    """No-op gateway for local replays; every token is reported as delivered."""

    def __init__(self, history: int = SENT_HISTORY) -> None:
        self.sent: deque[tuple[NotificationMessage, list[str]]] = deque(maxlen=history)

    async def send_multicast(self, message: NotificationMessage, tokens: list[str]) -> DeliveryReport:
        self.sent.append((message, list(tokens)))
        logger.info(
            "push delivery disabled; logging multicast",
            title=message.title,
            body=message.body,
            token_prefixes=[t[:8] for t in tokens],
        )
        return DeliveryReport.from_outcomes([DeliveryOutcome.delivered() for _ in tokens])
