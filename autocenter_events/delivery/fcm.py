"""FCM delivery adapter — multicast web push through firebase-admin."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from firebase_admin import exceptions, messaging

from autocenter_events.delivery.base import (
    DeliveryContractError,
    DeliveryError,
    ErrorClassifier,
    PartialDeliveryError,
)
from autocenter_events.envelope import DeliveryOutcome, DeliveryReport, NotificationMessage
from autocenter_events.logging_config import get_logger

logger = get_logger(__name__)

# send_each_for_multicast rejects more tokens than this per call
MAX_MULTICAST_TOKENS = 500

_EXCEPTION_CODES: list[tuple[type[BaseException], str]] = [
    (messaging.UnregisteredError, "registration-token-not-registered"),
    (messaging.SenderIdMismatchError, "mismatched-credential"),
    (messaging.QuotaExceededError, "message-rate-exceeded"),
    (messaging.ThirdPartyAuthError, "third-party-auth-error"),
    (exceptions.UnavailableError, "unavailable"),
    (exceptions.InternalError, "internal-error"),
    (exceptions.DeadlineExceededError, "deadline-exceeded"),
]


def error_code_for(exc: BaseException | None) -> str | None:
    """Map a per-token firebase-admin exception to a canonical error code."""
    if exc is None:
        return None
    for exc_type, code in _EXCEPTION_CODES:
        if isinstance(exc, exc_type):
            return code
    if isinstance(exc, exceptions.InvalidArgumentError):
        # INVALID_ARGUMENT covers malformed tokens and malformed messages alike.
        if "registration token" in str(exc).lower():
            return "invalid-registration-token"
        return "invalid-argument"
    if isinstance(exc, exceptions.FirebaseError):
        return str(exc.code)
    return None


def build_multicast(message: NotificationMessage, tokens: list[str]) -> messaging.MulticastMessage:
    webpush = messaging.WebpushConfig(
        notification=messaging.WebpushNotification(icon=message.icon) if message.icon else None,
        fcm_options=messaging.WebpushFCMOptions(link=message.link) if message.link else None,
    )
    return messaging.MulticastMessage(
        tokens=tokens,
        notification=messaging.Notification(title=message.title, body=message.body),
        webpush=webpush,
    )


class FcmPushGateway:
    """Sends through ``messaging.send_each_for_multicast`` in a worker thread."""

    def __init__(
        self,
        classifier: ErrorClassifier | None = None,
        *,
        app: Any = None,
        dry_run: bool = False,
        send_fn: Callable[..., Any] | None = None,
    ) -> None:
        self._classifier = classifier or ErrorClassifier()
        self._app = app
        self._dry_run = dry_run
        self._send_fn = send_fn or messaging.send_each_for_multicast

    async def send_multicast(self, message: NotificationMessage, tokens: list[str]) -> DeliveryReport:
        outcomes: list[DeliveryOutcome] = []
        for start in range(0, len(tokens), MAX_MULTICAST_TOKENS):
            chunk = tokens[start : start + MAX_MULTICAST_TOKENS]
            try:
                outcomes.extend(await self._send_chunk(message, chunk))
            except DeliveryError as exc:
                if not outcomes:
                    raise
                raise PartialDeliveryError(
                    f"{exc} (after {len(outcomes)} of {len(tokens)} tokens were sent)",
                    DeliveryReport.from_outcomes(outcomes),
                ) from exc
        return DeliveryReport.from_outcomes(outcomes)

    async def _send_chunk(self, message: NotificationMessage, tokens: list[str]) -> list[DeliveryOutcome]:
        multicast = build_multicast(message, tokens)
        try:
            response = await asyncio.to_thread(self._send_fn, multicast, dry_run=self._dry_run, app=self._app)
        except exceptions.FirebaseError as exc:
            raise DeliveryError(f"FCM multicast failed: {exc.code}: {exc}") from exc

        responses = list(response.responses)
        if len(responses) != len(tokens):
            raise DeliveryContractError(f"FCM returned {len(responses)} responses for {len(tokens)} tokens")

        outcomes: list[DeliveryOutcome] = []
        for resp in responses:
            if resp.success:
                outcomes.append(DeliveryOutcome.delivered())
            else:
                outcomes.append(self._classifier.failed(error_code_for(resp.exception)))
        return outcomes
