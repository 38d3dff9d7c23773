"""Push gateway contract and delivery error classification."""

from __future__ import annotations

from typing import Iterable, Protocol

from autocenter_events.envelope import DeliveryOutcome, DeliveryReport, FailureKind, NotificationMessage

PERMANENT_ERROR_CODES = ("registration-token-not-registered", "invalid-registration-token")
TRANSIENT_ERROR_CODES = ("unavailable", "internal-error", "deadline-exceeded", "message-rate-exceeded")


class DeliveryError(RuntimeError):
    """The gateway rejected the whole batch."""


class DeliveryContractError(DeliveryError):
    """The gateway answered with outcomes that cannot be mapped back to tokens."""


class PartialDeliveryError(DeliveryError):
    """A later batch failed after earlier batches were sent.

    ``report`` holds the outcomes of the tokens already sent, index-aligned with
    the leading tokens of the request.
    """

    def __init__(self, message: str, report: DeliveryReport) -> None:
        super().__init__(message)
        self.report = report


class PushGateway(Protocol):
    async def send_multicast(self, message: NotificationMessage, tokens: list[str]) -> DeliveryReport:
        """Send one message to every token; outcomes must be index-aligned with ``tokens``."""
        ...


def normalize_error_code(code: str | None) -> str | None:
    """Canonical form: lower-case, dash separated, without the ``messaging/`` prefix."""
    if not code:
        return None
    normalized = code.strip().lower().replace("_", "-")
    if normalized.startswith("messaging/"):
        normalized = normalized[len("messaging/") :]
    return normalized or None


class ErrorClassifier:
    def __init__(
        self,
        permanent_codes: Iterable[str] = PERMANENT_ERROR_CODES,
        transient_codes: Iterable[str] = TRANSIENT_ERROR_CODES,
    ) -> None:
        self._permanent = {normalize_error_code(c) for c in permanent_codes} - {None}
        self._transient = {normalize_error_code(c) for c in transient_codes} - {None}

    def classify(self, code: str | None) -> FailureKind:
        normalized = normalize_error_code(code)
        if normalized in self._permanent:
            return FailureKind.PERMANENTLY_INVALID
        if normalized in self._transient:
            return FailureKind.TRANSIENT
        return FailureKind.OTHER

    def failed(self, code: str | None) -> DeliveryOutcome:
        return DeliveryOutcome(success=False, error_code=normalize_error_code(code), failure=self.classify(code))
