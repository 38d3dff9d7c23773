"""Delivery adapters — push gateways the dispatcher can hand a multicast to."""

from autocenter_events.delivery.base import (
    DeliveryContractError,
    DeliveryError,
    ErrorClassifier,
    PartialDeliveryError,
    PushGateway,
    normalize_error_code,
)
from autocenter_events.delivery.dry_run import LoggingPushGateway

__all__ = [
    "DeliveryContractError",
    "DeliveryError",
    "ErrorClassifier",
    "LoggingPushGateway",
    "PartialDeliveryError",
    "PushGateway",
    "normalize_error_code",
]
