"""Cartridges — the steps of the dispatch pipeline, in execution order."""

from autocenter_events.cartridges.compose import ComposerCartridge
from autocenter_events.cartridges.delivery import DeliveryCartridge
from autocenter_events.cartridges.recipients import RecipientResolverCartridge
from autocenter_events.cartridges.reconcile import FailureReconcilerCartridge
from autocenter_events.cartridges.trigger import TriggerCartridge

__all__ = [
    "ComposerCartridge",
    "DeliveryCartridge",
    "FailureReconcilerCartridge",
    "RecipientResolverCartridge",
    "TriggerCartridge",
    "default_cartridges",
]


def default_cartridges() -> list:
    return [
        TriggerCartridge(),
        RecipientResolverCartridge(),
        ComposerCartridge(),
        DeliveryCartridge(),
        FailureReconcilerCartridge(),
    ]
