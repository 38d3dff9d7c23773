"""autocenter_events — change-triggered push notification engine for the auto-center work queues."""

from autocenter_events.catalog import CategoryCatalog, UnknownCategoryError, WorkItemCategory, build_default_catalog
from autocenter_events.envelope import (
    Category,
    ChangeEvent,
    DeliveryOutcome,
    DeliveryReport,
    FailureKind,
    NotificationMessage,
    RecipientQuery,
    RecipientToken,
    WorkItemSnapshot,
)
from autocenter_events.pipeline import Dispatch, Pipeline, PipelineContext
from autocenter_events.processor import NotificationEngine

__all__ = [
    "Category",
    "CategoryCatalog",
    "ChangeEvent",
    "DeliveryOutcome",
    "DeliveryReport",
    "Dispatch",
    "FailureKind",
    "NotificationEngine",
    "NotificationMessage",
    "Pipeline",
    "PipelineContext",
    "RecipientQuery",
    "RecipientToken",
    "UnknownCategoryError",
    "WorkItemCategory",
    "WorkItemSnapshot",
    "build_default_catalog",
]
