"""Cloud Functions triggers for the alignment queue and service job collections.

Deploy with this module as the functions source entry point; configuration is
read from ``autocenter.yml`` (or ``$AUTOCENTER_CONFIG``) at cold start.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_functions import firestore_fn, options

from autocenter_events.config import load_config
from autocenter_events.entrypoints.firestore_source import EngineRunner, change_event_from_write
from autocenter_events.envelope import Category
from autocenter_events.logging_config import setup_logging
from autocenter_events.processor import NotificationEngine
from autocenter_events.runtime import build_engine, log_trigger_statuses

if TYPE_CHECKING:
    WriteEvent = firestore_fn.Event[firestore_fn.Change[firestore_fn.DocumentSnapshot | None]]

config = load_config()
setup_logging(config.log_level)
log_trigger_statuses(config)
options.set_global_options(region=config.firebase.region)


async def _engine_factory() -> NotificationEngine:
    return await build_engine(config)


runner = EngineRunner(_engine_factory)


def _dispatch(category: Category, event: WriteEvent) -> None:
    change_event = change_event_from_write(category, event.data, event.params)
    if change_event is None:
        return
    runner.run(change_event)


@firestore_fn.on_document_written(document=f"{config.alignment.collection}/{{docId}}")
def notify_aligners(event: WriteEvent) -> None:
    _dispatch(Category.ALIGNMENT, event)


@firestore_fn.on_document_written(document=f"{config.service.collection}/{{docId}}")
def notify_mechanics(event: WriteEvent) -> None:
    _dispatch(Category.SERVICE, event)
