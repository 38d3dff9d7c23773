"""Adapt Firestore write triggers into change events and run them on a shared loop."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Awaitable, Callable, Mapping

from autocenter_events.envelope import Category, ChangeEvent
from autocenter_events.logging_config import get_logger
from autocenter_events.pipeline import Dispatch
from autocenter_events.processor import NotificationEngine

logger = get_logger(__name__)

EngineFactory = Callable[[], Awaitable[NotificationEngine]]


def document_data(snapshot: Any) -> dict[str, Any] | None:
    """Field dict of a document snapshot; missing or non-existent documents become ``None``."""
    if snapshot is None or not getattr(snapshot, "exists", True):
        return None
    return snapshot.to_dict()


def change_event_from_write(
    category: Category | str,
    change: Any,
    params: Mapping[str, str] | None = None,
) -> ChangeEvent | None:
    """Build a change event from a ``Change(before, after)`` payload.

    Returns ``None`` when neither side holds a document.
    """
    if change is None:
        return None
    before = document_data(getattr(change, "before", None))
    after = document_data(getattr(change, "after", None))
    if before is None and after is None:
        return None
    document_id = (params or {}).get("docId")
    return ChangeEvent.from_documents(category, before, after, document_id)


class EngineRunner:
    """Runs engine coroutines for synchronous trigger handlers.

    One background event loop serves every invocation so async clients created
    by the engine stay bound to a single loop, even when the host calls
    handlers from several threads at once.
    """

    def __init__(self, engine_factory: EngineFactory) -> None:
        self._engine_factory = engine_factory
        self._engine: NotificationEngine | None = None
        self._engine_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_lock = threading.Lock()

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._loop_lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                threading.Thread(target=loop.run_forever, name="autocenter-events-loop", daemon=True).start()
                self._loop = loop
            return self._loop

    async def _get_engine(self) -> NotificationEngine:
        async with self._engine_lock:
            if self._engine is None:
                self._engine = await self._engine_factory()
            return self._engine

    async def _handle(self, event: ChangeEvent) -> Dispatch | None:
        engine = await self._get_engine()
        return await engine.handle(event)

    def run(self, event: ChangeEvent, timeout: float | None = None) -> Dispatch | None:
        future = asyncio.run_coroutine_threadsafe(self._handle(event), self._ensure_loop())
        return future.result(timeout)

    def close(self) -> None:
        with self._loop_lock:
            if self._loop is not None:
                self._loop.call_soon_threadsafe(self._loop.stop)
                self._loop = None
