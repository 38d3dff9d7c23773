"""Tests for turning Firestore writes into engine calls."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from autocenter_events.entrypoints.firestore_source import EngineRunner, change_event_from_write, document_data
from autocenter_events.envelope import Category, ChangeEvent
from autocenter_events.processor import NotificationEngine

pytestmark = pytest.mark.unit


def _snapshot(data: dict[str, Any] | None) -> SimpleNamespace:
    return SimpleNamespace(exists=data is not None, to_dict=lambda: data)


def test_document_data_for_missing_snapshots() -> None:
    assert document_data(None) is None
    assert document_data(_snapshot(None)) is None
    assert document_data(_snapshot({"status": "Aguardando"})) == {"status": "Aguardando"}


def test_change_event_from_create() -> None:
    change = SimpleNamespace(
        before=_snapshot(None),
        after=_snapshot({"status": "Aguardando", "licensePlate": "ABC123"}),
    )

    event = change_event_from_write(Category.ALIGNMENT, change, {"docId": "job-7"})

    assert event is not None
    assert event.before is None
    assert event.after is not None
    assert event.after.license_plate == "ABC123"
    assert event.document_id == "job-7"


def test_change_event_from_delete_keeps_before() -> None:
    change = SimpleNamespace(before=_snapshot({"status": "Pendente"}), after=_snapshot(None))
    event = change_event_from_write("service", change)
    assert event is not None
    assert event.is_deletion


def test_change_event_without_documents_is_none() -> None:
    assert change_event_from_write("service", None) is None
    assert change_event_from_write("service", SimpleNamespace(before=None, after=None)) is None


class _RecordingEngine:
    def __init__(self) -> None:
        self.events: list[ChangeEvent] = []

    async def handle(self, event: ChangeEvent) -> None:
        self.events.append(event)
        return None


def test_runner_builds_engine_once_and_handles_events() -> None:
    engine = _RecordingEngine()
    builds: list[int] = []

    async def factory() -> NotificationEngine:
        builds.append(1)
        return engine  # type: ignore[return-value]

    runner = EngineRunner(factory)
    try:
        event = ChangeEvent.from_documents("alignment", None, {"status": "Aguardando"})
        runner.run(event, timeout=0.5)
        runner.run(event, timeout=0.5)
    finally:
        runner.close()

    assert builds == [1]
    assert engine.events == [event, event]


def test_runner_propagates_handler_errors() -> None:
    class _FailingEngine:
        async def handle(self, event: ChangeEvent) -> None:
            raise RuntimeError("gateway down")

    async def factory() -> NotificationEngine:
        return _FailingEngine()  # type: ignore[return-value]

    runner = EngineRunner(factory)
    try:
        with pytest.raises(RuntimeError, match="gateway down"):
            runner.run(ChangeEvent.from_documents("service", None, {"status": "Pendente"}), timeout=0.5)
    finally:
        runner.close()
