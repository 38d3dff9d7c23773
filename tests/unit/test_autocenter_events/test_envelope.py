"""Tests for snapshots, change events and delivery reports."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from autocenter_events.envelope import (
    Category,
    ChangeEvent,
    DeliveryOutcome,
    DeliveryReport,
    FailureKind,
    WorkItemSnapshot,
)

pytestmark = pytest.mark.unit


def test_snapshot_reads_document_field_names() -> None:
    snapshot = WorkItemSnapshot.from_document(
        "service",
        {
            "status": "Pending",
            "licensePlate": "ABC123",
            "carModel": "Civic",
            "assignedMechanic": "maria",
            "serviceDescription": "Troca de óleo",
            "createdAt": 1712000000,
        },
    )
    assert snapshot is not None
    assert snapshot.category is Category.SERVICE
    assert snapshot.license_plate == "ABC123"
    assert snapshot.car_model == "Civic"
    assert snapshot.assigned_worker == "maria"
    assert snapshot.description == "Troca de óleo"


def test_snapshot_reads_numeric_fields_as_text() -> None:
    document = {"status": "Awaiting", "carModel": 208, "licensePlate": 1234567}
    snapshot = WorkItemSnapshot.from_document("alignment", document)
    assert snapshot is not None
    assert snapshot.car_model == "208"
    assert snapshot.license_plate == "1234567"


def test_snapshot_from_missing_document_is_none() -> None:
    assert WorkItemSnapshot.from_document(Category.ALIGNMENT, None) is None


def test_snapshot_is_frozen() -> None:
    snapshot = WorkItemSnapshot(category=Category.ALIGNMENT, status="Awaiting")
    with pytest.raises(ValidationError):
        snapshot.status = "Done"  # type: ignore[misc]


def test_change_event_requires_one_side() -> None:
    with pytest.raises(ValidationError, match="at least one"):
        ChangeEvent(category=Category.ALIGNMENT)


def test_change_event_rejects_mismatched_category() -> None:
    with pytest.raises(ValidationError, match="does not match"):
        ChangeEvent(
            category=Category.ALIGNMENT,
            after=WorkItemSnapshot(category=Category.SERVICE, status="Pending"),
        )


def test_deletion_has_no_after() -> None:
    event = ChangeEvent.from_documents("alignment", {"status": "Awaiting"}, None, document_id="doc-1")
    assert event.is_deletion
    assert event.before is not None
    assert event.document_id == "doc-1"


def test_report_counts_from_outcomes() -> None:
    report = DeliveryReport.from_outcomes(
        [
            DeliveryOutcome.delivered(),
            DeliveryOutcome(success=False, error_code="unavailable", failure=FailureKind.TRANSIENT),
            DeliveryOutcome.delivered(),
        ]
    )
    assert report.success_count == 2
    assert report.failure_count == 1
    assert len(report.outcomes) == 3
