"""Work-item snapshots, change events and delivery results flowing through the engine."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Category(str, Enum):
    ALIGNMENT = "alignment"
    SERVICE = "service"


class FailureKind(str, Enum):
    PERMANENTLY_INVALID = "permanently_invalid"
    TRANSIENT = "transient"
    OTHER = "other"


class WorkItemSnapshot(BaseModel):
    """One side of a document write, as stored in the work queue collections."""

    # Firestore is schemaless; a numeric carModel or licensePlate is read as text.
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    category: Category
    status: str | None = None
    license_plate: str | None = Field(default=None, alias="licensePlate")
    car_model: str | None = Field(default=None, alias="carModel")
    # Service jobs only
    assigned_worker: str | None = Field(default=None, alias="assignedMechanic")
    description: str | None = Field(default=None, alias="serviceDescription")

    @classmethod
    def from_document(cls, category: Category | str, data: dict[str, Any] | None) -> "WorkItemSnapshot | None":
        """Build a snapshot from a raw document dict; ``None`` stays ``None``."""
        if data is None:
            return None
        return cls.model_validate({**data, "category": Category(category)})


class ChangeEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: Category
    before: WorkItemSnapshot | None = None
    after: WorkItemSnapshot | None = None
    document_id: str | None = None

    @model_validator(mode="after")
    def _require_one_side(self) -> "ChangeEvent":
        if self.before is None and self.after is None:
            raise ValueError("ChangeEvent needs at least one of before/after")
        for side in (self.before, self.after):
            if side is not None and side.category != self.category:
                raise ValueError(f"Snapshot category {side.category.value} does not match event {self.category.value}")
        return self

    @property
    def is_deletion(self) -> bool:
        return self.after is None

    @classmethod
    def from_documents(
        cls,
        category: Category | str,
        before: dict[str, Any] | None,
        after: dict[str, Any] | None,
        document_id: str | None = None,
    ) -> "ChangeEvent":
        return cls(
            category=Category(category),
            before=WorkItemSnapshot.from_document(category, before),
            after=WorkItemSnapshot.from_document(category, after),
            document_id=document_id,
        )


class RecipientToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    role: str
    username: str | None = None
    platform: str = "web_pwa"


class RecipientQuery(BaseModel):
    """Registry lookup: role membership, optionally narrowed to one username."""

    model_config = ConfigDict(frozen=True)

    roles: list[str]
    username: str | None = None


class NotificationMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    icon: str | None = None
    link: str | None = None


class DeliveryOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    error_code: str | None = None
    failure: FailureKind | None = None

    @classmethod
    def delivered(cls) -> "DeliveryOutcome":
        return cls(success=True)


class DeliveryReport(BaseModel):
    """Per-token outcomes of one multicast send, index-aligned with the submitted tokens."""

    success_count: int = 0
    failure_count: int = 0
    outcomes: list[DeliveryOutcome] = Field(default_factory=list)

    @classmethod
    def from_outcomes(cls, outcomes: list[DeliveryOutcome]) -> "DeliveryReport":
        succeeded = sum(1 for outcome in outcomes if outcome.success)
        return cls(success_count=succeeded, failure_count=len(outcomes) - succeeded, outcomes=outcomes)
