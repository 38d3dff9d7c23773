"""Service jobs — notify the assigned mechanic when a pending job lands on them."""

from __future__ import annotations

from autocenter_events.categories.alignment import UNKNOWN_FIELD
from autocenter_events.config.schema import ServiceConfig
from autocenter_events.envelope import Category, NotificationMessage, RecipientQuery, WorkItemSnapshot


class ServiceCategory:
    category = Category.SERVICE

    def __init__(self, config: ServiceConfig | None = None) -> None:
        self._config = config or ServiceConfig()
        self.collection = self._config.collection

    @property
    def trigger_status(self) -> str:
        return self._config.trigger_status

    def qualifies(self, before: WorkItemSnapshot | None, after: WorkItemSnapshot | None) -> bool:
        """A pending job qualifies when it is created with an assignee or its assignee changes.

        Status-only edits with the same assignee never qualify; reassignment to a
        different mechanic does, and targets the new assignee.
        """
        if after is None or after.status != self.trigger_status or not after.assigned_worker:
            return False
        return before is None or before.assigned_worker != after.assigned_worker

    def recipient_query(self, after: WorkItemSnapshot) -> RecipientQuery:
        return RecipientQuery(roles=[self._config.mechanic_role], username=after.assigned_worker)

    def compose(self, after: WorkItemSnapshot) -> NotificationMessage:
        car_model = after.car_model or UNKNOWN_FIELD
        plate = after.license_plate or UNKNOWN_FIELD
        description = after.description or self._config.description_fallback
        return NotificationMessage(
            title=self._config.title,
            body=f"Veículo: {car_model} ({plate})\nServiço: {description}",
            icon=self._config.icon,
            link=self._config.link,
        )
