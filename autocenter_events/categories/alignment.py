"""Alignment queue — broadcast to aligners and managers when a car starts waiting."""

from __future__ import annotations

from autocenter_events.config.schema import AlignmentConfig
from autocenter_events.envelope import Category, NotificationMessage, RecipientQuery, WorkItemSnapshot

UNKNOWN_FIELD = "?"


class AlignmentCategory:
    category = Category.ALIGNMENT

    def __init__(self, config: AlignmentConfig | None = None) -> None:
        self._config = config or AlignmentConfig()
        self.collection = self._config.collection

    @property
    def trigger_status(self) -> str:
        return self._config.trigger_status

    def qualifies(self, before: WorkItemSnapshot | None, after: WorkItemSnapshot | None) -> bool:
        """Edge-triggered: only the write that moves the item into the trigger status.

        Re-saving an item already in the trigger status does not qualify again.
        """
        if after is None or after.status != self.trigger_status:
            return False
        return before is None or before.status != self.trigger_status

    def recipient_query(self, after: WorkItemSnapshot) -> RecipientQuery:
        return RecipientQuery(roles=list(self._config.recipient_roles))

    def compose(self, after: WorkItemSnapshot) -> NotificationMessage:
        car_model = after.car_model or UNKNOWN_FIELD
        plate = after.license_plate or UNKNOWN_FIELD
        return NotificationMessage(
            title=self._config.title,
            body=f"{car_model} ({plate}) chegou.",
            icon=self._config.icon,
            link=self._config.link,
        )
