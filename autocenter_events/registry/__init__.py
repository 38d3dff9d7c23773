"""Token registry — where recipient push tokens live."""

from autocenter_events.registry.base import TokenRegistry
from autocenter_events.registry.sqlite import SqliteTokenRegistry

__all__ = ["SqliteTokenRegistry", "TokenRegistry"]
