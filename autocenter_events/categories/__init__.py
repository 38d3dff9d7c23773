"""Work-item categories — built-in alignment and service variants."""

from __future__ import annotations

from typing import TYPE_CHECKING

from autocenter_events.categories.alignment import AlignmentCategory
from autocenter_events.categories.service import ServiceCategory

if TYPE_CHECKING:
    from autocenter_events.catalog import CategoryCatalog
    from autocenter_events.config.schema import EngineConfig

__all__ = ["AlignmentCategory", "ServiceCategory", "register_all"]


def register_all(catalog: "CategoryCatalog", config: "EngineConfig") -> None:
    catalog.register(AlignmentCategory(config.alignment))
    catalog.register(ServiceCategory(config.service))
