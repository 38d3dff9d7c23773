"""Category catalog — registry of the work-item categories the engine watches."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from autocenter_events.envelope import Category, NotificationMessage, RecipientQuery, WorkItemSnapshot

if TYPE_CHECKING:
    from autocenter_events.config.schema import EngineConfig


class UnknownCategoryError(KeyError):
    pass


class WorkItemCategory(Protocol):
    """Per-category decision logic: trigger predicate, recipient query, message."""

    category: Category
    collection: str

    def qualifies(self, before: WorkItemSnapshot | None, after: WorkItemSnapshot | None) -> bool: ...

    def recipient_query(self, after: WorkItemSnapshot) -> RecipientQuery: ...

    def compose(self, after: WorkItemSnapshot) -> NotificationMessage: ...


class CategoryCatalog:
    def __init__(self) -> None:
        self._registry: dict[Category, WorkItemCategory] = {}

    def register(self, category: WorkItemCategory) -> None:
        if category.category in self._registry:
            raise ValueError(f"Category already registered: {category.category.value}")
        self._registry[category.category] = category

    def get(self, category: Category | str) -> WorkItemCategory:
        try:
            return self._registry[Category(category)]
        except (KeyError, ValueError):
            raise UnknownCategoryError(str(category)) from None

    def for_collection(self, collection: str) -> WorkItemCategory | None:
        for category in self._registry.values():
            if category.collection == collection:
                return category
        return None

    def list_all(self) -> list[WorkItemCategory]:
        return sorted(self._registry.values(), key=lambda c: c.category.value)


def build_default_catalog(config: "EngineConfig | None" = None) -> CategoryCatalog:
    from autocenter_events.categories import register_all
    from autocenter_events.config.schema import EngineConfig

    catalog = CategoryCatalog()
    register_all(catalog, config or EngineConfig())
    return catalog
