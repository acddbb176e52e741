"""Ports for persisting catalog aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from feedsync.domain.model import Product, Shop

if TYPE_CHECKING:
    from uuid import UUID


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class ShopRepository(Repository[Shop], Protocol):
    """Persistence contract for shops and their mapping tables."""


@runtime_checkable
class ProductRepository(Repository[Product], Protocol):
    """Persistence contract for products, their overrides and derived caches."""

    def get_for_update(self, product_id: UUID) -> Product | None: ...

    def ids_for_shop(self, shop_id: UUID) -> list[UUID]: ...

    def ids_with_override(self, shop_id: UUID, attribute: str) -> list[UUID]: ...

    def count_overrides(self, shop_id: UUID, attribute: str) -> int: ...
