"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from feedsync.adapters.sqlalchemy.mappings import product_table
from feedsync.domain.model import Product, Shop

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.orm import Session

    from feedsync.domain.model import ProductOverrides


class SqlAlchemyShopRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Shop) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> Shop | None:
        return self.session.get(Shop, entity_id)


class SqlAlchemyProductRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Product) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> Product | None:
        return self.session.get(Product, entity_id)

    def get_for_update(self, product_id: UUID) -> Product | None:
        return self.session.get(Product, product_id, with_for_update=True)

    def ids_for_shop(self, shop_id: UUID) -> list[UUID]:
        stmt = (
            select(product_table.c.id)
            .where(product_table.c.shop_id == shop_id)
            .order_by(product_table.c.external_id, product_table.c.id)
        )
        return list(self.session.execute(stmt).scalars())

    def ids_with_override(self, shop_id: UUID, attribute: str) -> list[UUID]:
        # Override maps are JSON documents; filter after decoding.
        stmt = select(product_table.c.id, product_table.c.overrides).where(
            product_table.c.shop_id == shop_id
        )
        return [
            product_id
            for product_id, overrides in self.session.execute(stmt).tuples()
            if attribute in cast("ProductOverrides", overrides)
        ]

    def count_overrides(self, shop_id: UUID, attribute: str) -> int:
        return len(self.ids_with_override(shop_id, attribute))


if TYPE_CHECKING:
    from feedsync.domain.ports.persistence import ProductRepository, ShopRepository

    _session_stub = cast("Session", object())
    _shop_repo_check: ShopRepository = SqlAlchemyShopRepository(_session_stub)
    _product_repo_check: ProductRepository = SqlAlchemyProductRepository(_session_stub)
