"""SQLAlchemy mapping metadata for shops and products."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from feedsync.adapters.sqlalchemy.documents import (
    StoredOverride,
    messages_adapter,
    overrides_adapter,
    resolved_values_adapter,
    shop_mapping_adapter,
)
from feedsync.domain.model import Product, Shop

if TYPE_CHECKING:
    from pydantic import TypeAdapter
    from sqlalchemy.engine import Engine

    from feedsync.domain.model import ProductOverrides

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class ValidatedJSON(TypeDecorator[Any]):
    """JSON column whose payload is checked by a pydantic adapter both ways.

    ``NULL`` loads as an empty dict so the domain never sees ``None`` maps.
    """

    impl = JSON
    cache_ok = True
    adapter: ClassVar[TypeAdapter[Any]]

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        _ = dialect
        if value is None:
            return None
        return self.adapter.dump_python(self.adapter.validate_python(value), mode="json")

    def process_result_value(self, value: Any, dialect: Dialect) -> Any:
        _ = dialect
        if value is None:
            return {}
        return self.adapter.validate_python(value)


class ShopMappingType(ValidatedJSON):
    cache_ok = True
    adapter = shop_mapping_adapter


class ResolvedValuesType(ValidatedJSON):
    cache_ok = True
    adapter = resolved_values_adapter


class MessagesType(ValidatedJSON):
    cache_ok = True
    adapter = messages_adapter


class OverridesType(TypeDecorator["ProductOverrides"]):
    impl = JSON
    cache_ok = True

    def process_bind_param(
        self, value: ProductOverrides | None, dialect: Dialect
    ) -> dict[str, Any] | None:
        _ = dialect
        if value is None:
            return None
        stored = {
            attribute: StoredOverride.from_domain(override)
            for attribute, override in value.items()
        }
        return overrides_adapter.dump_python(stored, mode="json")

    def process_result_value(self, value: Any, dialect: Dialect) -> ProductOverrides:
        _ = dialect
        if value is None:
            return {}
        stored = overrides_adapter.validate_python(value)
        return {attribute: override.to_domain() for attribute, override in stored.items()}


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

shop_table = Table(
    "shop",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("name", String, nullable=False),
    Column("store_url", String, nullable=True),
    Column("currency", String(3), nullable=True),
    Column("dimension_unit", String, nullable=True),
    Column("weight_unit", String, nullable=True),
    Column("seller_name", String, nullable=True),
    Column("seller_url", String, nullable=True),
    Column("seller_privacy_policy", String, nullable=True),
    Column("seller_tos", String, nullable=True),
    Column("return_policy", String, nullable=True),
    Column("return_window", Integer, nullable=True),
    Column("field_mappings", ShopMappingType, nullable=False, default=dict),
)

product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "shop_id",
        UUIDColumnType,
        ForeignKey("shop.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("external_id", Integer, nullable=True),
    Column("source_record", JSON, nullable=True),
    Column("enable_search", Boolean, nullable=False, default=True),
    Column("overrides", OverridesType, nullable=False, default=dict),
    Column("resolved_values", ResolvedValuesType, nullable=False, default=dict),
    Column("is_valid", Boolean, nullable=True),
    Column("validation_errors", MessagesType, nullable=False, default=dict),
    Column("validation_warnings", MessagesType, nullable=False, default=dict),
    Column("feed_updated_at", UTCDateTime, nullable=True),
    UniqueConstraint("shop_id", "external_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the catalog aggregates."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Shop, shop_table)
    mapper_registry.map_imperatively(Product, product_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
