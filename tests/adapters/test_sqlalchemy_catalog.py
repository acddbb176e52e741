"""Exercise the SQLAlchemy catalog adapter against in-memory SQLite."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from feedsync.adapters.sqlalchemy.documents import StoredOverride
from feedsync.adapters.sqlalchemy.mappings import product_table
from feedsync.adapters.sqlalchemy.unit_of_work import (
    StartupError,
    is_started,
    shutdown,
    startup,
)
from feedsync.domain.model import MappingOverride, PropagationMode, StaticOverride
from feedsync.domain.reprocessing import ReprocessingOrchestrator
from tests.support.catalog import build_resolver, build_validator, make_product, make_shop

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    from feedsync.adapters.sqlalchemy import SqlAlchemyCatalogUnitOfWork

    UnitOfWorkFactory = Callable[[], SqlAlchemyCatalogUnitOfWork]


def test_product_documents_round_trip(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    shop = make_shop(field_mappings={"color": "attributes.color"})
    product = make_product(
        shop,
        overrides={
            "color": MappingOverride("meta_data.colour"),
            "condition": MappingOverride(None),
            "title": StaticOverride("Wallet"),
        },
        resolved_values={
            "title": "Wallet",
            "inventory_quantity": 3,
            "additional_image_link": ["a"],
        },
        is_valid=False,
        validation_errors={"price": ["price is required"]},
        feed_updated_at=datetime(2025, 6, 1, 12, 0),  # noqa: DTZ001
    )
    with sqlite_unit_of_work() as uow:
        uow.repositories.shops.add(shop)
        uow.repositories.products.add(product)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        stored_shop = uow.repositories.shops.get(shop.id)
        stored = uow.repositories.products.get(product.id)

    assert stored_shop is not None
    assert stored_shop.field_mappings == {"color": "attributes.color"}
    assert stored is not None
    assert stored.overrides == {
        "color": MappingOverride("meta_data.colour"),
        "condition": MappingOverride(None),
        "title": StaticOverride("Wallet"),
    }
    assert stored.resolved_values == {
        "title": "Wallet",
        "inventory_quantity": 3,
        "additional_image_link": ["a"],
    }
    assert stored.validation_errors == {"price": ["price is required"]}
    assert stored.validation_warnings == {}
    assert stored.source_record == product.source_record
    assert stored.feed_updated_at == datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def test_override_queries(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    shop = make_shop()
    other_shop = make_shop(name="Other")
    products = [make_product(shop, external_id) for external_id in (3, 1, 2)]
    products[0].set_override("color", StaticOverride("Red"))
    products[2].set_override("color", MappingOverride(None))
    products[1].set_override("size", StaticOverride("M"))
    stray = make_product(other_shop, 1)
    stray.set_override("color", StaticOverride("Blue"))
    with sqlite_unit_of_work() as uow:
        for entity in (shop, other_shop):
            uow.repositories.shops.add(entity)
        for entity in (*products, stray):
            uow.repositories.products.add(entity)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        repository = uow.repositories.products
        assert repository.ids_for_shop(shop.id) == [products[1].id, products[2].id, products[0].id]
        assert set(repository.ids_with_override(shop.id, "color")) == {
            products[0].id,
            products[2].id,
        }
        assert repository.count_overrides(shop.id, "color") == 2
        assert repository.count_overrides(shop.id, "gtin") == 0


def test_unit_of_work_rolls_back_on_error(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    shop = make_shop()

    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.repositories.shops.add(shop)
        uow.session.flush()
        raise RuntimeError("abort")

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.shops.get(shop.id) is None


def test_orchestrator_persists_feed_state(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    shop = make_shop()
    products = [make_product(shop, external_id) for external_id in range(1, 6)]
    products[0].set_override("color", StaticOverride("Red"))
    with sqlite_unit_of_work() as uow:
        uow.repositories.shops.add(shop)
        for product in products:
            uow.repositories.products.add(product)
        uow.commit()
    orchestrator = ReprocessingOrchestrator(
        sqlite_unit_of_work, build_resolver(), build_validator(), batch_size=2, max_workers=1
    )

    result = orchestrator.update_shop_mapping(
        shop.id, "color", "attributes.color", PropagationMode.APPLY_ALL
    )

    assert result.failed == {}
    assert result.overrides_removed == 1
    with sqlite_unit_of_work() as uow:
        stored_shop = uow.repositories.shops.get(shop.id)
        stored = [uow.repositories.products.get(product.id) for product in products]
    assert stored_shop is not None
    assert stored_shop.field_mappings["color"] == "attributes.color"
    for product in stored:
        assert product is not None
        assert product.overrides == {}
        assert product.resolved_values["color"] == "Brown"
        assert product.is_valid is True
        assert product.feed_updated_at is not None
    assert not orchestrator.reprocess(products[1].id)


def test_unit_of_work_requires_startup(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    shutdown()

    with pytest.raises(StartupError):
        sqlite_unit_of_work()


def test_unit_of_work_session_is_scoped_to_the_block(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    uow = sqlite_unit_of_work()

    with pytest.raises(StartupError):
        _ = uow.repositories
    with uow:
        assert uow.repositories.shops.get(make_shop().id) is None
        with pytest.raises(StartupError), uow:
            pass
    with pytest.raises(StartupError):
        _ = uow.session


def test_startup_refuses_to_rebind_without_force(
    sqlite_unit_of_work: UnitOfWorkFactory, sqlite_engine: Engine
) -> None:
    with pytest.raises(StartupError):
        startup(engine=sqlite_engine)

    assert is_started()
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.products.ids_for_shop(make_shop().id) == []


def test_product_table_stores_only_the_search_flag() -> None:
    assert "enable_search" in product_table.c
    assert "enable_checkout" not in product_table.c


def test_stored_static_override_needs_a_value() -> None:
    with pytest.raises(ValidationError):
        StoredOverride.model_validate({"type": "static", "value": None})
    with pytest.raises(ValidationError):
        StoredOverride.model_validate({"type": "computed", "value": "x"})
    assert StoredOverride.model_validate({"type": "mapping"}).to_domain() == MappingOverride(None)
