from __future__ import annotations

import threading
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from feedsync.domain.errors import (
    InvalidStaticValueError,
    OverrideNotAllowedError,
    ProductNotFoundError,
    ShopNotFoundError,
    SourceRecordMissingError,
    UnknownAttributeError,
)
from feedsync.domain.model import MappingOverride, PropagationMode, StaticOverride
from feedsync.domain.reprocessing import ProductLocks, ReprocessingOrchestrator
from tests.support.catalog import (
    InMemoryCatalog,
    build_resolver,
    build_validator,
    make_product,
    make_shop,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def _orchestrator(
    catalog: InMemoryCatalog,
    *,
    batch_size: int = 50,
    max_workers: int = 1,
) -> ReprocessingOrchestrator:
    return ReprocessingOrchestrator(
        catalog.unit_of_work,
        build_resolver(),
        build_validator(),
        batch_size=batch_size,
        max_workers=max_workers,
        clock=lambda: NOW,
    )


def test_reprocess_stores_resolved_values_and_validation(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    (product,) = catalog.add_products(shop, 1)

    changed = _orchestrator(catalog).reprocess(product.id)

    assert changed
    assert product.resolved_values["title"] == "Leather Wallet"
    assert product.is_valid is True
    assert product.validation_errors == {}
    assert "color" in product.validation_warnings
    assert product.feed_updated_at == NOW
    assert catalog.commits == 1


def test_reprocess_twice_leaves_stored_state_unchanged(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    (product,) = catalog.add_products(shop, 1)
    orchestrator = _orchestrator(catalog)
    orchestrator.reprocess(product.id)
    snapshot = (dict(product.resolved_values), product.feed_updated_at, catalog.commits)

    changed = orchestrator.reprocess(product.id)

    assert not changed
    assert (dict(product.resolved_values), product.feed_updated_at, catalog.commits) == snapshot


def test_reprocess_raises_for_missing_inputs(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    orphan = make_product(make_shop())
    unsynced = make_product(shop, 7, source_record=None)
    catalog.products.add(orphan)
    catalog.products.add(unsynced)
    orchestrator = _orchestrator(catalog)

    with pytest.raises(ProductNotFoundError):
        orchestrator.reprocess(uuid4())
    with pytest.raises(SourceRecordMissingError):
        orchestrator.reprocess(unsynced.id)
    with pytest.raises(ShopNotFoundError):
        orchestrator.reprocess(orphan.id)
    assert catalog.commits == 0
    assert catalog.rollbacks == 3


def test_set_static_override_recomputes_immediately(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop(field_mappings={}))
    (product,) = catalog.add_products(shop, 1)
    orchestrator = _orchestrator(catalog)
    orchestrator.reprocess(product.id)
    assert product.is_valid is False

    orchestrator.set_product_override(product.id, "material", StaticOverride("Leather"))

    assert product.overrides == {"material": StaticOverride("Leather")}
    assert product.resolved_values["material"] == "Leather"
    assert product.is_valid is True


def test_override_policy_is_enforced_before_storage(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    (product,) = catalog.add_products(shop, 1)
    orchestrator = _orchestrator(catalog)

    with pytest.raises(OverrideNotAllowedError):
        orchestrator.set_product_override(product.id, "gtin", MappingOverride("meta_data.ean"))
    with pytest.raises(OverrideNotAllowedError):
        orchestrator.set_product_override(product.id, "brand", StaticOverride("Other"))
    with pytest.raises(InvalidStaticValueError):
        orchestrator.set_product_override(product.id, "price", StaticOverride("cheap"))
    with pytest.raises(UnknownAttributeError):
        orchestrator.set_product_override(product.id, "colour", StaticOverride("Red"))
    assert product.overrides == {}
    assert catalog.commits == 0


def test_clear_override_restores_inherited_value(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    (product,) = catalog.add_products(shop, 1)
    orchestrator = _orchestrator(catalog)
    orchestrator.set_product_override(product.id, "condition", MappingOverride(None))
    assert "condition" not in product.resolved_values

    assert orchestrator.clear_product_override(product.id, "condition")

    assert product.overrides == {}
    assert product.resolved_values["condition"] == "new"


def test_concurrent_override_edits_keep_every_attribute(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    (product,) = catalog.add_products(shop, 1)
    orchestrator = _orchestrator(catalog)
    edits = [
        ("color", StaticOverride("Brown")),
        ("size", StaticOverride("One size")),
        ("gender", StaticOverride("unisex")),
        ("age_group", StaticOverride("adult")),
    ]

    threads = [
        threading.Thread(
            target=orchestrator.set_product_override, args=(product.id, attribute, override)
        )
        for attribute, override in edits
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert product.overrides == dict(edits)


def test_product_locks_are_shared_per_id() -> None:
    locks = ProductLocks()
    product_id = uuid4()
    entered = threading.Event()
    release = threading.Event()
    order: list[str] = []

    def holder() -> None:
        with locks.hold(product_id):
            entered.set()
            release.wait(timeout=5)
            order.append("first")

    thread = threading.Thread(target=holder)
    thread.start()
    entered.wait(timeout=5)
    with locks.hold(uuid4()):
        order.append("other product")
    release.set()
    with locks.hold(product_id):
        order.append("second")
    thread.join()

    assert order == ["other product", "first", "second"]


def test_count_overrides_previews_propagation(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    products = catalog.add_products(shop, 500)
    for product in products[:12]:
        product.set_override("color", MappingOverride("meta_data.colour"))
    products[20].set_override("size", StaticOverride("M"))
    commits_before = catalog.commits

    assert _orchestrator(catalog).count_overrides_for_attribute(shop.id, "color") == 12
    assert catalog.commits == commits_before


def test_apply_all_discards_every_override_for_the_attribute(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    products = catalog.add_products(shop, 30)
    for product in products[:5]:
        product.set_override("color", MappingOverride("meta_data.colour"))
    products[5].set_override("color", StaticOverride("Red"))
    products[6].set_override("size", StaticOverride("M"))
    orchestrator = _orchestrator(catalog, batch_size=7, max_workers=3)

    result = orchestrator.update_shop_mapping(
        shop.id, "color", "attributes.color", PropagationMode.APPLY_ALL
    )

    assert shop.field_mappings["color"] == "attributes.color"
    assert result.processed == 30
    assert result.failed == {}
    assert result.overrides_removed == 6
    assert orchestrator.count_overrides_for_attribute(shop.id, "color") == 0
    assert products[6].overrides == {"size": StaticOverride("M")}
    assert all(product.resolved_values["color"] == "Brown" for product in products)


def test_apply_all_removes_overrides_of_unsynced_products(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    products = catalog.add_products(shop, 3)
    for product in products:
        product.set_override("color", MappingOverride("meta_data.colour"))
    products[1].source_record = None
    orchestrator = _orchestrator(catalog)

    result = orchestrator.propagate_shop_mapping_change(
        shop.id, "color", PropagationMode.APPLY_ALL
    )

    assert orchestrator.count_overrides_for_attribute(shop.id, "color") == 0
    assert result.overrides_removed == 3
    assert set(result.failed) == {products[1].id}
    assert "source record" in result.failed[products[1].id].lower()
    assert products[1].resolved_values == {}


def test_preserve_overrides_skips_overridden_products(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    products = catalog.add_products(shop, 10)
    orchestrator = _orchestrator(catalog, batch_size=3)
    orchestrator.set_product_override(products[0].id, "color", StaticOverride("Red"))

    result = orchestrator.update_shop_mapping(shop.id, "color", "attributes.color")

    assert result.mode is PropagationMode.PRESERVE_OVERRIDES
    assert result.processed == 9
    assert products[0].id not in result.succeeded
    assert products[0].resolved_values["color"] == "Red"
    assert products[1].resolved_values["color"] == "Brown"


def test_propagation_tallies_failures_without_aborting(catalog: InMemoryCatalog) -> None:
    shop = make_shop()
    catalog.add_shop(shop)
    products = catalog.add_products(shop, 8)
    catalog.products.failing_ids = {products[2].id, products[5].id}

    result = _orchestrator(catalog, batch_size=3, max_workers=2).propagate_shop_mapping_change(
        shop.id, "color", PropagationMode.APPLY_ALL
    )

    assert result.processed == 8
    assert len(result.succeeded) == 6
    assert set(result.failed) == {products[2].id, products[5].id}
    assert "storage unavailable" in result.failed[products[2].id]


def test_propagation_can_stop_between_batches(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    catalog.add_products(shop, 10)
    calls: list[int] = []

    def stop_after_two_batches() -> bool:
        calls.append(1)
        return len(calls) > 2

    result = _orchestrator(catalog, batch_size=4).propagate_shop_mapping_change(
        shop.id, "color", PropagationMode.PRESERVE_OVERRIDES, should_stop=stop_after_two_batches
    )

    assert result.stopped
    assert result.processed == 8


def test_update_shop_mapping_rejects_locked_attributes(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())

    with pytest.raises(OverrideNotAllowedError):
        _orchestrator(catalog).update_shop_mapping(shop.id, "brand", "meta_data.brand")
    with pytest.raises(ShopNotFoundError):
        _orchestrator(catalog).update_shop_mapping(uuid4(), "color", "attributes.color")
    assert "brand" not in shop.field_mappings


def test_reprocess_shop_covers_every_product(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    products = catalog.add_products(shop, 5)
    catalog.add_products(catalog.add_shop(make_shop(name="Other")), 3, start=100)

    result = _orchestrator(catalog, batch_size=2, max_workers=2).reprocess_shop(shop.id)

    assert sorted(result.succeeded) == sorted(product.id for product in products)
    assert all(product.is_valid for product in products)


def test_orchestrator_rejects_invalid_batching(catalog: InMemoryCatalog) -> None:
    with pytest.raises(ValueError, match="batch_size"):
        _orchestrator(catalog, batch_size=0)
    with pytest.raises(ValueError, match="max_workers"):
        _orchestrator(catalog, max_workers=0)
