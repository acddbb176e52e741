from __future__ import annotations

from uuid import UUID, uuid4

import pytest

from feedsync import app as app_module
from feedsync.config import ReprocessingConfig
from feedsync.domain.model import PropagationMode, StaticOverride
from feedsync.domain.reprocessing import BatchResult, PropagationResult
from feedsync.domain.specification import default_registry
from feedsync.ui import cli as cli_module
from tests.support.catalog import InMemoryCatalog, make_shop


def test_cli_propagate_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    shop_id = uuid4()

    def fake_propagate(
        shop: UUID, attribute: str, mode: PropagationMode, **kwargs: object
    ) -> PropagationResult:
        captured.update(shop=shop, attribute=attribute, mode=mode, **kwargs)
        return PropagationResult(shop_id=shop, attribute=attribute, mode=mode)

    monkeypatch.setattr(cli_module, "propagate_mapping", fake_propagate)

    cli_module.main(["propagate", str(shop_id), "color"])

    assert captured == {
        "shop": shop_id,
        "attribute": "color",
        "mode": PropagationMode.PRESERVE_OVERRIDES,
        "path": None,
        "update_mapping": False,
    }


def test_cli_propagate_with_new_mapping(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_propagate(
        shop: UUID, attribute: str, mode: PropagationMode, **kwargs: object
    ) -> PropagationResult:
        captured.update(mode=mode, **kwargs)
        return PropagationResult(shop_id=shop, attribute=attribute, mode=mode)

    monkeypatch.setattr(cli_module, "propagate_mapping", fake_propagate)

    cli_module.main(
        ["propagate", str(uuid4()), "color", "--mode", "apply_all", "--path", "attributes.color"]
    )

    assert captured["mode"] is PropagationMode.APPLY_ALL
    assert captured["path"] == "attributes.color"
    assert captured["update_mapping"] is True


def test_cli_clear_mapping(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_propagate(
        shop: UUID, attribute: str, mode: PropagationMode, **kwargs: object
    ) -> PropagationResult:
        captured.update(kwargs)
        return PropagationResult(shop_id=shop, attribute=attribute, mode=mode)

    monkeypatch.setattr(cli_module, "propagate_mapping", fake_propagate)

    cli_module.main(["propagate", str(uuid4()), "color", "--clear"])

    assert captured == {"path": None, "update_mapping": True}


def test_cli_invalid_uuid() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reprocess", "not-a-uuid"])

    assert excinfo.value.code == 2


def test_cli_rejects_unknown_mode() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["propagate", str(uuid4()), "color", "--mode", "everything"])

    assert excinfo.value.code == 2


def test_cli_check_spec_runs() -> None:
    cli_module.main(["check-spec"])


def test_cli_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_reprocess_shop(shop_id: UUID) -> BatchResult:
        raise RuntimeError(f"database unavailable for {shop_id}")

    monkeypatch.setattr(cli_module, "reprocess_shop", fake_reprocess_shop)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["reprocess-shop", str(uuid4())])

    assert excinfo.value.code == 1


def test_check_specification_counts_registry() -> None:
    report = app_module.check_specification()

    assert report.attributes == len(default_registry())
    assert 0 < report.required < report.attributes
    assert report.locked > 0
    assert report.transforms > 0


def test_app_entry_points_use_injected_unit_of_work(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    products = catalog.add_products(shop, 4)
    products[0].set_override("color", StaticOverride("Red"))

    assert app_module.reprocess_product(products[0].id, unit_of_work_factory=catalog.unit_of_work)
    total = app_module.count_overrides(shop.id, "color", unit_of_work_factory=catalog.unit_of_work)
    assert total == 1

    result = app_module.propagate_mapping(
        shop.id,
        "color",
        PropagationMode.APPLY_ALL,
        path="attributes.color",
        update_mapping=True,
        unit_of_work_factory=catalog.unit_of_work,
    )

    assert result.overrides_removed == 1
    assert shop.field_mappings["color"] == "attributes.color"
    assert all(product.resolved_values["color"] == "Brown" for product in products)


def test_build_orchestrator_honours_config(catalog: InMemoryCatalog) -> None:
    shop = catalog.add_shop(make_shop())
    catalog.add_products(shop, 3)
    orchestrator = app_module.build_orchestrator(
        unit_of_work_factory=catalog.unit_of_work,
        config=ReprocessingConfig(batch_size=1, max_workers=1),
    )

    result = orchestrator.reprocess_shop(shop.id)

    assert result.processed == 3
    assert result.failed == {}
