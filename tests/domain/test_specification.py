from __future__ import annotations

import pytest

from feedsync.domain.errors import DuplicateAttributeError, UnknownAttributeError
from feedsync.domain.model import (
    DataType,
    ExtractionMapping,
    FieldCategory,
    FieldSpecification,
    Requirement,
)
from feedsync.domain.specification import (
    ENABLE_CHECKOUT,
    ENABLE_SEARCH,
    FEED_SPECIFICATION,
    SpecificationRegistry,
    default_registry,
)


def _spec(attribute: str, **changes: object) -> FieldSpecification:
    values: dict[str, object] = {
        "attribute": attribute,
        "data_type": DataType.STRING,
        "requirement": Requirement.OPTIONAL,
        "category": FieldCategory.BASIC_PRODUCT_DATA,
    }
    values.update(changes)
    return FieldSpecification(**values)  # type: ignore[arg-type]


def test_default_registry_keeps_feed_order_and_flags_first() -> None:
    registry = default_registry()

    attributes = [spec.attribute for spec in registry]
    assert attributes[:2] == [ENABLE_SEARCH, ENABLE_CHECKOUT]
    assert len(registry) == len(FEED_SPECIFICATION)
    assert len(set(attributes)) == len(attributes)


def test_locked_attributes_and_static_allow_list() -> None:
    registry = default_registry()

    locked = registry.locked_attribute_set()
    assert {"id", "gtin", "title", "brand", "availability", "item_group_id"} <= locked
    assert "color" not in locked
    allow_listed = {spec.attribute for spec in registry if spec.locked and spec.accepts_static_override}
    assert allow_listed == {"title", "description", "product_category"}


def test_required_attributes() -> None:
    required = {spec.attribute for spec in default_registry().required_attributes()}

    assert {"id", "title", "price", "availability", "seller_name", "return_window"} <= required
    assert "color" not in required


def test_require_unknown_attribute_raises() -> None:
    registry = default_registry()

    assert registry.get("nonexistent") is None
    assert "nonexistent" not in registry
    with pytest.raises(UnknownAttributeError):
        registry.require("nonexistent")


def test_duplicate_attributes_are_rejected() -> None:
    with pytest.raises(DuplicateAttributeError):
        SpecificationRegistry([_spec("color"), _spec("color")])


def test_by_category() -> None:
    registry = default_registry()

    merchant = {spec.attribute for spec in registry.by_category(FieldCategory.MERCHANT_INFO)}
    assert {"seller_name", "seller_url", "seller_tos"} <= merchant


def test_default_shop_mappings_prefix_shop_level_paths() -> None:
    mappings = default_registry().default_shop_mappings()

    assert mappings["brand"] == "brands[0].name"
    assert mappings["seller_name"] == "shop.seller_name"
    assert mappings["color"] is None


def test_shop_level_mapping_cannot_carry_a_transform() -> None:
    with pytest.raises(ValueError, match="shop-level"):
        ExtractionMapping(path="currency", transform="strip_html", shop_level=True)
