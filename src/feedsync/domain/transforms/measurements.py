"""Dimension and weight formatting.

A dimension counts as filled when it is present and not zero (``0`` or
``"0"``); partial dimension sets never produce output.
Units come from the shop settings, then the record, then ``in`` / ``lb``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from feedsync.domain.model import is_empty

if TYPE_CHECKING:
    from feedsync.domain.model import ShopContext, SourceRecord

DIMENSION_KEYS = ("length", "width", "height")
DEFAULT_DIMENSION_UNIT = "in"
DEFAULT_WEIGHT_UNIT = "lb"


def format_dimensions(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """``{"length": "12", "width": "8", "height": "5"}`` becomes ``"12x8x5 in"``."""

    _ = source
    if not isinstance(value, Mapping):
        return None
    dimensions = cast("Mapping[str, object]", value)
    if _filled_count(dimensions) != len(DIMENSION_KEYS):
        return None
    unit = _dimension_unit(dimensions, shop)
    length, width, height = (dimensions[key] for key in DIMENSION_KEYS)
    return f"{length}x{width}x{height} {unit}"


def add_unit(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """Suffix one dimension with the unit, only when all three are filled."""

    raw = source.get("dimensions")
    dimensions = cast("Mapping[str, object]", raw) if isinstance(raw, Mapping) else {}
    if not _is_filled(value) or _filled_count(dimensions) != len(DIMENSION_KEYS):
        return None
    return f"{value} {_dimension_unit(dimensions, shop)}"


def add_weight_unit(value: object, source: SourceRecord, shop: ShopContext) -> object:
    _ = source
    return f"{value} {shop.weight_unit or DEFAULT_WEIGHT_UNIT}"


def _is_filled(value: object) -> bool:
    if is_empty(value) or isinstance(value, bool):
        return False
    return value not in (0, "0")


def _filled_count(dimensions: Mapping[str, object]) -> int:
    return sum(1 for key in DIMENSION_KEYS if _is_filled(dimensions.get(key)))


def _dimension_unit(dimensions: Mapping[str, object], shop: ShopContext) -> str:
    if shop.dimension_unit:
        return shop.dimension_unit
    unit = dimensions.get("unit")
    return unit if isinstance(unit, str) and unit else DEFAULT_DIMENSION_UNIT
