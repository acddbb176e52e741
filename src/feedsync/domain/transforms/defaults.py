"""Defaulting transforms; these run even when nothing was extracted."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from feedsync.domain.model import is_empty

if TYPE_CHECKING:
    from feedsync.domain.model import ShopContext, SourceRecord

STOCK_STATUS_MAP: Final[dict[str, str]] = {
    "instock": "in_stock",
    "outofstock": "out_of_stock",
    "onbackorder": "preorder",
}
DEFAULT_AVAILABILITY = "in_stock"
DEFAULT_CONDITION = "new"


def map_stock_status(value: object, source: SourceRecord, shop: ShopContext) -> object:
    _ = source, shop
    if isinstance(value, str):
        return STOCK_STATUS_MAP.get(value, DEFAULT_AVAILABILITY)
    return DEFAULT_AVAILABILITY


def default_to_new(value: object, source: SourceRecord, shop: ShopContext) -> object:
    _ = source, shop
    return DEFAULT_CONDITION if is_empty(value) else value


def default_to_zero(value: object, source: SourceRecord, shop: ShopContext) -> object:
    _ = source, shop
    return 0 if is_empty(value) else value
