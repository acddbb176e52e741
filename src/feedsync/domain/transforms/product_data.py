"""Transforms reading structured product data (identifiers, media, variants, sales)."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Final, cast

from feedsync.domain.model import is_empty, parse_number

if TYPE_CHECKING:
    from feedsync.domain.model import ShopContext, SourceRecord

GTIN_META_KEYS: Final = ("_gtin", "gtin", "_upc", "upc", "_ean", "ean", "_isbn", "isbn")
MAX_POPULARITY_SCORE = 5.0


def extract_gtin(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """Accept a GTIN string as-is or pick it out of ``meta_data`` entries."""

    _ = source, shop
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    for entry in _mappings(value):
        if entry.get("key") in GTIN_META_KEYS:
            found = entry.get("value")
            return None if is_empty(found) else found
    return None


def extract_additional_images(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """Every image ``src`` after the first one (which feeds ``image_link``)."""

    _ = source, shop
    return [
        image["src"]
        for image in _mappings(value)[1:]
        if isinstance(image.get("src"), str) and image["src"]
    ]


def extract_custom_variant(value: object, source: SourceRecord, shop: ShopContext) -> object:
    _ = source, shop
    attributes = _mappings(value)
    if not attributes:
        return None
    return attributes[0].get("name") or None


def extract_custom_variant_option(
    value: object, source: SourceRecord, shop: ShopContext
) -> object:
    _ = source, shop
    attributes = _mappings(value)
    if not attributes:
        return None
    first = attributes[0]
    option = first.get("option")
    if option is not None:
        return option
    options = first.get("options")
    if isinstance(options, Sequence) and not isinstance(options, str) and options:
        return cast("Sequence[object]", options)[0]
    return None


def format_related_ids(value: object, source: SourceRecord, shop: ShopContext) -> object:
    _ = source, shop
    if not isinstance(value, Sequence) or isinstance(value, str):
        return None
    ids = [str(item) for item in cast("Sequence[object]", value)]
    return ",".join(ids) or None


def generate_group_id(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """``<shop>-<parent>`` for variations, ``<shop>-<self>`` for standalone products."""

    own_id = value if _is_positive_int(value) else source.get("id")
    if is_empty(own_id):
        return None
    if shop.shop_id is None:
        return str(own_id)
    return f"{shop.shop_id}-{own_id}"


def calculate_popularity_score(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """Map lifetime sales onto a 0-5 scale (``log10(sales + 1)``, one decimal)."""

    _ = source, shop
    sales = parse_number(value)
    if sales is None or sales <= 0:
        return None
    return round(min(MAX_POPULARITY_SCORE, math.log10(sales + 1)), 1)


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _mappings(value: object) -> list[Mapping[str, object]]:
    if not isinstance(value, Sequence) or isinstance(value, str):
        return []
    return [
        cast("Mapping[str, object]", item)
        for item in cast("Sequence[object]", value)
        if isinstance(item, Mapping)
    ]
