"""Text shaping transforms: markup removal, titles and category paths."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    from feedsync.domain.model import ShopContext, SourceRecord

_TAG = re.compile(r"<[^>]*>")
_TITLE_SEPARATOR = " - "
CATEGORY_SEPARATOR = " > "
MAX_CATEGORY_DEPTH = 10


def strip_html(value: object, source: SourceRecord, shop: ShopContext) -> object:
    _ = source, shop
    return _TAG.sub("", str(value)).strip()


def clean_variation_title(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """Collapse ``"Shirt - Shirt - Red"`` into ``"Shirt - Red"`` for variations.

    Upstream stores build variation names as ``parent - parent - option`` in
    some configurations; only the leading duplicate is removed.
    """

    _ = shop
    if not isinstance(value, str) or not is_variation(source):
        return value
    parts = value.split(_TITLE_SEPARATOR)
    if len(parts) < 3:
        return value
    if parts[0].strip() == parts[1].strip():
        return _TITLE_SEPARATOR.join(parts[1:])
    return value


def build_category_path(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """Render the deepest category chain as ``"Root > Child > Leaf"``.

    Only parents present in the product's own category list are followed.
    """

    _ = source, shop
    if not isinstance(value, Sequence) or isinstance(value, str):
        return None
    categories = [
        cast("Mapping[str, object]", item)
        for item in cast("Sequence[object]", value)
        if isinstance(item, Mapping)
    ]
    by_id = {category["id"]: category for category in categories if category.get("id")}

    deepest: list[str] = []
    for category in categories:
        chain = _category_chain(category, by_id)
        if len(chain) > len(deepest):
            deepest = chain
    return CATEGORY_SEPARATOR.join(deepest) if deepest else None


def _category_chain(
    category: Mapping[str, object],
    by_id: Mapping[object, Mapping[str, object]],
) -> list[str]:
    chain: list[str] = []
    current: Mapping[str, object] | None = category
    depth = 0
    while current is not None and depth < MAX_CATEGORY_DEPTH:
        name = current.get("name")
        if isinstance(name, str) and name:
            chain.insert(0, name)
        parent = current.get("parent")
        current = by_id.get(parent) if isinstance(parent, int) and parent > 0 else None
        depth += 1
    return chain


def is_variation(source: SourceRecord) -> bool:
    parent_id = source.get("parent_id")
    return isinstance(parent_id, int) and not isinstance(parent_id, bool) and parent_id > 0
