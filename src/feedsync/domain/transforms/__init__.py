"""Named pure functions that reshape extracted values into feed-ready form."""

from __future__ import annotations

from .defaults import default_to_new, default_to_zero, map_stock_status
from .measurements import add_unit, add_weight_unit, format_dimensions
from .pricing import format_price_with_currency, format_sale_date_range
from .product_data import (
    calculate_popularity_score,
    extract_additional_images,
    extract_custom_variant,
    extract_custom_variant_option,
    extract_gtin,
    format_related_ids,
    generate_group_id,
)
from .registry import Transform, TransformFunction, TransformKind, TransformRegistry
from .text import build_category_path, clean_variation_title, strip_html

BUILTIN_TRANSFORMS: tuple[Transform, ...] = (
    Transform("strip_html", strip_html),
    Transform("clean_variation_title", clean_variation_title),
    Transform("build_category_path", build_category_path),
    Transform("generate_group_id", generate_group_id, TransformKind.DEFAULTING),
    Transform("format_related_ids", format_related_ids),
    Transform("format_price_with_currency", format_price_with_currency),
    Transform("format_sale_date_range", format_sale_date_range),
    Transform("format_dimensions", format_dimensions),
    Transform("add_unit", add_unit),
    Transform("add_weight_unit", add_weight_unit),
    Transform("extract_additional_images", extract_additional_images),
    Transform("extract_gtin", extract_gtin),
    Transform("extract_custom_variant", extract_custom_variant),
    Transform("extract_custom_variant_option", extract_custom_variant_option),
    Transform("calculate_popularity_score", calculate_popularity_score),
    Transform("map_stock_status", map_stock_status, TransformKind.DEFAULTING),
    Transform("default_to_new", default_to_new, TransformKind.DEFAULTING),
    Transform("default_to_zero", default_to_zero, TransformKind.DEFAULTING),
)


def default_transforms() -> TransformRegistry:
    return TransformRegistry(BUILTIN_TRANSFORMS)


__all__ = [
    "BUILTIN_TRANSFORMS",
    "Transform",
    "TransformFunction",
    "TransformKind",
    "TransformRegistry",
    "default_transforms",
]
