"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Requirement(StrEnum):
    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"
    CONDITIONAL = "conditional"


class DataType(StrEnum):
    STRING = "string"
    ALPHANUMERIC = "alphanumeric"
    NUMERIC_STRING = "numeric_string"
    TEXT = "text"
    ENUM = "enum"
    URL = "url"
    URL_LIST = "url_list"
    INTEGER = "integer"
    NUMBER = "number"
    AMOUNT_WITH_CURRENCY = "amount_with_currency"
    NUMBER_WITH_UNIT = "number_with_unit"
    DATE = "date"
    DATE_RANGE = "date_range"
    COUNTRY_CODE = "country_code"


class FieldCategory(StrEnum):
    """UI grouping only; has no effect on resolution or validation."""

    FLAGS = "flags"
    BASIC_PRODUCT_DATA = "basic_product_data"
    ITEM_INFORMATION = "item_information"
    MEDIA = "media"
    PRICE_PROMOTIONS = "price_promotions"
    AVAILABILITY_INVENTORY = "availability_inventory"
    VARIANTS = "variants"
    FULFILLMENT = "fulfillment"
    MERCHANT_INFO = "merchant_info"
    RETURNS = "returns"
    PERFORMANCE_SIGNALS = "performance_signals"
    COMPLIANCE = "compliance"
    REVIEWS_QANDA = "reviews_qanda"
    RELATED_PRODUCTS = "related_products"
    GEO_TAGGING = "geo_tagging"


class ConditionCode(StrEnum):
    """Dependency conditions the validator knows how to evaluate."""

    CHECKOUT_ENABLED = "checkout_enabled"
    GTIN_PRESENT = "gtin_present"
    PREORDER_ONLY = "preorder_only"
    VARIANTS_PRESENT = "variants_present"
    SALE_PRICE_PRESENT = "sale_price_present"


class PropagationMode(StrEnum):
    APPLY_ALL = "apply_all"
    PRESERVE_OVERRIDES = "preserve_overrides"


class ValueSource(StrEnum):
    """Which link of the precedence chain produced a resolved value."""

    FLAG = "flag"
    STATIC_OVERRIDE = "static_override"
    PRODUCT_MAPPING = "product_mapping"
    SHOP_MAPPING = "shop_mapping"
    SPEC_DEFAULT = "spec_default"
    EXCLUDED = "excluded"
    NONE = "none"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"
