"""The product-feed attribute table.

One :class:`FieldSpecification` per output attribute, in feed order. Source
paths address the upstream store's product document; ``shop_level`` mappings
read shop settings instead.
"""

from __future__ import annotations

from typing import Final

from feedsync.domain.model import (
    ConditionCode,
    DataType,
    Dependency,
    ExtractionMapping,
    FieldCategory,
    FieldSpecification,
    Requirement,
)
from feedsync.domain.validation.rules import (
    AmountWithCurrency,
    CountryCode,
    DateRange,
    DigitCount,
    FutureDate,
    IsoDate,
    MaxLength,
    NoDashesOrSpaces,
    NotAbovePrice,
    NotAllCaps,
    NumberSign,
    NumericRange,
    OneOf,
    PlainText,
    UrlList,
    ValueWithUnit,
    WellFormedUrl,
)

from .registry import ENABLE_CHECKOUT, ENABLE_SEARCH, SpecificationRegistry

BOOLEAN_FLAG_VALUES: Final = ("true", "false")
CONDITION_VALUES: Final = ("new", "refurbished", "used")
AVAILABILITY_VALUES: Final = ("in_stock", "out_of_stock", "preorder")
AGE_GROUP_VALUES: Final = ("newborn", "infant", "toddler", "kids", "adult")
PICKUP_METHOD_VALUES: Final = ("in_store", "reserve", "not_supported")
GENDER_VALUES: Final = ("male", "female", "unisex")
RELATIONSHIP_TYPE_VALUES: Final = (
    "part_of_set",
    "required_part",
    "often_bought_with",
    "substitute",
    "different_brand",
    "accessory",
)

_ALL_THREE_DIMENSIONS = Dependency(
    "Provide all three (length, width, height) if using individual fields"
)
_APPAREL = Dependency("Recommended for apparel")


def _custom_variant(index: int) -> tuple[FieldSpecification, FieldSpecification]:
    # only the first custom variant has a default mapping
    category_mapping = option_mapping = None
    if index == 1:
        category_mapping = ExtractionMapping(path="attributes", transform="extract_custom_variant")
        option_mapping = ExtractionMapping(
            path="attributes", transform="extract_custom_variant_option"
        )
    return (
        FieldSpecification(
            attribute=f"custom_variant{index}_category",
            data_type=DataType.STRING,
            requirement=Requirement.OPTIONAL,
            category=FieldCategory.VARIANTS,
            description="Name of a custom variant dimension.",
            example="Size_Type",
            mapping=category_mapping,
        ),
        FieldSpecification(
            attribute=f"custom_variant{index}_option",
            data_type=DataType.STRING,
            requirement=Requirement.OPTIONAL,
            category=FieldCategory.VARIANTS,
            description="Value of the custom variant dimension for this item.",
            example="Petite",
            mapping=option_mapping,
        ),
    )


FEED_SPECIFICATION: Final[tuple[FieldSpecification, ...]] = (
    # flags
    FieldSpecification(
        attribute=ENABLE_SEARCH,
        data_type=DataType.ENUM,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.FLAGS,
        description="Whether the product can appear in search results.",
        example="true",
        supported_values=BOOLEAN_FLAG_VALUES,
        rules=(OneOf(BOOLEAN_FLAG_VALUES),),
    ),
    FieldSpecification(
        attribute=ENABLE_CHECKOUT,
        data_type=DataType.ENUM,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.FLAGS,
        description="Whether the product can be purchased in-chat.",
        example="false",
        dependency=Dependency("enable_search must be true"),
        supported_values=BOOLEAN_FLAG_VALUES,
        rules=(OneOf(BOOLEAN_FLAG_VALUES),),
    ),
    # basic product data
    FieldSpecification(
        attribute="id",
        data_type=DataType.ALPHANUMERIC,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.BASIC_PRODUCT_DATA,
        description="Merchant product identifier, stable over time.",
        example="SKU12345",
        rules=(MaxLength(100),),
        mapping=ExtractionMapping(path="id"),
        locked=True,
    ),
    FieldSpecification(
        attribute="gtin",
        data_type=DataType.NUMERIC_STRING,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.BASIC_PRODUCT_DATA,
        description="Global Trade Item Number (GTIN, UPC or ISBN).",
        example="123456789543",
        rules=(DigitCount(8, 14), NoDashesOrSpaces()),
        mapping=ExtractionMapping(
            path="global_unique_id", fallback="meta_data", transform="extract_gtin"
        ),
        locked=True,
    ),
    FieldSpecification(
        attribute="mpn",
        data_type=DataType.ALPHANUMERIC,
        requirement=Requirement.CONDITIONAL,
        category=FieldCategory.BASIC_PRODUCT_DATA,
        description="Manufacturer part number.",
        example="GPT5",
        dependency=Dependency("Required if gtin is provided", ConditionCode.GTIN_PRESENT),
        rules=(MaxLength(70),),
    ),
    FieldSpecification(
        attribute="title",
        data_type=DataType.TEXT,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.BASIC_PRODUCT_DATA,
        description="Product title.",
        example="Men's Trail Running Shoes Black",
        rules=(MaxLength(150), NotAllCaps()),
        mapping=ExtractionMapping(path="name", transform="clean_variation_title"),
        locked=True,
        static_override_allowed=True,
        ai_enrichable=True,
    ),
    FieldSpecification(
        attribute="description",
        data_type=DataType.TEXT,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.BASIC_PRODUCT_DATA,
        description="Full product description in plain text.",
        example="Waterproof trail shoe with cushioned sole.",
        rules=(MaxLength(5000), PlainText()),
        mapping=ExtractionMapping(
            path="description", fallback="short_description", transform="strip_html"
        ),
        locked=True,
        static_override_allowed=True,
        ai_enrichable=True,
    ),
    FieldSpecification(
        attribute="link",
        data_type=DataType.URL,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.BASIC_PRODUCT_DATA,
        description="Product detail page URL.",
        example="https://example.com/product/SKU12345",
        rules=(WellFormedUrl(),),
        mapping=ExtractionMapping(path="permalink"),
        locked=True,
    ),
    # item information
    FieldSpecification(
        attribute="condition",
        data_type=DataType.ENUM,
        requirement=Requirement.CONDITIONAL,
        category=FieldCategory.ITEM_INFORMATION,
        description="Condition of the product.",
        example="new",
        dependency=Dependency("Required if product condition differs from new"),
        mapping=ExtractionMapping(path="meta_data.condition", transform="default_to_new"),
        supported_values=CONDITION_VALUES,
        rules=(OneOf(CONDITION_VALUES),),
    ),
    FieldSpecification(
        attribute="product_category",
        data_type=DataType.STRING,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.ITEM_INFORMATION,
        description="Category path using '>' between levels.",
        example="Apparel & Accessories > Shoes",
        mapping=ExtractionMapping(path="categories", transform="build_category_path"),
        locked=True,
        static_override_allowed=True,
        ai_enrichable=True,
    ),
    FieldSpecification(
        attribute="brand",
        data_type=DataType.STRING,
        requirement=Requirement.CONDITIONAL,
        category=FieldCategory.ITEM_INFORMATION,
        description="Product brand name.",
        example="OpenAI",
        dependency=Dependency("Required for all except movies, books, musical recordings"),
        rules=(MaxLength(70),),
        mapping=ExtractionMapping(path="brands[0].name"),
        locked=True,
    ),
    FieldSpecification(
        attribute="material",
        data_type=DataType.STRING,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.ITEM_INFORMATION,
        description="Primary material(s).",
        example="Leather",
        rules=(MaxLength(100),),
    ),
    FieldSpecification(
        attribute="dimensions",
        data_type=DataType.STRING,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.ITEM_INFORMATION,
        description="Overall dimensions as LxWxH with unit.",
        example="12x8x5 in",
        mapping=ExtractionMapping(path="dimensions", transform="format_dimensions"),
    ),
    *(
        FieldSpecification(
            attribute=axis,
            data_type=DataType.NUMBER_WITH_UNIT,
            requirement=Requirement.OPTIONAL,
            category=FieldCategory.ITEM_INFORMATION,
            description=f"Product {axis} with unit.",
            example="10 mm",
            dependency=_ALL_THREE_DIMENSIONS,
            rules=(ValueWithUnit(),),
            mapping=ExtractionMapping(path=f"dimensions.{axis}", transform="add_unit"),
        )
        for axis in ("length", "width", "height")
    ),
    FieldSpecification(
        attribute="weight",
        data_type=DataType.NUMBER_WITH_UNIT,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.ITEM_INFORMATION,
        description="Product weight with unit.",
        example="1.5 lb",
        rules=(NumberSign(strict=True), ValueWithUnit()),
        mapping=ExtractionMapping(path="weight", transform="add_weight_unit"),
    ),
    FieldSpecification(
        attribute="age_group",
        data_type=DataType.ENUM,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.ITEM_INFORMATION,
        description="Target demographic.",
        example="adult",
        supported_values=AGE_GROUP_VALUES,
        rules=(OneOf(AGE_GROUP_VALUES),),
    ),
    # media
    FieldSpecification(
        attribute="image_link",
        data_type=DataType.URL,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.MEDIA,
        description="Main product image URL.",
        example="https://example.com/image1.jpg",
        rules=(WellFormedUrl(),),
        mapping=ExtractionMapping(path="images[0].src"),
        locked=True,
    ),
    FieldSpecification(
        attribute="additional_image_link",
        data_type=DataType.URL_LIST,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.MEDIA,
        description="Extra product images.",
        example="https://example.com/image2.jpg,https://example.com/image3.jpg",
        rules=(UrlList(),),
        mapping=ExtractionMapping(path="images", transform="extract_additional_images"),
    ),
    FieldSpecification(
        attribute="video_link",
        data_type=DataType.URL,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.MEDIA,
        description="Publicly accessible product video.",
        example="https://youtu.be/12345",
        rules=(WellFormedUrl(prefer_https=False),),
    ),
    FieldSpecification(
        attribute="model_3d_link",
        data_type=DataType.URL,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.MEDIA,
        description="3D model, GLB/GLTF preferred.",
        example="https://example.com/model.glb",
        rules=(WellFormedUrl(prefer_https=False),),
    ),
    # price & promotions
    FieldSpecification(
        attribute="price",
        data_type=DataType.AMOUNT_WITH_CURRENCY,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.PRICE_PROMOTIONS,
        description="Regular price with ISO 4217 currency code.",
        example="79.99 USD",
        rules=(AmountWithCurrency(),),
        mapping=ExtractionMapping(
            path="regular_price", fallback="price", transform="format_price_with_currency"
        ),
    ),
    FieldSpecification(
        attribute="sale_price",
        data_type=DataType.AMOUNT_WITH_CURRENCY,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.PRICE_PROMOTIONS,
        description="Discounted price with currency code.",
        example="59.99 USD",
        rules=(NotAbovePrice(), AmountWithCurrency()),
        mapping=ExtractionMapping(path="sale_price", transform="format_price_with_currency"),
    ),
    FieldSpecification(
        attribute="sale_price_effective_date",
        data_type=DataType.DATE_RANGE,
        requirement=Requirement.CONDITIONAL,
        category=FieldCategory.PRICE_PROMOTIONS,
        description="Sale window as start / end dates.",
        example="2025-07-01 / 2025-07-15",
        dependency=Dependency(
            "Required if sale_price is provided", ConditionCode.SALE_PRICE_PRESENT
        ),
        rules=(DateRange(),),
        mapping=ExtractionMapping(path="date_on_sale_from", transform="format_sale_date_range"),
    ),
    FieldSpecification(
        attribute="unit_pricing_measure",
        data_type=DataType.NUMBER_WITH_UNIT,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.PRICE_PROMOTIONS,
        description="Measure of the product for unit pricing.",
        example="16 oz",
        dependency=Dependency("Provide together with unit_pricing_base_measure"),
        rules=(ValueWithUnit(),),
    ),
    FieldSpecification(
        attribute="unit_pricing_base_measure",
        data_type=DataType.NUMBER_WITH_UNIT,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.PRICE_PROMOTIONS,
        description="Base measure for unit pricing.",
        example="1 oz",
        dependency=Dependency("Provide together with unit_pricing_measure"),
        rules=(ValueWithUnit(),),
    ),
    FieldSpecification(
        attribute="pricing_trend",
        data_type=DataType.STRING,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.PRICE_PROMOTIONS,
        description="Short note on recent price movement.",
        example="Lowest price in 6 months",
        rules=(MaxLength(80),),
    ),
    # availability & inventory
    FieldSpecification(
        attribute="availability",
        data_type=DataType.ENUM,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.AVAILABILITY_INVENTORY,
        description="Current stock state.",
        example="in_stock",
        mapping=ExtractionMapping(path="stock_status", transform="map_stock_status"),
        locked=True,
        supported_values=AVAILABILITY_VALUES,
        rules=(OneOf(AVAILABILITY_VALUES),),
    ),
    FieldSpecification(
        attribute="availability_date",
        data_type=DataType.DATE,
        requirement=Requirement.CONDITIONAL,
        category=FieldCategory.AVAILABILITY_INVENTORY,
        description="Date a preorder item becomes available.",
        example="2025-12-01",
        dependency=Dependency(
            "Required if availability is preorder, empty otherwise", ConditionCode.PREORDER_ONLY
        ),
        rules=(IsoDate(), FutureDate()),
    ),
    FieldSpecification(
        attribute="inventory_quantity",
        data_type=DataType.INTEGER,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.AVAILABILITY_INVENTORY,
        description="Units in stock.",
        example="25",
        rules=(NumberSign(whole=True),),
        mapping=ExtractionMapping(path="stock_quantity", transform="default_to_zero"),
        locked=True,
    ),
    FieldSpecification(
        attribute="expiration_date",
        data_type=DataType.DATE,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.AVAILABILITY_INVENTORY,
        description="Date after which the product is removed from the feed.",
        example="2025-12-01",
        rules=(IsoDate(), FutureDate()),
    ),
    FieldSpecification(
        attribute="pickup_method",
        data_type=DataType.ENUM,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.AVAILABILITY_INVENTORY,
        description="In-store pickup option.",
        example="in_store",
        supported_values=PICKUP_METHOD_VALUES,
        rules=(OneOf(PICKUP_METHOD_VALUES),),
    ),
    FieldSpecification(
        attribute="pickup_sla",
        data_type=DataType.NUMBER_WITH_UNIT,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.AVAILABILITY_INVENTORY,
        description="Time until an order is ready for pickup.",
        example="1 day",
        dependency=Dependency("Requires pickup_method"),
        rules=(NumberSign(strict=True), ValueWithUnit()),
    ),
    # variants
    FieldSpecification(
        attribute="item_group_id",
        data_type=DataType.STRING,
        requirement=Requirement.CONDITIONAL,
        category=FieldCategory.VARIANTS,
        description="Shared identifier of a variant group.",
        example="SHOE123GROUP",
        dependency=Dependency("Required if variants exist", ConditionCode.VARIANTS_PRESENT),
        rules=(MaxLength(70),),
        mapping=ExtractionMapping(path="parent_id", transform="generate_group_id"),
        locked=True,
    ),
    FieldSpecification(
        attribute="item_group_title",
        data_type=DataType.TEXT,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.VARIANTS,
        description="Title of the variant group.",
        example="Men's Trail Running Shoes",
        rules=(MaxLength(150), NotAllCaps()),
    ),
    FieldSpecification(
        attribute="color",
        data_type=DataType.STRING,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.VARIANTS,
        description="Variant color.",
        example="Blue",
        dependency=_APPAREL,
        rules=(MaxLength(40),),
    ),
    FieldSpecification(
        attribute="size",
        data_type=DataType.STRING,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.VARIANTS,
        description="Variant size.",
        example="10",
        dependency=_APPAREL,
        rules=(MaxLength(20),),
    ),
    FieldSpecification(
        attribute="size_system",
        data_type=DataType.COUNTRY_CODE,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.VARIANTS,
        description="Country of the size system.",
        example="US",
        dependency=_APPAREL,
        rules=(CountryCode(),),
    ),
    FieldSpecification(
        attribute="gender",
        data_type=DataType.ENUM,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.VARIANTS,
        description="Target gender.",
        example="male",
        dependency=_APPAREL,
        supported_values=GENDER_VALUES,
        rules=(OneOf(GENDER_VALUES),),
    ),
    FieldSpecification(
        attribute="offer_id",
        data_type=DataType.STRING,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.VARIANTS,
        description="Offer identifier, unique within the feed.",
        example="SKU12345-Blue-79.99",
    ),
    *_custom_variant(1),
    *_custom_variant(2),
    *_custom_variant(3),
    # fulfillment
    FieldSpecification(
        attribute="shipping",
        data_type=DataType.STRING,
        requirement=Requirement.CONDITIONAL,
        category=FieldCategory.FULFILLMENT,
        description="Shipping entries as country:region:service_class:price.",
        example="US:CA:Overnight:16.00 USD",
        dependency=Dependency("Required where applicable"),
    ),
    FieldSpecification(
        attribute="delivery_estimate",
        data_type=DataType.DATE,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.FULFILLMENT,
        description="Estimated arrival date.",
        example="2025-08-12",
        rules=(IsoDate(), FutureDate()),
    ),
    # merchant info
    FieldSpecification(
        attribute="seller_name",
        data_type=DataType.STRING,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.MERCHANT_INFO,
        description="Name of the seller.",
        example="Example Store",
        rules=(MaxLength(70),),
        mapping=ExtractionMapping(path="seller_name", fallback="shop_name", shop_level=True),
    ),
    FieldSpecification(
        attribute="seller_url",
        data_type=DataType.URL,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.MERCHANT_INFO,
        description="Seller storefront URL.",
        example="https://example.com/store",
        rules=(WellFormedUrl(),),
        mapping=ExtractionMapping(path="seller_url", fallback="store_url", shop_level=True),
    ),
    FieldSpecification(
        attribute="seller_privacy_policy",
        data_type=DataType.URL,
        requirement=Requirement.CONDITIONAL,
        category=FieldCategory.MERCHANT_INFO,
        description="Seller privacy policy URL.",
        example="https://example.com/privacy",
        dependency=Dependency(
            "Required if enable_checkout is true", ConditionCode.CHECKOUT_ENABLED
        ),
        rules=(WellFormedUrl(),),
        mapping=ExtractionMapping(path="seller_privacy_policy", shop_level=True),
    ),
    FieldSpecification(
        attribute="seller_tos",
        data_type=DataType.URL,
        requirement=Requirement.CONDITIONAL,
        category=FieldCategory.MERCHANT_INFO,
        description="Seller terms of service URL.",
        example="https://example.com/terms",
        dependency=Dependency(
            "Required if enable_checkout is true", ConditionCode.CHECKOUT_ENABLED
        ),
        rules=(WellFormedUrl(),),
        mapping=ExtractionMapping(path="seller_tos", shop_level=True),
    ),
    # returns
    FieldSpecification(
        attribute="return_policy",
        data_type=DataType.URL,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.RETURNS,
        description="Return policy URL.",
        example="https://example.com/returns",
        rules=(WellFormedUrl(),),
        mapping=ExtractionMapping(path="return_policy", shop_level=True),
    ),
    FieldSpecification(
        attribute="return_window",
        data_type=DataType.INTEGER,
        requirement=Requirement.REQUIRED,
        category=FieldCategory.RETURNS,
        description="Days allowed for returns.",
        example="30",
        rules=(NumberSign(strict=True, whole=True),),
        mapping=ExtractionMapping(path="return_window", shop_level=True),
    ),
    # performance signals
    FieldSpecification(
        attribute="popularity_score",
        data_type=DataType.NUMBER,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.PERFORMANCE_SIGNALS,
        description="Popularity indicator on a 0-5 scale.",
        example="4.7",
        rules=(NumericRange(0, 5),),
        mapping=ExtractionMapping(path="total_sales", transform="calculate_popularity_score"),
    ),
    FieldSpecification(
        attribute="return_rate",
        data_type=DataType.NUMBER,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.PERFORMANCE_SIGNALS,
        description="Return rate in percent.",
        example="2",
        rules=(NumericRange(0, 100),),
    ),
    # compliance
    FieldSpecification(
        attribute="warning",
        data_type=DataType.STRING,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.COMPLIANCE,
        description="Product disclaimers.",
        example="Contains lithium battery",
        dependency=Dependency("Recommended for checkout"),
    ),
    FieldSpecification(
        attribute="warning_url",
        data_type=DataType.URL,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.COMPLIANCE,
        description="Link to warning details.",
        example="https://example.com/warnings/battery",
        rules=(WellFormedUrl(prefer_https=False),),
    ),
    FieldSpecification(
        attribute="age_restriction",
        data_type=DataType.NUMBER,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.COMPLIANCE,
        description="Minimum purchase age.",
        example="21",
        rules=(NumberSign(strict=True, whole=True),),
    ),
    # reviews & Q&A
    FieldSpecification(
        attribute="product_review_count",
        data_type=DataType.INTEGER,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.REVIEWS_QANDA,
        description="Number of product reviews.",
        example="254",
        rules=(NumberSign(whole=True),),
    ),
    FieldSpecification(
        attribute="product_review_rating",
        data_type=DataType.NUMBER,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.REVIEWS_QANDA,
        description="Average product rating.",
        example="4.6",
        rules=(NumericRange(0, 5),),
    ),
    FieldSpecification(
        attribute="store_review_count",
        data_type=DataType.INTEGER,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.REVIEWS_QANDA,
        description="Number of store reviews.",
        example="2000",
        rules=(NumberSign(whole=True),),
    ),
    FieldSpecification(
        attribute="store_review_rating",
        data_type=DataType.NUMBER,
        requirement=Requirement.OPTIONAL,
        category=FieldCategory.REVIEWS_QANDA,
        description="Average store rating.",
        example="4.8",
        rules=(NumericRange(0, 5),),
    ),
    FieldSpecification(
        attribute="q_and_a",
        data_type=DataType.TEXT,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.REVIEWS_QANDA,
        description="Frequently asked questions and answers.",
        example="Q: Is this waterproof? A: Yes",
        rules=(PlainText(),),
        ai_enrichable=True,
    ),
    FieldSpecification(
        attribute="raw_review_data",
        data_type=DataType.STRING,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.REVIEWS_QANDA,
        description="Raw review payload, may be a JSON blob.",
        example='{"reviews": []}',
    ),
    # related products
    FieldSpecification(
        attribute="related_product_id",
        data_type=DataType.STRING,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.RELATED_PRODUCTS,
        description="Comma-separated ids of related products.",
        example="SKU67890,SKU67891",
        mapping=ExtractionMapping(
            path="related_ids", fallback="upsell_ids", transform="format_related_ids"
        ),
    ),
    FieldSpecification(
        attribute="relationship_type",
        data_type=DataType.ENUM,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.RELATED_PRODUCTS,
        description="How the related products relate to this one.",
        example="often_bought_with",
        supported_values=RELATIONSHIP_TYPE_VALUES,
        rules=(OneOf(RELATIONSHIP_TYPE_VALUES),),
    ),
    # geo tagging
    FieldSpecification(
        attribute="geo_price",
        data_type=DataType.AMOUNT_WITH_CURRENCY,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.GEO_TAGGING,
        description="Region-specific price.",
        example="79.99 USD",
        rules=(AmountWithCurrency(),),
    ),
    FieldSpecification(
        attribute="geo_availability",
        data_type=DataType.STRING,
        requirement=Requirement.RECOMMENDED,
        category=FieldCategory.GEO_TAGGING,
        description="Region-specific availability.",
        example="in_stock (TX), out_of_stock (NY)",
    ),
)


def default_registry() -> SpecificationRegistry:
    return SpecificationRegistry(FEED_SPECIFICATION)
