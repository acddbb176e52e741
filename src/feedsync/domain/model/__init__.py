"""Pure domain model for feed resolution (no persistence concerns)."""

from __future__ import annotations

from .base import Entity, new_id
from .catalog import Product, Shop, ShopContext
from .enums import (
    ConditionCode,
    DataType,
    FieldCategory,
    PropagationMode,
    Requirement,
    Severity,
    ValueSource,
)
from .overrides import (
    MappingOverride,
    ProductOverride,
    ProductOverrides,
    ShopMapping,
    StaticOverride,
)
from .results import ValidationResult
from .specification import SHOP_PATH_PREFIX, Dependency, ExtractionMapping, FieldSpecification
from .values import FeedValue, ResolvedValueSet, SourceRecord, is_empty, parse_number

__all__ = [
    "SHOP_PATH_PREFIX",
    "ConditionCode",
    "DataType",
    "Dependency",
    "Entity",
    "ExtractionMapping",
    "FeedValue",
    "FieldCategory",
    "FieldSpecification",
    "MappingOverride",
    "Product",
    "ProductOverride",
    "ProductOverrides",
    "PropagationMode",
    "Requirement",
    "ResolvedValueSet",
    "Severity",
    "Shop",
    "ShopContext",
    "ShopMapping",
    "SourceRecord",
    "StaticOverride",
    "ValidationResult",
    "ValueSource",
    "is_empty",
    "new_id",
    "parse_number",
]
