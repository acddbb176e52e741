"""Feed attribute specifications and their registry."""

from __future__ import annotations

from .feed import FEED_SPECIFICATION, default_registry
from .registry import (
    ENABLE_CHECKOUT,
    ENABLE_SEARCH,
    SPECIAL_FLAG_ATTRIBUTES,
    SpecificationRegistry,
)

__all__ = [
    "ENABLE_CHECKOUT",
    "ENABLE_SEARCH",
    "FEED_SPECIFICATION",
    "SPECIAL_FLAG_ATTRIBUTES",
    "SpecificationRegistry",
    "default_registry",
]
