"""Exception hierarchy for the feed engine.

Data absence is never an error; only configuration mistakes, policy
violations and missing aggregates raise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class FeedSyncError(Exception):
    """Base class for all engine errors."""


class SpecificationError(FeedSyncError):
    """Raised when the specification table is inconsistent."""


class UnknownAttributeError(SpecificationError, KeyError):
    """Raised when an attribute name is not part of the specification."""

    def __init__(self, attribute: str) -> None:
        super().__init__(attribute)
        self.attribute = attribute

    def __str__(self) -> str:
        return f"Unknown feed attribute: {self.attribute}"


class DuplicateAttributeError(SpecificationError):
    """Raised when two specifications share an attribute name."""


class PathSyntaxError(FeedSyncError, ValueError):
    """Raised when an extraction path cannot be parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Malformed extraction path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class UnknownTransformError(FeedSyncError, KeyError):
    """Raised when a transform name is not registered."""

    def __init__(self, name: str, *, attribute: str | None = None) -> None:
        super().__init__(name)
        self.name = name
        self.attribute = attribute

    def __str__(self) -> str:
        if self.attribute is None:
            return f"Unknown transform: {self.name}"
        return f"Unknown transform {self.name!r} referenced by attribute {self.attribute!r}"


class OverrideNotAllowedError(FeedSyncError):
    """Raised when an override would break the lock policy of an attribute."""

    def __init__(self, attribute: str, reason: str) -> None:
        super().__init__(f"{attribute}: {reason}")
        self.attribute = attribute
        self.reason = reason


class InvalidStaticValueError(FeedSyncError, ValueError):
    """Raised when a static override literal does not fit the attribute's data type."""

    def __init__(self, attribute: str, reason: str) -> None:
        super().__init__(f"{attribute}: {reason}")
        self.attribute = attribute
        self.reason = reason


class NotFoundError(FeedSyncError, LookupError):
    """Base class for missing aggregates during reprocessing."""


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: UUID) -> None:
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class ShopNotFoundError(NotFoundError):
    def __init__(self, shop_id: UUID) -> None:
        super().__init__(f"Shop not found: {shop_id}")
        self.shop_id = shop_id


class SourceRecordMissingError(NotFoundError):
    """Raised when a product has no source record to resolve from."""

    def __init__(self, product_id: UUID) -> None:
        super().__init__(f"Product {product_id} has no source record")
        self.product_id = product_id
