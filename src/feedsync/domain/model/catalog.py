"""Shop and product aggregates.

``Shop`` owns the per-attribute mapping table; ``Product`` owns its override
map plus the two derived caches (resolved values and validation result). The
caches are always written together through :meth:`Product.apply_feed_state`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING
from uuid import UUID

from .base import Entity
from .results import ValidationResult

if TYPE_CHECKING:
    from datetime import datetime

    from .overrides import ProductOverride, ProductOverrides, ShopMapping
    from .values import FeedValue, ResolvedValueSet


@dataclass(frozen=True, slots=True, kw_only=True)
class ShopContext:
    """Flat, read-only shop settings addressable through the ``shop.`` prefix."""

    shop_id: str | None = None
    shop_name: str | None = None
    store_url: str | None = None
    currency: str | None = None
    dimension_unit: str | None = None
    weight_unit: str | None = None
    seller_name: str | None = None
    seller_url: str | None = None
    seller_privacy_policy: str | None = None
    seller_tos: str | None = None
    return_policy: str | None = None
    return_window: int | None = None

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))

    def lookup(self, name: str) -> str | int | None:
        if name not in self.field_names():
            return None
        return getattr(self, name)


@dataclass(eq=False, kw_only=True)
class Shop(Entity):
    name: str
    store_url: str | None = None
    currency: str | None = None
    dimension_unit: str | None = None
    weight_unit: str | None = None
    seller_name: str | None = None
    seller_url: str | None = None
    seller_privacy_policy: str | None = None
    seller_tos: str | None = None
    return_policy: str | None = None
    return_window: int | None = None
    field_mappings: ShopMapping = field(default_factory=dict[str, str])

    def context(self) -> ShopContext:
        return ShopContext(
            shop_id=str(self.id),
            shop_name=self.name,
            store_url=self.store_url,
            currency=self.currency,
            dimension_unit=self.dimension_unit,
            weight_unit=self.weight_unit,
            seller_name=self.seller_name,
            seller_url=self.seller_url,
            seller_privacy_policy=self.seller_privacy_policy,
            seller_tos=self.seller_tos,
            return_policy=self.return_policy,
            return_window=self.return_window,
        )

    def mapping_for(self, attribute: str) -> str | None:
        return self.field_mappings.get(attribute)

    def set_mapping(self, attribute: str, path: str | None) -> None:
        """Store or remove the custom path for ``attribute``.

        A fresh dict is assigned so JSON-backed persistence sees the change.
        """

        mappings = dict(self.field_mappings)
        if path is None:
            mappings.pop(attribute, None)
        else:
            mappings[attribute] = path
        self.field_mappings = mappings


@dataclass(eq=False, kw_only=True)
class Product(Entity):
    shop_id: UUID
    external_id: int | None = None
    source_record: dict[str, object] | None = None
    enable_search: bool = True
    overrides: ProductOverrides = field(default_factory=dict[str, "ProductOverride"])
    resolved_values: ResolvedValueSet = field(default_factory=dict[str, "FeedValue"])
    is_valid: bool | None = None
    validation_errors: dict[str, list[str]] = field(default_factory=dict[str, list[str]])
    validation_warnings: dict[str, list[str]] = field(default_factory=dict[str, list[str]])
    feed_updated_at: datetime | None = None

    def override_for(self, attribute: str) -> ProductOverride | None:
        return self.overrides.get(attribute)

    def set_override(self, attribute: str, override: ProductOverride) -> None:
        self.overrides = {**self.overrides, attribute: override}

    def remove_override(self, attribute: str) -> bool:
        """Drop the override for ``attribute``; return whether one existed."""

        if attribute not in self.overrides:
            return False
        self.overrides = {
            name: override for name, override in self.overrides.items() if name != attribute
        }
        return True

    @property
    def validation(self) -> ValidationResult | None:
        if self.is_valid is None:
            return None
        return ValidationResult(
            is_valid=self.is_valid,
            errors=dict(self.validation_errors),
            warnings=dict(self.validation_warnings),
        )

    def apply_feed_state(
        self,
        resolved: ResolvedValueSet,
        validation: ValidationResult,
        *,
        now: datetime,
    ) -> bool:
        """Replace both caches at once; return whether anything changed."""

        changed = (
            resolved != self.resolved_values
            or validation.is_valid != self.is_valid
            or validation.errors != self.validation_errors
            or validation.warnings != self.validation_warnings
        )
        if not changed:
            return False
        self.resolved_values = dict(resolved)
        self.is_valid = validation.is_valid
        self.validation_errors = {name: list(msgs) for name, msgs in validation.errors.items()}
        self.validation_warnings = {
            name: list(msgs) for name, msgs in validation.warnings.items()
        }
        self.feed_updated_at = now
        return True
