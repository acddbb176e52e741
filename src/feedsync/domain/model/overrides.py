"""Per-product override instructions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MappingOverride:
    """Custom extraction path for one product.

    ``path=None`` explicitly excludes the attribute from this product's feed.
    """

    path: str | None

    @property
    def excludes(self) -> bool:
        return self.path is None


@dataclass(frozen=True, slots=True)
class StaticOverride:
    """Literal value used verbatim, bypassing extraction and transforms."""

    value: str


type ProductOverride = MappingOverride | StaticOverride
type ProductOverrides = dict[str, ProductOverride]
type ShopMapping = dict[str, str]
