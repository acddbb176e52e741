"""Immutable lookup over the attribute table."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Final

from feedsync.domain.errors import DuplicateAttributeError, UnknownAttributeError

if TYPE_CHECKING:
    from feedsync.domain.model import FieldCategory, FieldSpecification

ENABLE_SEARCH: Final = "enable_search"
ENABLE_CHECKOUT: Final = "enable_checkout"
SPECIAL_FLAG_ATTRIBUTES: Final = frozenset({ENABLE_SEARCH, ENABLE_CHECKOUT})


class SpecificationRegistry:
    """Ordered, read-only set of :class:`FieldSpecification` keyed by attribute."""

    def __init__(self, specifications: Iterable[FieldSpecification]) -> None:
        ordered: list[FieldSpecification] = []
        by_attribute: dict[str, FieldSpecification] = {}
        for spec in specifications:
            if spec.attribute in by_attribute:
                raise DuplicateAttributeError(f"Duplicate feed attribute: {spec.attribute}")
            by_attribute[spec.attribute] = spec
            ordered.append(spec)
        self._ordered = tuple(ordered)
        self._by_attribute = by_attribute
        self._locked = frozenset(spec.attribute for spec in ordered if spec.locked)

    def get(self, attribute: str) -> FieldSpecification | None:
        return self._by_attribute.get(attribute)

    def require(self, attribute: str) -> FieldSpecification:
        spec = self._by_attribute.get(attribute)
        if spec is None:
            raise UnknownAttributeError(attribute)
        return spec

    def all(self) -> tuple[FieldSpecification, ...]:
        return self._ordered

    def required_attributes(self) -> tuple[FieldSpecification, ...]:
        return tuple(spec for spec in self._ordered if spec.is_required)

    def locked_attribute_set(self) -> frozenset[str]:
        return self._locked

    def by_category(self, category: FieldCategory) -> tuple[FieldSpecification, ...]:
        return tuple(spec for spec in self._ordered if spec.category is category)

    def default_shop_mappings(self) -> dict[str, str | None]:
        """Suggested attribute -> path table for shops without custom mappings."""

        return {
            spec.attribute: spec.mapping.as_path() if spec.mapping is not None else None
            for spec in self._ordered
        }

    def __iter__(self) -> Iterator[FieldSpecification]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, attribute: object) -> bool:
        return attribute in self._by_attribute
