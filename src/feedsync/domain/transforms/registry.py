"""Named transform registry."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from feedsync.domain.errors import UnknownTransformError
from feedsync.domain.model import ShopContext, SourceRecord, is_empty

if TYPE_CHECKING:
    from feedsync.domain.specification import SpecificationRegistry

type TransformFunction = Callable[[object, SourceRecord, ShopContext], object]


class TransformKind(StrEnum):
    SHAPING = "shaping"
    """Reshapes an extracted value; skipped when there is nothing to reshape."""

    DEFAULTING = "defaulting"
    """Supplies a fallback constant; always invoked, even on empty input."""


@dataclass(frozen=True, slots=True)
class Transform:
    name: str
    func: TransformFunction
    kind: TransformKind = TransformKind.SHAPING


class TransformRegistry:
    def __init__(self, transforms: Iterable[Transform] = ()) -> None:
        self._transforms: dict[str, Transform] = {}
        for transform in transforms:
            self.register(transform)

    def register(self, transform: Transform) -> None:
        if transform.name in self._transforms:
            raise ValueError(f"Transform already registered: {transform.name}")
        self._transforms[transform.name] = transform

    def get(self, name: str) -> Transform | None:
        return self._transforms.get(name)

    def require(self, name: str) -> Transform:
        transform = self._transforms.get(name)
        if transform is None:
            raise UnknownTransformError(name)
        return transform

    def names(self) -> frozenset[str]:
        return frozenset(self._transforms)

    def __contains__(self, name: object) -> bool:
        return name in self._transforms

    def __len__(self) -> int:
        return len(self._transforms)

    def apply(
        self,
        name: str,
        value: object,
        source: SourceRecord,
        shop_context: ShopContext,
    ) -> object:
        """Run transform ``name``; shaping transforms pass empty input through as ``None``."""

        transform = self.require(name)
        if transform.kind is TransformKind.SHAPING and is_empty(value):
            return None
        return transform.func(value, source, shop_context)

    def validate_specifications(self, registry: SpecificationRegistry) -> None:
        """Fail fast when any default mapping names an unregistered transform."""

        for spec in registry.all():
            mapping = spec.mapping
            if mapping is None or mapping.transform is None:
                continue
            if mapping.transform not in self._transforms:
                raise UnknownTransformError(mapping.transform, attribute=spec.attribute)
