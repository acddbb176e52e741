"""Per-attribute precedence chain producing a product's resolved value set.

For every attribute, the first link that applies wins:

1. special flags (``enable_checkout`` constant, ``enable_search`` column)
2. static override (unlocked or static-allow-listed attributes)
3. product mapping override (unlocked only; ``None`` path excludes)
4. shop mapping (unlocked only)
5. the attribute's default mapping
6. nothing

Resolution is pure: it reads its inputs and returns a fresh dict.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from feedsync.domain.errors import PathSyntaxError
from feedsync.domain.extraction import compile_path
from feedsync.domain.model import (
    MappingOverride,
    ShopContext,
    StaticOverride,
    ValueSource,
    is_empty,
)
from feedsync.domain.specification import ENABLE_CHECKOUT, ENABLE_SEARCH

if TYPE_CHECKING:
    from feedsync.domain.model import (
        FeedValue,
        FieldSpecification,
        ProductOverrides,
        ResolvedValueSet,
        ShopMapping,
        SourceRecord,
    )
    from feedsync.domain.specification import SpecificationRegistry
    from feedsync.domain.transforms import TransformRegistry

log = logging.getLogger(__name__)

# in-chat checkout is not offered yet; no product setting can turn it on
CHECKOUT_FLAG_VALUE = "false"


@dataclass(frozen=True, slots=True)
class SpecialFlags:
    enable_search: bool = True


@dataclass(frozen=True, slots=True)
class Resolution:
    value: FeedValue | None
    source: ValueSource


_NOTHING = Resolution(None, ValueSource.NONE)


class FeedValueResolver:
    def __init__(self, registry: SpecificationRegistry, transforms: TransformRegistry) -> None:
        transforms.validate_specifications(registry)
        _compile_default_paths(registry)
        self._registry = registry
        self._transforms = transforms

    @property
    def registry(self) -> SpecificationRegistry:
        return self._registry

    def resolve_all(
        self,
        source: SourceRecord,
        shop_context: ShopContext | None,
        shop_mapping: ShopMapping,
        overrides: ProductOverrides,
        flags: SpecialFlags,
        *,
        product_ref: object = None,
    ) -> ResolvedValueSet:
        """Resolve every attribute; empty results are left out of the returned dict."""

        resolved: ResolvedValueSet = {}
        for spec in self._registry.all():
            resolution = self.resolve(
                spec,
                source,
                shop_context,
                shop_mapping,
                overrides,
                flags,
                product_ref=product_ref,
            )
            if resolution.value is not None:
                resolved[spec.attribute] = resolution.value
        return resolved

    def resolve(
        self,
        spec: FieldSpecification,
        source: SourceRecord,
        shop_context: ShopContext | None,
        shop_mapping: ShopMapping,
        overrides: ProductOverrides,
        flags: SpecialFlags,
        *,
        product_ref: object = None,
    ) -> Resolution:
        """Resolve one attribute and report which link of the chain produced it."""

        attribute = spec.attribute
        if attribute == ENABLE_CHECKOUT:
            return Resolution(CHECKOUT_FLAG_VALUE, ValueSource.FLAG)
        if attribute == ENABLE_SEARCH:
            return Resolution("true" if flags.enable_search else "false", ValueSource.FLAG)

        context = shop_context or ShopContext()
        override = overrides.get(attribute)

        if isinstance(override, StaticOverride) and spec.accepts_static_override:
            return Resolution(to_feed_value(override.value), ValueSource.STATIC_OVERRIDE)

        if isinstance(override, MappingOverride) and spec.accepts_mapping_override:
            if override.path is None:
                return Resolution(None, ValueSource.EXCLUDED)
            value = self._extract(spec, override.path, source, context, product_ref)
            return Resolution(value, ValueSource.PRODUCT_MAPPING)

        shop_path = shop_mapping.get(attribute) if spec.accepts_mapping_override else None
        if shop_path:
            value = self._extract(spec, shop_path, source, context, product_ref)
            return Resolution(value, ValueSource.SHOP_MAPPING)

        default_path = spec.mapping.as_path() if spec.mapping is not None else None
        if default_path is not None:
            value = self._extract(spec, default_path, source, context, product_ref)
            return Resolution(value, ValueSource.SPEC_DEFAULT)

        return _NOTHING

    def _extract(
        self,
        spec: FieldSpecification,
        path: str,
        source: SourceRecord,
        context: ShopContext,
        product_ref: object,
    ) -> FeedValue | None:
        mapping = spec.mapping
        fallback = mapping.as_fallback_path() if mapping is not None else None
        try:
            primary = compile_path(path)
            value = primary.extract(source, context)
            if is_empty(value) and fallback is not None:
                value = compile_path(fallback).extract(source, context)
        except PathSyntaxError:
            log.warning(
                "Ignoring malformed path %r for attribute %s (product %s)",
                path,
                spec.attribute,
                product_ref,
            )
            return None

        if primary.is_shop_level or mapping is None or mapping.transform is None:
            return to_feed_value(value)
        return self._transform(spec, mapping.transform, value, source, context, product_ref)

    def _transform(
        self,
        spec: FieldSpecification,
        name: str,
        value: object,
        source: SourceRecord,
        context: ShopContext,
        product_ref: object,
    ) -> FeedValue | None:
        try:
            transformed = self._transforms.apply(name, value, source, context)
        except Exception:
            log.exception(
                "Transform %s failed for attribute %s (product %s)",
                name,
                spec.attribute,
                product_ref,
            )
            return None
        return to_feed_value(transformed)


def to_feed_value(value: object) -> FeedValue | None:
    """Coerce an extracted value into something the resolved set can hold."""

    if is_empty(value):
        return None
    if isinstance(value, str | int | float | bool):
        return value
    if isinstance(value, Mapping):
        return json.dumps(value, sort_keys=True, default=str)
    if isinstance(value, Sequence):
        items = [item for item in cast("Sequence[object]", value) if not is_empty(item)]
        return [item if isinstance(item, str) else _scalar_text(item) for item in items] or None
    return str(value)


def _scalar_text(value: object) -> str:
    if isinstance(value, Mapping | list):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def _compile_default_paths(registry: SpecificationRegistry) -> None:
    """Raise :class:`PathSyntaxError` for any malformed default path or fallback."""

    for spec in registry.all():
        if spec.mapping is None:
            continue
        for path in (spec.mapping.as_path(), spec.mapping.as_fallback_path()):
            if path is not None:
                compile_path(path)
