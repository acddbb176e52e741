"""Path-based value extraction from raw source records.

Path grammar::

    path     := segment ("." segment)*
    segment  := name ("[" digits "]")*

Three prefixes change how the remainder is read:

``shop.<field>``
    flat lookup on the :class:`~feedsync.domain.model.ShopContext`.
``meta_data.<key>``
    ``value`` of the first ``meta_data`` entry whose ``key`` equals ``<key>``.
``attributes.<name>``
    option(s) of the first ``attributes`` entry named ``<name>`` or
    ``pa_<name>`` (case-insensitive).

A missing key, ``None`` intermediate, wrong container type or out-of-range
index yields ``None``. Only malformed syntax raises :class:`PathSyntaxError`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING, cast

from feedsync.domain.errors import PathSyntaxError
from feedsync.domain.model import SHOP_PATH_PREFIX

if TYPE_CHECKING:
    from feedsync.domain.model import ShopContext, SourceRecord

META_DATA_PREFIX = "meta_data."
ATTRIBUTES_PREFIX = "attributes."

_SEGMENT = re.compile(r"^(?P<name>[^.\[\]\s]+)(?P<indices>(?:\[\d+\])*)$")
_INDEX = re.compile(r"\[(\d+)\]")

type Step = str | int


class PathKind(StrEnum):
    DOCUMENT = "document"
    SHOP = "shop"
    META_DATA = "meta_data"
    ATTRIBUTE = "attribute"


@dataclass(frozen=True, slots=True)
class CompiledPath:
    raw: str
    kind: PathKind
    steps: tuple[Step, ...] = ()
    key: str | None = None

    @property
    def is_shop_level(self) -> bool:
        return self.kind is PathKind.SHOP

    def extract(
        self,
        document: SourceRecord | None,
        shop_context: ShopContext | None = None,
    ) -> object | None:
        if self.kind is PathKind.SHOP:
            if shop_context is None or self.key is None:
                return None
            return shop_context.lookup(self.key)
        if document is None:
            return None
        if self.kind is PathKind.META_DATA:
            return _find_meta_value(document, cast("str", self.key))
        if self.kind is PathKind.ATTRIBUTE:
            return _find_attribute_value(document, cast("str", self.key))
        return _walk(document, self.steps)


@lru_cache(maxsize=2048)
def compile_path(path: str) -> CompiledPath:
    """Parse ``path`` once; repeated calls return the cached result."""

    if not path or not path.strip():
        raise PathSyntaxError(path, "path is empty")
    if path != path.strip():
        raise PathSyntaxError(path, "path has surrounding whitespace")

    if path.startswith(SHOP_PATH_PREFIX):
        field_name = _prefixed_key(path, SHOP_PATH_PREFIX)
        if not _SEGMENT.match(field_name) or "[" in field_name:
            raise PathSyntaxError(path, "shop paths address a single flat field")
        return CompiledPath(raw=path, kind=PathKind.SHOP, key=field_name)
    if path.startswith(META_DATA_PREFIX):
        return CompiledPath(
            raw=path, kind=PathKind.META_DATA, key=_prefixed_key(path, META_DATA_PREFIX)
        )
    if path.startswith(ATTRIBUTES_PREFIX):
        return CompiledPath(
            raw=path, kind=PathKind.ATTRIBUTE, key=_prefixed_key(path, ATTRIBUTES_PREFIX)
        )

    steps: list[Step] = []
    for segment in path.split("."):
        match = _SEGMENT.match(segment)
        if match is None:
            raise PathSyntaxError(path, f"invalid segment {segment!r}")
        steps.append(match.group("name"))
        steps.extend(int(index) for index in _INDEX.findall(match.group("indices")))
    return CompiledPath(raw=path, kind=PathKind.DOCUMENT, steps=tuple(steps))


def extract(
    document: SourceRecord | None,
    path: str,
    *,
    shop_context: ShopContext | None = None,
) -> object | None:
    """Read the value at ``path`` from ``document`` (or the shop context)."""

    return compile_path(path).extract(document, shop_context)


def _prefixed_key(path: str, prefix: str) -> str:
    key = path[len(prefix) :]
    if not key:
        raise PathSyntaxError(path, f"missing key after {prefix!r}")
    return key


def _walk(document: SourceRecord, steps: tuple[Step, ...]) -> object | None:
    current: object = document
    for step in steps:
        if current is None:
            return None
        if isinstance(step, int):
            if not _is_list(current):
                return None
            items = cast("Sequence[object]", current)
            if step >= len(items):
                return None
            current = items[step]
        else:
            if not isinstance(current, Mapping):
                return None
            current = cast("Mapping[str, object]", current).get(step)
    return current


def _is_list(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


def _entries(document: SourceRecord, name: str) -> list[Mapping[str, object]]:
    raw = document.get(name)
    if not _is_list(raw):
        return []
    return [
        cast("Mapping[str, object]", entry)
        for entry in cast("Sequence[object]", raw)
        if isinstance(entry, Mapping)
    ]


def _find_meta_value(document: SourceRecord, key: str) -> object | None:
    for entry in _entries(document, "meta_data"):
        if entry.get("key") == key:
            return entry.get("value")
    return None


def _find_attribute_value(document: SourceRecord, name: str) -> object | None:
    wanted = {name.lower(), f"pa_{name.lower()}"}
    for entry in _entries(document, "attributes"):
        entry_name = entry.get("name")
        if not isinstance(entry_name, str) or entry_name.lower() not in wanted:
            continue
        option = entry.get("option")
        if option is not None:
            return option
        options = entry.get("options")
        if _is_list(options) and options:
            values = [str(item) for item in cast("Sequence[object]", options)]
            return values[0] if len(values) == 1 else ", ".join(values)
        return None
    return None


__all__ = [
    "ATTRIBUTES_PREFIX",
    "META_DATA_PREFIX",
    "CompiledPath",
    "PathKind",
    "compile_path",
    "extract",
]
