"""Immutable description of one feed attribute."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import DataType, FieldCategory, Requirement

if TYPE_CHECKING:
    from feedsync.domain.validation.rules import ValidationRule

    from .enums import ConditionCode

SHOP_PATH_PREFIX = "shop."


@dataclass(frozen=True, slots=True, kw_only=True)
class ExtractionMapping:
    """Default way of pulling an attribute out of a source record.

    ``path`` and ``fallback`` are extraction paths. When ``shop_level`` is set
    both are interpreted against the shop context and no transform runs.
    """

    path: str | None = None
    fallback: str | None = None
    transform: str | None = None
    shop_level: bool = False

    def __post_init__(self) -> None:
        if self.shop_level and self.transform is not None:
            raise ValueError("shop-level mappings cannot declare a transform")

    def as_path(self) -> str | None:
        """Render the primary path as a single string (shop fields prefixed)."""

        return self._qualify(self.path)

    def as_fallback_path(self) -> str | None:
        return self._qualify(self.fallback)

    def _qualify(self, path: str | None) -> str | None:
        if path is None:
            return None
        if self.shop_level and not path.startswith(SHOP_PATH_PREFIX):
            return f"{SHOP_PATH_PREFIX}{path}"
        return path


@dataclass(frozen=True, slots=True)
class Dependency:
    description: str
    condition: ConditionCode | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldSpecification:
    attribute: str
    data_type: DataType
    requirement: Requirement
    category: FieldCategory
    description: str = ""
    example: str | None = None
    supported_values: tuple[str, ...] = ()
    dependency: Dependency | None = None
    rules: tuple[ValidationRule, ...] = field(default=())
    mapping: ExtractionMapping | None = None
    locked: bool = False
    static_override_allowed: bool = False
    ai_enrichable: bool = False

    @property
    def is_required(self) -> bool:
        return self.requirement is Requirement.REQUIRED

    @property
    def accepts_mapping_override(self) -> bool:
        return not self.locked

    @property
    def accepts_static_override(self) -> bool:
        return not self.locked or self.static_override_allowed
