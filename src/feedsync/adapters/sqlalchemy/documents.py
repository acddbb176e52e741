"""Pydantic models for the JSON documents stored on shop and product rows."""

from __future__ import annotations

from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, TypeAdapter, model_validator

from feedsync.domain.model import MappingOverride, StaticOverride

type StoredFeedValue = bool | int | float | str | list[str]


class DocumentModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class StoredOverride(DocumentModel):
    """``{"type": "mapping", "value": "meta_data.color"}`` or ``{"type": "static", ...}``.

    A mapping override with ``value: null`` excludes the attribute.
    """

    type: Literal["mapping", "static"]
    value: str | None = None

    @model_validator(mode="after")
    def _static_needs_value(self) -> Self:
        if self.type == "static" and self.value is None:
            raise ValueError("static override requires a value")
        return self

    @classmethod
    def from_domain(cls, override: MappingOverride | StaticOverride) -> StoredOverride:
        match override:
            case MappingOverride(path=path):
                return cls(type="mapping", value=path)
            case StaticOverride(value=value):
                return cls(type="static", value=value)

    def to_domain(self) -> MappingOverride | StaticOverride:
        if self.type == "static":
            return StaticOverride(self.value or "")
        return MappingOverride(self.value)


overrides_adapter: TypeAdapter[dict[str, StoredOverride]] = TypeAdapter(dict[str, StoredOverride])
shop_mapping_adapter: TypeAdapter[dict[str, str]] = TypeAdapter(dict[str, str])
resolved_values_adapter: TypeAdapter[dict[str, StoredFeedValue]] = TypeAdapter(
    dict[str, StoredFeedValue]
)
messages_adapter: TypeAdapter[dict[str, list[str]]] = TypeAdapter(dict[str, list[str]])
