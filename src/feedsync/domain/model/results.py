"""Validation output stored next to the resolved value set."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict[str, list[str]])
    warnings: dict[str, list[str]] = field(default_factory=dict[str, list[str]])

    @property
    def error_count(self) -> int:
        return sum(len(messages) for messages in self.errors.values())

    @property
    def warning_count(self) -> int:
        return sum(len(messages) for messages in self.warnings.values())

    def errors_for(self, attribute: str) -> list[str]:
        return list(self.errors.get(attribute, ()))

    def warnings_for(self, attribute: str) -> list[str]:
        return list(self.warnings.get(attribute, ()))
