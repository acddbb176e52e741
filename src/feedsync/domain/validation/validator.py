"""Validate a resolved value set against the attribute table."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from feedsync.domain.model import (
    ConditionCode,
    Requirement,
    Severity,
    ValidationResult,
    is_empty,
)

from .conditions import condition_holds
from .rules import RuleContext

if TYPE_CHECKING:
    from feedsync.domain.model import FeedValue, FieldSpecification
    from feedsync.domain.specification import SpecificationRegistry

type Clock = Callable[[], date]

COMMON_ERROR_LIMIT = 10


def utc_today() -> date:
    return datetime.now(UTC).date()


class FeedValidator:
    def __init__(self, registry: SpecificationRegistry, *, clock: Clock = utc_today) -> None:
        self._registry = registry
        self._clock = clock

    def validate(
        self,
        resolved: Mapping[str, FeedValue],
        checkout_enabled: bool = False,
    ) -> ValidationResult:
        """Evaluate every attribute; findings are collected, never short-circuited."""

        context = RuleContext(resolved=resolved, today=self._clock())
        errors: dict[str, list[str]] = {}
        warnings: dict[str, list[str]] = {}
        for spec in self._registry.all():
            field_errors, field_warnings = self._validate_field(
                spec, context, checkout_enabled=checkout_enabled
            )
            if field_errors:
                errors[spec.attribute] = field_errors
            if field_warnings:
                warnings[spec.attribute] = field_warnings
        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)

    def _validate_field(
        self,
        spec: FieldSpecification,
        context: RuleContext,
        *,
        checkout_enabled: bool,
    ) -> tuple[list[str], list[str]]:
        value = context.resolved.get(spec.attribute)
        present = not is_empty(value)
        errors: list[str] = []
        warnings: list[str] = []

        if spec.requirement is Requirement.REQUIRED and not present:
            errors.append(f"{spec.attribute} is required")
        elif spec.requirement is Requirement.CONDITIONAL:
            errors.extend(
                _conditional_errors(
                    spec, context.resolved, present=present, checkout_enabled=checkout_enabled
                )
            )

        if value is None or not present:
            if spec.requirement is Requirement.RECOMMENDED:
                warnings.append(f"{spec.attribute} is recommended but missing")
            return errors, warnings

        for rule in spec.rules:
            finding = rule.check(value, context)
            if finding is None:
                continue
            if finding.severity is Severity.WARNING:
                warnings.append(finding.message)
            else:
                errors.append(finding.message)
        return errors, warnings


def _conditional_errors(
    spec: FieldSpecification,
    resolved: Mapping[str, FeedValue],
    *,
    present: bool,
    checkout_enabled: bool,
) -> list[str]:
    dependency = spec.dependency
    if dependency is None or dependency.condition is None:
        return []
    holds = condition_holds(dependency.condition, resolved, checkout_enabled=checkout_enabled)
    if holds and not present:
        return [f"{spec.attribute} is required: {dependency.description}"]
    if dependency.condition is ConditionCode.PREORDER_ONLY and present and not holds:
        return [f"{spec.attribute} must be empty unless availability is preorder"]
    return []


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    total: int = 0
    invalid: int = 0
    with_warnings: int = 0
    total_errors: int = 0
    total_warnings: int = 0
    common_errors: list[tuple[str, int]] = field(default_factory=list[tuple[str, int]])


def summarize(results: Iterable[ValidationResult]) -> ValidationSummary:
    """Aggregate per-product results into catalog-level counts."""

    total = invalid = with_warnings = total_errors = total_warnings = 0
    messages: Counter[str] = Counter()
    for result in results:
        total += 1
        if not result.is_valid:
            invalid += 1
        if result.warnings:
            with_warnings += 1
        total_errors += result.error_count
        total_warnings += result.warning_count
        for field_errors in result.errors.values():
            messages.update(field_errors)
    return ValidationSummary(
        total=total,
        invalid=invalid,
        with_warnings=with_warnings,
        total_errors=total_errors,
        total_warnings=total_warnings,
        common_errors=messages.most_common(COMMON_ERROR_LIMIT),
    )
