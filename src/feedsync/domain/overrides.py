"""Write-side policy for product overrides and shop mappings.

Enforced before anything is stored, so resolution never meets an override
the lock rules forbid.
"""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING

from feedsync.domain.errors import InvalidStaticValueError, OverrideNotAllowedError
from feedsync.domain.extraction import compile_path
from feedsync.domain.model import DataType, MappingOverride, Requirement, StaticOverride
from feedsync.domain.specification import SPECIAL_FLAG_ATTRIBUTES
from feedsync.domain.validation.rules import AMOUNT_WITH_CURRENCY, DigitCount, MaxLength

if TYPE_CHECKING:
    from feedsync.domain.model import FieldSpecification, ProductOverride

STRICT_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
NUMBER_WITH_UNIT = re.compile(r"^\d+(\.\d+)?\s+\w+$")
ALPHANUMERIC = re.compile(r"^[a-zA-Z0-9\-_\s]+$")
INTEGER = re.compile(r"^-?\d+$")
NUMBER = re.compile(r"^\s*[-+]?(\d+(\.\d*)?|\.\d+)")


def check_override_allowed(spec: FieldSpecification, override: ProductOverride) -> None:
    """Raise :class:`OverrideNotAllowedError` when ``override`` breaks the lock policy."""

    if spec.attribute in SPECIAL_FLAG_ATTRIBUTES:
        raise OverrideNotAllowedError(spec.attribute, "flag attributes accept no overrides")
    match override:
        case MappingOverride(path=path):
            if not spec.accepts_mapping_override:
                raise OverrideNotAllowedError(spec.attribute, "mapping is locked")
            if path is not None:
                compile_path(path)
        case StaticOverride():
            if not spec.accepts_static_override:
                raise OverrideNotAllowedError(
                    spec.attribute, "locked attribute does not accept static values"
                )


def check_shop_mapping_allowed(spec: FieldSpecification, path: str | None) -> None:
    if spec.attribute in SPECIAL_FLAG_ATTRIBUTES:
        raise OverrideNotAllowedError(spec.attribute, "flag attributes cannot be mapped")
    if spec.locked:
        raise OverrideNotAllowedError(spec.attribute, "mapping is locked")
    if path is not None:
        compile_path(path)


def validate_static_value(spec: FieldSpecification, value: str) -> str | None:
    """Check a static literal against the attribute's data type.

    Returns an error message, or ``None`` when the literal is acceptable.
    """

    literal = value.strip()
    if not literal:
        return "This field is required" if spec.requirement is Requirement.REQUIRED else None

    match spec.data_type:
        case DataType.ENUM:
            return _check_enum(spec, literal)
        case DataType.URL:
            return _check_url(literal)
        case DataType.AMOUNT_WITH_CURRENCY:
            if not AMOUNT_WITH_CURRENCY.match(literal):
                return 'Must be in format "79.99 USD" (number + ISO 4217 currency code)'
            return None
        case DataType.INTEGER:
            return None if INTEGER.match(literal) else "Must be a whole number"
        case DataType.NUMBER:
            return None if NUMBER.match(literal) else "Must be a valid number"
        case DataType.DATE:
            return _check_date(literal)
        case DataType.DATE_RANGE:
            return _check_date_range(literal)
        case DataType.NUMBER_WITH_UNIT:
            if not NUMBER_WITH_UNIT.match(literal):
                return 'Must be in format "10 mm" (number + unit)'
            return None
        case DataType.ALPHANUMERIC:
            error = _check_string_rules(spec, literal)
            if error is None and not ALPHANUMERIC.match(literal):
                return "Must be alphanumeric (letters, numbers, dashes, underscores only)"
            return error
        case _:
            return _check_string_rules(spec, literal)


def require_valid_static_value(spec: FieldSpecification, value: str) -> None:
    error = validate_static_value(spec, value)
    if error is not None:
        raise InvalidStaticValueError(spec.attribute, error)


def _check_enum(spec: FieldSpecification, literal: str) -> str | None:
    if not spec.supported_values:
        return None
    allowed = {item.lower() for item in spec.supported_values}
    if literal.lower() in allowed:
        return None
    return f"Must be one of: {', '.join(spec.supported_values)}"


def _check_url(literal: str) -> str | None:
    scheme, separator, rest = literal.partition("://")
    if not separator or not rest:
        return "Invalid URL format"
    if scheme.lower() not in {"http", "https"}:
        return "URL must use http or https protocol"
    return None


def _check_date(literal: str) -> str | None:
    if not STRICT_DATE.match(literal):
        return "Must be in ISO 8601 format (YYYY-MM-DD)"
    try:
        date.fromisoformat(literal)
    except ValueError:
        return "Invalid date"
    return None


def _check_date_range(literal: str) -> str | None:
    parts = [part.strip() for part in literal.split("/")]
    if len(parts) != 2:
        return 'Must be in format "YYYY-MM-DD / YYYY-MM-DD"'
    start, end = parts
    if (error := _check_date(start)) is not None:
        return f"Start date: {error}"
    if (error := _check_date(end)) is not None:
        return f"End date: {error}"
    if date.fromisoformat(start) > date.fromisoformat(end):
        return "Start date must be before end date"
    return None


def _check_string_rules(spec: FieldSpecification, literal: str) -> str | None:
    for rule in spec.rules:
        if isinstance(rule, MaxLength) and len(literal) > rule.limit:
            return f"Maximum {rule.limit} characters allowed"
        if isinstance(rule, DigitCount):
            digits = re.sub(r"\D", "", literal)
            if not rule.minimum <= len(digits) <= rule.maximum:
                return f"Must be {rule.minimum}-{rule.maximum} digits"
    return None
