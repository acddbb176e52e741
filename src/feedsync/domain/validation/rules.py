"""Validation rule descriptors attached to feed attributes.

Each rule inspects one non-empty resolved value and reports at most one
:class:`Finding`. Rules never mutate their input.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Protocol, cast, runtime_checkable
from urllib.parse import urlsplit

from feedsync.domain.model import Severity, parse_number

if TYPE_CHECKING:
    from feedsync.domain.model import FeedValue

AMOUNT_WITH_CURRENCY = re.compile(r"^\d+(\.\d{1,2})?\s+[A-Z]{3}$")
ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
NUMBER_WITH_UNIT = re.compile(r"^\d+(\.\d+)?\s+\S+$")
COUNTRY_CODE = re.compile(r"^[A-Z]{2}$")
HTML_TAG = re.compile(r"<[^>]+>")
DATE_RANGE_SEPARATOR = "/"


@dataclass(frozen=True, slots=True)
class Finding:
    message: str
    severity: Severity = Severity.ERROR

    @classmethod
    def warning(cls, message: str) -> Finding:
        return cls(message, Severity.WARNING)


@dataclass(frozen=True, slots=True)
class RuleContext:
    """What a rule may look at besides the value itself."""

    resolved: Mapping[str, FeedValue]
    today: date


@runtime_checkable
class ValidationRule(Protocol):
    @property
    def description(self) -> str: ...

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None: ...


@dataclass(frozen=True, slots=True)
class MaxLength:
    limit: int

    @property
    def description(self) -> str:
        return f"Max {self.limit} characters"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if isinstance(value, str) and len(value) > self.limit:
            return Finding(f"Exceeds maximum {self.limit} characters (currently {len(value)})")
        return None


@dataclass(frozen=True, slots=True)
class OneOf:
    values: tuple[str, ...]

    @property
    def description(self) -> str:
        return f"One of: {', '.join(self.values)}"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if _as_text(value) in self.values:
            return None
        return Finding(f"Must be one of: {', '.join(self.values)}")


@dataclass(frozen=True, slots=True)
class WellFormedUrl:
    prefer_https: bool = True

    @property
    def description(self) -> str:
        return "Valid http(s) URL" + (", HTTPS preferred" if self.prefer_https else "")

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        scheme = _url_scheme(value)
        if scheme is None:
            return Finding("Invalid URL format")
        if self.prefer_https and scheme != "https":
            return Finding.warning("HTTPS is preferred")
        return None


@dataclass(frozen=True, slots=True)
class UrlList:
    """Either a list of URLs or a comma-separated string of them."""

    @property
    def description(self) -> str:
        return "List of URLs"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if isinstance(value, str):
            items: Sequence[object] = [item.strip() for item in value.split(",")]
        elif isinstance(value, list):
            items = cast("list[object]", value)
        else:
            return Finding("Must be a list of URLs")
        for item in items:
            if _url_scheme(item) is None:
                return Finding(f"Invalid URL in list: {item}")
        return None


@dataclass(frozen=True, slots=True)
class NumberSign:
    """Sign constraint on a numeric value; ``strict`` excludes zero."""

    strict: bool = False
    whole: bool = False

    @property
    def description(self) -> str:
        kind = "integer" if self.whole else "number"
        return f"{'Positive' if self.strict else 'Non-negative'} {kind}"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        number = parse_number(value)
        if number is None:
            return Finding("Must be a valid number")
        if self.whole and not number.is_integer():
            return Finding("Must be a whole number")
        if self.strict and number <= 0:
            return Finding("Must be positive")
        if not self.strict and number < 0:
            return Finding("Must be non-negative")
        return None


@dataclass(frozen=True, slots=True)
class NumericRange:
    minimum: float
    maximum: float

    @property
    def description(self) -> str:
        return f"{self.minimum:g}-{self.maximum:g} scale"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        number = parse_number(value)
        if number is None:
            return Finding("Must be a valid number")
        if not self.minimum <= number <= self.maximum:
            return Finding(f"Must be between {self.minimum:g} and {self.maximum:g}")
        return None


@dataclass(frozen=True, slots=True)
class DigitCount:
    minimum: int
    maximum: int

    @property
    def description(self) -> str:
        return f"{self.minimum}-{self.maximum} digits"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        digits = re.sub(r"\D", "", _as_text(value))
        if self.minimum <= len(digits) <= self.maximum:
            return None
        return Finding(f"Must be {self.minimum}-{self.maximum} digits")


@dataclass(frozen=True, slots=True)
class NoDashesOrSpaces:
    @property
    def description(self) -> str:
        return "No dashes or spaces"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if isinstance(value, str) and re.search(r"[\s-]", value):
            return Finding("Must not contain dashes or spaces")
        return None


@dataclass(frozen=True, slots=True)
class NotAllCaps:
    """Style warning only; shouting titles do not make a product invalid."""

    min_length: int = 4

    @property
    def description(self) -> str:
        return "Avoid ALL CAPS"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if (
            isinstance(value, str)
            and len(value) >= self.min_length
            and value == value.upper()
            and any(char.isalpha() for char in value)
        ):
            return Finding.warning("Avoid using ALL CAPS")
        return None


@dataclass(frozen=True, slots=True)
class PlainText:
    @property
    def description(self) -> str:
        return "Plain text only (no HTML)"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if isinstance(value, str) and HTML_TAG.search(value):
            return Finding("Must be plain text (no HTML tags)")
        return None


@dataclass(frozen=True, slots=True)
class AmountWithCurrency:
    @property
    def description(self) -> str:
        return "Amount with ISO 4217 currency code"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if isinstance(value, str) and AMOUNT_WITH_CURRENCY.match(value.strip()):
            return None
        return Finding('Must be in format: "amount CURRENCY" (e.g. "79.99 USD")')


@dataclass(frozen=True, slots=True)
class IsoDate:
    @property
    def description(self) -> str:
        return "ISO 8601 date (YYYY-MM-DD)"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if parse_iso_date(value) is None:
            return Finding("Must be ISO 8601 date format (YYYY-MM-DD)")
        return None


@dataclass(frozen=True, slots=True)
class FutureDate:
    """Unparseable dates are left to :class:`IsoDate`."""

    @property
    def description(self) -> str:
        return "Must be a future date"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        parsed = parse_iso_date(value)
        if parsed is not None and parsed <= context.today:
            return Finding("Must be a future date")
        return None


@dataclass(frozen=True, slots=True)
class DateRange:
    @property
    def description(self) -> str:
        return "Date range YYYY-MM-DD / YYYY-MM-DD, start before end"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        parts = _as_text(value).split(DATE_RANGE_SEPARATOR)
        if len(parts) != 2:
            return Finding('Must be in format "YYYY-MM-DD / YYYY-MM-DD"')
        start, end = (parse_iso_date(part.strip()) for part in parts)
        if start is None or end is None:
            return Finding('Must be in format "YYYY-MM-DD / YYYY-MM-DD"')
        if start >= end:
            return Finding("Start date must precede end date")
        return None


@dataclass(frozen=True, slots=True)
class ValueWithUnit:
    @property
    def description(self) -> str:
        return "Number followed by a unit"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if isinstance(value, str) and NUMBER_WITH_UNIT.match(value.strip()):
            return None
        return Finding('Must be a number followed by a unit (e.g. "10 cm")')


@dataclass(frozen=True, slots=True)
class CountryCode:
    @property
    def description(self) -> str:
        return "2-letter country code"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = context
        if isinstance(value, str) and COUNTRY_CODE.match(value):
            return None
        return Finding("Must be a 2-letter country code")


@dataclass(frozen=True, slots=True)
class NotAbovePrice:
    """Sale price must not exceed the regular price.

    The comparison is not evaluated yet: how to compare amounts carrying
    different currency codes has not been settled, so the rule reports
    nothing until it is.
    """

    @property
    def description(self) -> str:
        return "Must be <= price"

    def check(self, value: FeedValue, context: RuleContext) -> Finding | None:
        _ = value, context
        return None


def parse_iso_date(value: object) -> date | None:
    """Parse the ``YYYY-MM-DD`` prefix of ``value``; ``None`` when it has none."""

    if not isinstance(value, str) or not ISO_DATE_PREFIX.match(value):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _as_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _url_scheme(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return None
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        return None
    return parts.scheme


__all__ = [
    "AmountWithCurrency",
    "CountryCode",
    "DateRange",
    "DigitCount",
    "Finding",
    "FutureDate",
    "IsoDate",
    "MaxLength",
    "NoDashesOrSpaces",
    "NotAbovePrice",
    "NotAllCaps",
    "NumberSign",
    "NumericRange",
    "OneOf",
    "PlainText",
    "RuleContext",
    "UrlList",
    "ValidationRule",
    "ValueWithUnit",
    "WellFormedUrl",
    "parse_iso_date",
]
