"""Feed validation: rule descriptors, conditions and the validator."""

from __future__ import annotations

from .conditions import condition_holds
from .rules import Finding, RuleContext, ValidationRule
from .validator import FeedValidator, ValidationSummary, summarize, utc_today

__all__ = [
    "FeedValidator",
    "Finding",
    "RuleContext",
    "ValidationRule",
    "ValidationSummary",
    "condition_holds",
    "summarize",
    "utc_today",
]
