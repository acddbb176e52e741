"""Evaluation of recognized dependency conditions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from feedsync.domain.model import ConditionCode, is_empty

if TYPE_CHECKING:
    from collections.abc import Mapping

    from feedsync.domain.model import FeedValue

PREORDER = "preorder"


def condition_holds(
    code: ConditionCode,
    resolved: Mapping[str, FeedValue],
    *,
    checkout_enabled: bool,
) -> bool:
    match code:
        case ConditionCode.CHECKOUT_ENABLED:
            return checkout_enabled
        case ConditionCode.GTIN_PRESENT:
            return not is_empty(resolved.get("gtin"))
        case ConditionCode.PREORDER_ONLY:
            return resolved.get("availability") == PREORDER
        case ConditionCode.SALE_PRICE_PRESENT:
            return not is_empty(resolved.get("sale_price"))
        case ConditionCode.VARIANTS_PRESENT:
            # no variant signal reaches the resolved set yet
            return False
