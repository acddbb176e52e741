"""Price and sale-window formatting."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from feedsync.domain.model import is_empty, parse_number

if TYPE_CHECKING:
    from datetime import date

    from feedsync.domain.model import ShopContext, SourceRecord


def format_price_with_currency(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """``"79.9"`` with shop currency ``USD`` becomes ``"79.90 USD"``."""

    _ = source
    amount = parse_number(value)
    if amount is None:
        return None
    if shop.currency:
        return f"{amount:.2f} {shop.currency}"
    return f"{amount:.2f}"


def format_sale_date_range(value: object, source: SourceRecord, shop: ShopContext) -> object:
    """Build ``"YYYY-MM-DD / YYYY-MM-DD"`` from the sale window of a discounted product.

    Needs a sale price and both window bounds on the source record; the
    extracted value itself is ignored.
    """

    _ = value, shop
    sale_price = source.get("sale_price")
    starts = source.get("date_on_sale_from")
    ends = source.get("date_on_sale_to")
    if is_empty(sale_price) or is_empty(starts) or is_empty(ends):
        return None
    return f"{_as_utc_date(starts).isoformat()} / {_as_utc_date(ends).isoformat()}"


def _as_utc_date(raw: object) -> date:
    moment = datetime.fromisoformat(str(raw).strip())
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.date()
