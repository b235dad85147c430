from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from variant_pricing.engine.canonical.models import PriceListType, PriceRecord
from variant_pricing.util.errors import InvalidPriceDataError

ACTIVE_STATUS = "active"


def _parse_instant(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError as exc:
            raise InvalidPriceDataError(f"invalid price list instant {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def _price_list_type(value: Any) -> Optional[PriceListType]:
    # Any list type other than the known ones is reported as a sale.
    if value is None:
        return None
    try:
        return PriceListType(str(value).lower())
    except ValueError:
        return PriceListType.SALE


def check_price_item(item: Mapping[str, Any]) -> None:
    """Reject a stored price whose price list window cannot be read."""
    price_list = item.get("price_list") or {}
    _parse_instant(price_list.get("starts_at"))
    _parse_instant(price_list.get("ends_at"))


def _price_list_visible(
    price_list: Mapping[str, Any],
    *,
    customer_id: Optional[str],
    as_of: datetime,
) -> bool:
    if price_list.get("status", ACTIVE_STATUS) != ACTIVE_STATUS:
        return False
    starts_at = _parse_instant(price_list.get("starts_at"))
    ends_at = _parse_instant(price_list.get("ends_at"))
    if starts_at and as_of < starts_at:
        return False
    if ends_at and as_of > ends_at:
        return False
    customer_ids = price_list.get("customer_ids")
    if customer_ids and customer_id not in customer_ids:
        return False
    return True


def is_price_visible(
    item: Mapping[str, Any],
    *,
    region_id: Optional[str],
    currency_code: Optional[str],
    customer_id: Optional[str],
    include_discount_prices: bool,
    as_of: datetime,
) -> bool:
    """Narrow a stored price down to the candidates a pricing call may see.

    A price must belong to the requested region or currency. Default prices
    are always visible; price list prices only when discounts are requested
    and the list is active, running at ``as_of`` and open to the customer.
    """
    if region_id or currency_code:
        region_match = bool(region_id) and item.get("region_id") == region_id
        item_currency = (item.get("currency_code") or "").lower()
        currency_match = bool(currency_code) and item_currency == currency_code
        if not (region_match or currency_match):
            return False
    price_list = item.get("price_list")
    if not price_list:
        return True
    if not include_discount_prices:
        return False
    return _price_list_visible(price_list, customer_id=customer_id, as_of=as_of)


def to_price_record(item: Mapping[str, Any]) -> PriceRecord:
    price_list = item.get("price_list") or {}
    return PriceRecord(
        id=item.get("price_id"),
        amount=int(item["amount"]),
        currency_code=item.get("currency_code"),
        region_id=item.get("region_id"),
        price_list_id=price_list.get("id"),
        price_list_type=_price_list_type(price_list.get("type")),
        min_quantity=_optional_int(item.get("min_quantity")),
        max_quantity=_optional_int(item.get("max_quantity")),
        includes_tax=item.get("includes_tax"),
        metadata=item.get("metadata"),
    )
