from __future__ import annotations

from typing import Optional

from variant_pricing.engine.canonical.models import PriceRecord


def _valid_without_quantity(price: PriceRecord) -> bool:
    if not price.min_quantity and not price.max_quantity:
        return True
    return not price.min_quantity and bool(price.max_quantity)


def _valid_with_quantity(price: PriceRecord, quantity: int) -> bool:
    above_min = not price.min_quantity or price.min_quantity <= quantity
    below_max = not price.max_quantity or price.max_quantity >= quantity
    return above_min and below_max


def is_valid_quantity(price: PriceRecord, quantity: Optional[int]) -> bool:
    """Check a price's quantity bracket against the requested quantity.

    Without a requested quantity only prices that do not demand a minimum
    quantity qualify.
    """
    if quantity is None:
        return _valid_without_quantity(price)
    return _valid_with_quantity(price, quantity)
