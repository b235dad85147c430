from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_DOWN, ROUND_FLOOR, ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional, Sequence

from variant_pricing.engine.canonical.models import ProductVariantPricing, TaxRate

RoundingStrategy = Callable[[Decimal], int]


def _quantizer(mode: str) -> RoundingStrategy:
    def _round(value: Decimal) -> int:
        return int(value.quantize(Decimal("1"), rounding=mode))

    return _round


def _round_up(value: Decimal) -> int:
    mode = ROUND_CEILING if value >= 0 else ROUND_FLOOR
    return int(value.quantize(Decimal("1"), rounding=mode))


ROUNDING_STRATEGIES: Dict[str, RoundingStrategy] = {
    "half_up": _quantizer(ROUND_HALF_UP),
    "half_even": _quantizer(ROUND_HALF_EVEN),
    "down": _quantizer(ROUND_DOWN),
    "up": _round_up,
}
DEFAULT_ROUNDING = "half_up"


def get_rounding_strategy(mode: str) -> RoundingStrategy:
    try:
        return ROUNDING_STRATEGIES[mode]
    except KeyError:
        raise ValueError(f"Unsupported rounding mode {mode}") from None


@dataclass(frozen=True)
class TaxedPricing:
    original_price_incl_tax: Optional[int]
    calculated_price_incl_tax: Optional[int]
    original_tax: Optional[int]
    calculated_tax: Optional[int]
    tax_rates: List[TaxRate]


def total_rate(rates: Sequence[TaxRate]) -> Decimal:
    """Combined rate as a fraction: 25% and 5% give 0.3."""
    return sum((rate.rate or Decimal("0") for rate in rates), Decimal("0")) / Decimal("100")


def _tax_for(
    amount: Optional[int],
    rate: Decimal,
    *,
    includes_tax: bool,
    rounding: RoundingStrategy,
) -> tuple[Optional[int], Optional[int]]:
    if amount is None:
        return None, None
    price = Decimal(amount)
    if includes_tax:
        tax = rounding(price - price / (Decimal("1") + rate))
        return tax, amount
    tax = rounding(price * rate)
    return tax, amount + tax


def compute_taxes(
    pricing: ProductVariantPricing,
    rates: Sequence[TaxRate],
    *,
    rounding: Optional[RoundingStrategy] = None,
    tax_inclusive_pricing: bool = False,
) -> TaxedPricing:
    rounding = rounding or ROUNDING_STRATEGIES[DEFAULT_ROUNDING]
    rate = total_rate(rates)
    original_tax, original_incl = _tax_for(
        pricing.original_price,
        rate,
        includes_tax=tax_inclusive_pricing and bool(pricing.original_price_includes_tax),
        rounding=rounding,
    )
    calculated_tax, calculated_incl = _tax_for(
        pricing.calculated_price,
        rate,
        includes_tax=tax_inclusive_pricing and bool(pricing.calculated_price_includes_tax),
        rounding=rounding,
    )
    return TaxedPricing(
        original_price_incl_tax=original_incl,
        calculated_price_incl_tax=calculated_incl,
        original_tax=original_tax,
        calculated_tax=calculated_tax,
        tax_rates=list(rates),
    )


def apply_taxes(
    pricing: ProductVariantPricing,
    rates: Sequence[TaxRate],
    *,
    rounding: Optional[RoundingStrategy] = None,
    tax_inclusive_pricing: bool = False,
) -> ProductVariantPricing:
    taxed = compute_taxes(
        pricing,
        rates,
        rounding=rounding,
        tax_inclusive_pricing=tax_inclusive_pricing,
    )
    return pricing.model_copy(
        update={
            "original_price_incl_tax": taxed.original_price_incl_tax,
            "calculated_price_incl_tax": taxed.calculated_price_incl_tax,
            "original_tax": taxed.original_tax,
            "calculated_tax": taxed.calculated_tax,
            "tax_rates": taxed.tax_rates,
        }
    )
