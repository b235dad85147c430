from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Optional, Protocol

from variant_pricing.engine.canonical.models import (
    PriceListType,
    PriceRecord,
    PriceSelectionContext,
    VariantPriceRequest,
)
from variant_pricing.engine.dimensions.window import WindowDimensions, covers, fits
from variant_pricing.engine.selection.quantity import is_valid_quantity


class OriginalSource(IntEnum):
    """Where the current original price came from, weakest first."""

    NONE = 0
    PROVISIONAL = 1
    CURRENCY = 2
    REGION = 3


@dataclass(frozen=True)
class SelectionFrame:
    region_id: Optional[str]
    currency_code: Optional[str]
    quantity: Optional[int]
    dimensions: Optional[WindowDimensions]


@dataclass
class SelectionResult:
    prices: List[PriceRecord] = field(default_factory=list)
    original_price: Optional[int] = None
    calculated_price: Optional[int] = None
    calculated_price_type: Optional[PriceListType] = None
    original_price_includes_tax: Optional[bool] = None
    calculated_price_includes_tax: Optional[bool] = None
    dimensions: Optional[WindowDimensions] = None
    metadata: Optional[Dict[str, Any]] = None
    original_source: OriginalSource = OriginalSource.NONE

    def set_original(self, price: PriceRecord, source: OriginalSource) -> None:
        self.original_price = price.amount
        self.original_price_includes_tax = price.includes_tax
        self.original_source = source

    def set_calculated(self, price: PriceRecord, amount: int) -> None:
        self.calculated_price = amount
        self.calculated_price_type = price.price_list_type or PriceListType.DEFAULT
        self.calculated_price_includes_tax = price.includes_tax


class PriceSelector(Protocol):
    def apply(self, result: SelectionResult, price: PriceRecord, frame: SelectionFrame) -> None:
        ...


def _is_plain_price(price: PriceRecord) -> bool:
    return price.price_list_id is None and price.min_quantity is None and price.max_quantity is None


class StandardPriceSelector:
    """Region and currency scoped selection of flat per-unit prices.

    The region's plain price takes precedence over the currency's for the
    original price; the lowest quantity-eligible price becomes the calculated
    price.
    """

    def apply(self, result: SelectionResult, price: PriceRecord, frame: SelectionFrame) -> None:
        region_match = bool(frame.region_id) and price.region_id == frame.region_id
        currency_match = bool(frame.currency_code) and price.currency_code == frame.currency_code

        if region_match and _is_plain_price(price):
            result.set_original(price, OriginalSource.REGION)
        if (
            currency_match
            and _is_plain_price(price)
            and result.original_source is not OriginalSource.REGION
        ):
            result.set_original(price, OriginalSource.CURRENCY)

        if not (currency_match or region_match):
            return
        if not is_valid_quantity(price, frame.quantity):
            return
        if result.calculated_price is None or price.amount < result.calculated_price:
            result.set_calculated(price, price.amount)


class DimensionalPriceSelector:
    """Adds window pricing on top of another selector.

    Window line items are only priced from window prices and flat line items
    only from flat prices; the flat case is handed to the wrapped selector.
    """

    def __init__(self, standard: Optional[PriceSelector] = None) -> None:
        self.standard = standard or StandardPriceSelector()

    def apply(self, result: SelectionResult, price: PriceRecord, frame: SelectionFrame) -> None:
        candidate = WindowDimensions.from_metadata(price.metadata)
        if frame.dimensions is not None:
            if candidate is not None:
                self._apply_window(result, price, candidate, frame.dimensions)
        elif candidate is None:
            self.standard.apply(result, price, frame)

    def _apply_window(
        self,
        result: SelectionResult,
        price: PriceRecord,
        candidate: WindowDimensions,
        requested: WindowDimensions,
    ) -> None:
        if not fits(requested, candidate):
            return
        current = result.dimensions
        if current is not None and not covers(candidate, current):
            return
        amount = price.amount
        includes_tax = price.includes_tax
        # Same size as the current winner: keep the cheaper of the two.
        if current == candidate and result.calculated_price is not None and result.calculated_price <= amount:
            amount = result.calculated_price
            includes_tax = result.calculated_price_includes_tax
        result.set_calculated(price, amount)
        result.calculated_price_includes_tax = includes_tax
        result.dimensions = candidate
        result.metadata = price.metadata


def select_prices(
    prices: Optional[Iterable[PriceRecord]],
    request: VariantPriceRequest,
    context: PriceSelectionContext,
    selector: Optional[PriceSelector] = None,
) -> SelectionResult:
    selector = selector or DimensionalPriceSelector()
    candidates = list(prices or [])
    quantity = request.quantity if request.quantity is not None else context.quantity
    frame = SelectionFrame(
        region_id=context.region_id,
        currency_code=context.currency_code,
        quantity=quantity,
        dimensions=WindowDimensions.from_metadata(request.metadata),
    )
    result = SelectionResult(prices=candidates)
    for price in candidates:
        # A default price is the provisional original until a region or
        # currency scoped one is found.
        if price.price_list_id is None and result.original_source <= OriginalSource.PROVISIONAL:
            result.set_original(price, OriginalSource.PROVISIONAL)
        selector.apply(result, price, frame)
    return result
