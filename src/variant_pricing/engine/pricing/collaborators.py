from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Protocol

from variant_pricing.engine.canonical.models import (
    PriceRecord,
    PriceSelectionContext,
    PricingContext,
    TaxRate,
)


@dataclass(frozen=True)
class ReadSnapshot:
    """Point in time every collaborator read of one pricing call is taken at."""

    as_of: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    consistent_read: bool = True


@dataclass(frozen=True)
class RegionTaxInfo:
    id: str
    tax_rate: Optional[Decimal] = None


class PriceRepository(Protocol):
    def find_for_variant(
        self,
        variant_id: str,
        region_id: Optional[str],
        currency_code: Optional[str],
        customer_id: Optional[str],
        include_discount_prices: bool,
        snapshot: ReadSnapshot,
    ) -> Optional[List[PriceRecord]]:
        ...


class TaxRateProvider(Protocol):
    def get_region_rates_for_product(
        self,
        product_id: str,
        region: RegionTaxInfo,
        snapshot: ReadSnapshot,
    ) -> Dict[str, List[TaxRate]]:
        ...


class VariantLookup(Protocol):
    def product_id_for_variant(self, variant_id: str, snapshot: ReadSnapshot) -> str:
        ...


class PricingContextCollector(Protocol):
    def collect(self, partial: PriceSelectionContext, snapshot: ReadSnapshot) -> PricingContext:
        ...
