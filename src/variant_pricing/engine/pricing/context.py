from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol

from variant_pricing.engine.canonical.models import PriceSelectionContext, PricingContext
from variant_pricing.engine.pricing.collaborators import ReadSnapshot
from variant_pricing.util.errors import InvalidPricingContextError, NotFoundError


@dataclass
class RegionRecord:
    region_id: str
    currency_code: str
    tax_rate: Optional[Decimal] = None
    automatic_taxes: bool = True


class RegionStore(Protocol):
    def get(self, region_id: str, snapshot: ReadSnapshot) -> Optional[RegionRecord]:
        ...


class RegionContextCollector:
    """Completes a partial price selection context from the region it names.

    The region decides the currency, whether taxes are computed automatically
    and the default tax rate. Without a region the context is taken as is and
    taxes stay manual.
    """

    def __init__(self, regions: RegionStore, *, tax_inclusive_pricing: bool = False) -> None:
        self.regions = regions
        self.tax_inclusive_pricing = tax_inclusive_pricing

    def collect(self, partial: PriceSelectionContext, snapshot: ReadSnapshot) -> PricingContext:
        fields = partial.model_dump()
        fields["tax_inclusive_pricing"] = self.tax_inclusive_pricing
        if not partial.region_id:
            return PricingContext(**fields)
        region = self.regions.get(partial.region_id, snapshot)
        if region is None:
            raise NotFoundError("Region", partial.region_id)
        if partial.currency_code and partial.currency_code != region.currency_code.lower():
            raise InvalidPricingContextError(
                f"currency {partial.currency_code} does not belong to region {region.region_id}"
            )
        fields.update(
            region_id=region.region_id,
            currency_code=region.currency_code.lower(),
            automatic_taxes=region.automatic_taxes,
            tax_rate=region.tax_rate,
        )
        return PricingContext(**fields)
