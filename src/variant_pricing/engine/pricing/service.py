from __future__ import annotations

from typing import Optional, Union

from variant_pricing.engine.canonical.models import (
    PriceSelectionContext,
    PricingContext,
    ProductVariantPricing,
    VariantPriceRequest,
)
from variant_pricing.engine.pricing.collaborators import (
    PriceRepository,
    PricingContextCollector,
    ReadSnapshot,
    RegionTaxInfo,
    TaxRateProvider,
    VariantLookup,
)
from variant_pricing.engine.selection.selector import PriceSelector, SelectionResult, select_prices
from variant_pricing.engine.tax.taxes import RoundingStrategy, apply_taxes
from variant_pricing.util.logging import get_logger, log_event
from variant_pricing.util.metrics import CloudWatchMetrics


class PricingService:
    """Resolves the original and calculated price of a single variant.

    Every collaborator is passed in explicitly and every read of one call is
    made against the same ``ReadSnapshot``. Collaborator errors, including
    ``NotFoundError`` for unknown variants and tax-rate lookup failures, are
    propagated unchanged.
    """

    def __init__(
        self,
        *,
        price_repository: PriceRepository,
        variant_lookup: VariantLookup,
        tax_provider: TaxRateProvider,
        context_collector: PricingContextCollector,
        selector: Optional[PriceSelector] = None,
        rounding: Optional[RoundingStrategy] = None,
        metrics: Optional[CloudWatchMetrics] = None,
    ) -> None:
        self.price_repository = price_repository
        self.variant_lookup = variant_lookup
        self.tax_provider = tax_provider
        self.context_collector = context_collector
        self.selector = selector
        self.rounding = rounding
        self.metrics = metrics
        self.logger = get_logger(self.__class__.__name__)

    def get_variant_pricing(
        self,
        request: VariantPriceRequest,
        context: Union[PriceSelectionContext, PricingContext],
        *,
        snapshot: Optional[ReadSnapshot] = None,
    ) -> ProductVariantPricing:
        snapshot = snapshot or ReadSnapshot()
        pricing_context = self._ensure_pricing_context(context, snapshot)

        if pricing_context.automatic_taxes and pricing_context.region_id:
            pricing_context = self._with_tax_rates(request.variant_id, pricing_context, snapshot)

        prices = self.price_repository.find_for_variant(
            request.variant_id,
            pricing_context.region_id,
            pricing_context.currency_code,
            pricing_context.customer_id,
            pricing_context.include_discount_prices,
            snapshot,
        )
        selection = select_prices(prices, request, pricing_context, self.selector)
        pricing = self._to_pricing(selection)

        if pricing_context.automatic_taxes and pricing_context.region_id:
            pricing = apply_taxes(
                pricing,
                pricing_context.tax_rates or [],
                rounding=self.rounding,
                tax_inclusive_pricing=pricing_context.tax_inclusive_pricing,
            )

        log_event(
            self.logger,
            "variant_priced",
            variant_id=request.variant_id,
            region_id=pricing_context.region_id,
            currency_code=pricing_context.currency_code,
            candidate_count=len(selection.prices),
            original_price=pricing.original_price,
            calculated_price=pricing.calculated_price,
            calculated_price_type=pricing.calculated_price_type,
        )
        if self.metrics:
            self.metrics.record_pricing(
                region_id=pricing_context.region_id,
                priced=pricing.calculated_price is not None,
            )
        return pricing

    def _ensure_pricing_context(
        self,
        context: Union[PriceSelectionContext, PricingContext],
        snapshot: ReadSnapshot,
    ) -> PricingContext:
        if isinstance(context, PricingContext):
            return context
        pricing_context = self.context_collector.collect(context, snapshot)
        log_event(
            self.logger,
            "pricing_context_collected",
            region_id=pricing_context.region_id,
            currency_code=pricing_context.currency_code,
            automatic_taxes=pricing_context.automatic_taxes,
        )
        return pricing_context

    def _with_tax_rates(
        self,
        variant_id: str,
        context: PricingContext,
        snapshot: ReadSnapshot,
    ) -> PricingContext:
        product_id = self.variant_lookup.product_id_for_variant(variant_id, snapshot)
        rates_by_product = self.tax_provider.get_region_rates_for_product(
            product_id,
            RegionTaxInfo(id=context.region_id, tax_rate=context.tax_rate),
            snapshot,
        )
        rates = rates_by_product.get(product_id, [])
        log_event(
            self.logger,
            "tax_rates_resolved",
            variant_id=variant_id,
            product_id=product_id,
            region_id=context.region_id,
            rate_count=len(rates),
        )
        return context.model_copy(update={"tax_rates": rates})

    @staticmethod
    def _to_pricing(selection: SelectionResult) -> ProductVariantPricing:
        return ProductVariantPricing(
            prices=selection.prices,
            original_price=selection.original_price,
            calculated_price=selection.calculated_price,
            calculated_price_type=selection.calculated_price_type,
            original_price_includes_tax=selection.original_price_includes_tax,
            calculated_price_includes_tax=selection.calculated_price_includes_tax,
            metadata=selection.metadata,
        )
