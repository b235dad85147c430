from __future__ import annotations

from typing import Optional

from variant_pricing.app.models.config import ServiceConfig
from variant_pricing.engine.pricing.context import RegionContextCollector
from variant_pricing.engine.pricing.service import PricingService
from variant_pricing.engine.tax.taxes import get_rounding_strategy
from variant_pricing.persistence.dynamo_catalog import DynamoRegions, DynamoVariants
from variant_pricing.persistence.dynamo_prices import DynamoPrices
from variant_pricing.persistence.dynamo_tax_rates import DynamoTaxRates
from variant_pricing.persistence.memory import InMemoryStores
from variant_pricing.util.metrics import CloudWatchMetrics


def build_pricing_service(
    config: ServiceConfig,
    *,
    stores: Optional[InMemoryStores] = None,
) -> PricingService:
    """Wire a PricingService against DynamoDB tables, or in-memory stores
    when the config names no tables."""
    if config.tables and stores is None:
        prices = DynamoPrices(config.tables.prices)
        variants = DynamoVariants(config.tables.variants)
        regions = DynamoRegions(config.tables.regions)
        tax_rates = DynamoTaxRates(config.tables.tax_rates)
    else:
        stores = stores or InMemoryStores()
        prices = stores.prices
        variants = stores.variants
        regions = stores.regions
        tax_rates = stores.tax_rates
    return PricingService(
        price_repository=prices,
        variant_lookup=variants,
        tax_provider=tax_rates,
        context_collector=RegionContextCollector(
            regions,
            tax_inclusive_pricing=config.pricing.tax_inclusive_pricing,
        ),
        rounding=get_rounding_strategy(config.pricing.rounding.mode),
        metrics=CloudWatchMetrics.from_env(
            namespace=config.metrics.namespace,
            enabled=config.metrics.enabled,
        ),
    )
