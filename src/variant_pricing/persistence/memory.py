from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from variant_pricing.engine.canonical.models import PriceRecord, TaxRate
from variant_pricing.engine.pricing.collaborators import ReadSnapshot, RegionTaxInfo
from variant_pricing.engine.pricing.context import RegionRecord
from variant_pricing.persistence.dynamo_tax_rates import resolve_product_rates
from variant_pricing.persistence.eligibility import check_price_item, is_price_visible, to_price_record
from variant_pricing.util.errors import NotFoundError


class InMemoryPrices:
    """Price store that keeps insertion order, which the selection fold relies on."""

    def __init__(self) -> None:
        self._items: List[Dict[str, Any]] = []

    def put(self, item: Dict[str, Any]) -> None:
        check_price_item(item)
        self._items.append(item)

    def find_for_variant(
        self,
        variant_id: str,
        region_id: Optional[str],
        currency_code: Optional[str],
        customer_id: Optional[str],
        include_discount_prices: bool,
        snapshot: ReadSnapshot,
    ) -> List[PriceRecord]:
        return [
            to_price_record(item)
            for item in self._items
            if item.get("variant_id") == variant_id
            and is_price_visible(
                item,
                region_id=region_id,
                currency_code=currency_code,
                customer_id=customer_id,
                include_discount_prices=include_discount_prices,
                as_of=snapshot.as_of,
            )
        ]


class InMemoryVariants:
    def __init__(self) -> None:
        self._products: Dict[str, str] = {}

    def put(self, variant_id: str, product_id: str) -> None:
        self._products[variant_id] = product_id

    def product_id_for_variant(self, variant_id: str, snapshot: ReadSnapshot) -> str:
        product_id = self._products.get(variant_id)
        if product_id is None:
            raise NotFoundError("Variant", variant_id)
        return product_id


class InMemoryRegions:
    def __init__(self) -> None:
        self._data: Dict[str, RegionRecord] = {}

    def put(self, record: RegionRecord) -> None:
        self._data[record.region_id] = record

    def get(self, region_id: str, snapshot: ReadSnapshot) -> Optional[RegionRecord]:
        return self._data.get(region_id)


class InMemoryTaxRates:
    def __init__(self) -> None:
        self._items: List[Dict[str, Any]] = []

    def put(self, item: Dict[str, Any]) -> None:
        self._items.append(item)

    def get_region_rates_for_product(
        self,
        product_id: str,
        region: RegionTaxInfo,
        snapshot: ReadSnapshot,
    ) -> Dict[str, List[TaxRate]]:
        items = [item for item in self._items if item.get("region_id") == region.id]
        return resolve_product_rates(product_id, region, items)


@dataclass
class InMemoryStores:
    prices: InMemoryPrices = field(default_factory=InMemoryPrices)
    variants: InMemoryVariants = field(default_factory=InMemoryVariants)
    regions: InMemoryRegions = field(default_factory=InMemoryRegions)
    tax_rates: InMemoryTaxRates = field(default_factory=InMemoryTaxRates)


def load_fixture(path: str | Path) -> InMemoryStores:
    """Fill in-memory stores from a YAML file with ``regions``, ``variants``,
    ``prices`` and ``tax_rates`` lists."""
    with open(path, "r", encoding="utf-8") as handle:
        data: Dict[str, Any] = yaml.safe_load(handle) or {}
    stores = InMemoryStores()
    for region in data.get("regions", []):
        tax_rate = region.get("tax_rate")
        stores.regions.put(
            RegionRecord(
                region_id=region["region_id"],
                currency_code=region["currency_code"],
                tax_rate=Decimal(str(tax_rate)) if tax_rate is not None else None,
                automatic_taxes=region.get("automatic_taxes", True),
            )
        )
    for variant in data.get("variants", []):
        stores.variants.put(variant["variant_id"], variant["product_id"])
    for price in data.get("prices", []):
        stores.prices.put(price)
    for rate in data.get("tax_rates", []):
        stores.tax_rates.put(rate)
    return stores
