from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from variant_pricing.engine.canonical.models import TaxRate
from variant_pricing.engine.pricing.collaborators import ReadSnapshot, RegionTaxInfo
from variant_pricing.util.errors import RetryableError

DEFAULT_RATE_CODE = "default"


def resolve_product_rates(
    product_id: str,
    region: RegionTaxInfo,
    items: Iterable[Mapping[str, Any]],
) -> Dict[str, List[TaxRate]]:
    """Rates of the region that target the product, else the region's default rate."""
    rates = [
        TaxRate(rate=item.get("rate"), name=item["name"], code=item.get("code"))
        for item in items
        if product_id in (item.get("product_ids") or [])
    ]
    if not rates:
        rates = [TaxRate(rate=region.tax_rate, name=DEFAULT_RATE_CODE, code=DEFAULT_RATE_CODE)]
    return {product_id: rates}


class DynamoTaxRates:
    def __init__(self, table_name: str) -> None:
        self.table = boto3.resource("dynamodb").Table(table_name)

    def put(self, item: Dict[str, Any]) -> None:
        self.table.put_item(Item=item)

    def _query_region(self, region_id: str, snapshot: ReadSnapshot) -> Iterator[Dict[str, Any]]:
        kwargs: Dict[str, Any] = {
            "KeyConditionExpression": Key("region_id").eq(region_id),
            "ConsistentRead": snapshot.consistent_read,
        }
        while True:
            try:
                response = self.table.query(**kwargs)
            except (BotoCoreError, ClientError) as exc:
                raise RetryableError(str(exc)) from exc
            yield from response.get("Items", [])
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return
            kwargs["ExclusiveStartKey"] = last_key

    def get_region_rates_for_product(
        self,
        product_id: str,
        region: RegionTaxInfo,
        snapshot: ReadSnapshot,
    ) -> Dict[str, List[TaxRate]]:
        return resolve_product_rates(product_id, region, self._query_region(region.id, snapshot))
