from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from variant_pricing.engine.canonical.models import PriceRecord
from variant_pricing.engine.pricing.collaborators import ReadSnapshot
from variant_pricing.persistence.eligibility import check_price_item, is_price_visible, to_price_record
from variant_pricing.util.errors import RetryableError


class DynamoPrices:
    def __init__(self, table_name: str) -> None:
        self.table = boto3.resource("dynamodb").Table(table_name)

    def put(self, item: Dict[str, Any]) -> None:
        check_price_item(item)
        self.table.put_item(Item=item)

    def _query_variant(self, variant_id: str, snapshot: ReadSnapshot) -> Iterator[Dict[str, Any]]:
        kwargs: Dict[str, Any] = {
            "KeyConditionExpression": Key("variant_id").eq(variant_id),
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
            for item in self._query_variant(variant_id, snapshot)
            if is_price_visible(
                item,
                region_id=region_id,
                currency_code=currency_code,
                customer_id=customer_id,
                include_discount_prices=include_discount_prices,
                as_of=snapshot.as_of,
            )
        ]
