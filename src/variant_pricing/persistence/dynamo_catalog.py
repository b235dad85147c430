from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from variant_pricing.engine.pricing.collaborators import ReadSnapshot
from variant_pricing.engine.pricing.context import RegionRecord
from variant_pricing.util.errors import NotFoundError, RetryableError


def _get_item(table: Any, key: Dict[str, Any], snapshot: ReadSnapshot) -> Optional[Dict[str, Any]]:
    try:
        response = table.get_item(Key=key, ConsistentRead=snapshot.consistent_read)
    except (BotoCoreError, ClientError) as exc:
        raise RetryableError(str(exc)) from exc
    return response.get("Item")


class DynamoVariants:
    def __init__(self, table_name: str) -> None:
        self.table = boto3.resource("dynamodb").Table(table_name)

    def put(self, variant_id: str, product_id: str) -> None:
        self.table.put_item(Item={"variant_id": variant_id, "product_id": product_id})

    def product_id_for_variant(self, variant_id: str, snapshot: ReadSnapshot) -> str:
        item = _get_item(self.table, {"variant_id": variant_id}, snapshot)
        if not item:
            raise NotFoundError("Variant", variant_id)
        return item["product_id"]


class DynamoRegions:
    def __init__(self, table_name: str) -> None:
        self.table = boto3.resource("dynamodb").Table(table_name)

    def put(self, record: RegionRecord) -> None:
        self.table.put_item(Item={key: value for key, value in record.__dict__.items() if value is not None})

    def get(self, region_id: str, snapshot: ReadSnapshot) -> Optional[RegionRecord]:
        item = _get_item(self.table, {"region_id": region_id}, snapshot)
        if not item:
            return None
        tax_rate = item.get("tax_rate")
        return RegionRecord(
            region_id=item["region_id"],
            currency_code=item["currency_code"],
            tax_rate=Decimal(str(tax_rate)) if tax_rate is not None else None,
            automatic_taxes=bool(item.get("automatic_taxes", True)),
        )
