#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
from typing import Any

from variant_pricing.app.config.loader import load_service_config
from variant_pricing.app.models.config import ServiceConfig
from variant_pricing.app.wiring import build_pricing_service
from variant_pricing.engine.canonical.models import PriceSelectionContext, VariantPriceRequest
from variant_pricing.persistence.memory import load_fixture


def parse_metadata(values: list[str]) -> dict[str, Any]:
    metadata: dict[str, Any] = {}
    for value in values:
        if "=" not in value:
            raise ValueError("metadata must be key=value")
        key, raw = value.split("=", 1)
        metadata[key] = raw
    return metadata


def main() -> None:
    parser = argparse.ArgumentParser(description="Price a variant against a local fixture")
    parser.add_argument("--fixture", required=True, help="Path to a YAML fixture with prices and regions")
    parser.add_argument("--variant", required=True, help="Variant id to price")
    parser.add_argument("--config", help="Path to service config YAML")
    parser.add_argument("--region")
    parser.add_argument("--currency")
    parser.add_argument("--customer")
    parser.add_argument("--quantity", type=int)
    parser.add_argument("--no-discounts", action="store_true", help="Ignore price list prices")
    parser.add_argument(
        "--metadata",
        action="append",
        default=[],
        help="Line item metadata (key=value), e.g. window_width=100",
    )
    args = parser.parse_args()

    config = load_service_config(args.config) if args.config else ServiceConfig()
    service = build_pricing_service(config, stores=load_fixture(args.fixture))
    request = VariantPriceRequest(
        variant_id=args.variant,
        quantity=args.quantity,
        metadata=parse_metadata(args.metadata) or None,
    )
    context = PriceSelectionContext(
        region_id=args.region,
        currency_code=args.currency,
        customer_id=args.customer,
        include_discount_prices=not args.no_discounts,
    )
    pricing = service.get_variant_pricing(request, context)
    print(json.dumps(pricing.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    main()
