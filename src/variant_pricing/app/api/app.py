from __future__ import annotations

import logging
import os

from fastapi import FastAPI, HTTPException

from variant_pricing.app.config.loader import load_service_config
from variant_pricing.app.models.api import VariantPricingRequest
from variant_pricing.app.models.config import ServiceConfig
from variant_pricing.app.wiring import build_pricing_service
from variant_pricing.engine.canonical.models import ProductVariantPricing, VariantPriceRequest
from variant_pricing.engine.pricing.collaborators import ReadSnapshot
from variant_pricing.persistence.memory import load_fixture
from variant_pricing.util.errors import (
    InvalidPriceDataError,
    InvalidPricingContextError,
    NotFoundError,
    RetryableError,
)

config_path = os.getenv("PRICING_CONFIG_PATH")
fixture_path = os.getenv("PRICING_FIXTURE_PATH")

config = load_service_config(config_path) if config_path else ServiceConfig()
stores = load_fixture(fixture_path) if fixture_path else None
pricing_service = build_pricing_service(config, stores=stores)

logger = logging.getLogger("variant_pricing.api")

app = FastAPI()


@app.get("/v1/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/v1/variants/{variant_id}/pricing")
def price_variant(variant_id: str, body: VariantPricingRequest) -> ProductVariantPricing:
    request = VariantPriceRequest(variant_id=variant_id, quantity=body.quantity, metadata=body.metadata)
    snapshot = ReadSnapshot(consistent_read=config.pricing.consistent_reads)
    try:
        return pricing_service.get_variant_pricing(request, body.context, snapshot=snapshot)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidPricingContextError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RetryableError as exc:
        logger.exception("price_lookup_failed")
        raise HTTPException(status_code=503, detail="Pricing storage unavailable") from exc
    except InvalidPriceDataError as exc:
        logger.exception("price_data_invalid")
        raise HTTPException(status_code=500, detail="Stored price data is invalid") from exc
