from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from variant_pricing.engine.canonical.models import PriceSelectionContext


class VariantPricingRequest(BaseModel):
    quantity: Optional[int] = Field(default=None, ge=1)
    metadata: Optional[Dict[str, Any]] = None
    context: PriceSelectionContext = Field(default_factory=PriceSelectionContext)
