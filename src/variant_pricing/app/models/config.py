from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from variant_pricing.engine.tax.taxes import DEFAULT_ROUNDING, ROUNDING_STRATEGIES


class TablesConfig(BaseModel):
    prices: str
    variants: str
    regions: str
    tax_rates: str


class RoundingConfig(BaseModel):
    mode: str = DEFAULT_ROUNDING

    @field_validator("mode")
    @classmethod
    def known_mode(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in ROUNDING_STRATEGIES:
            raise ValueError(f"rounding mode must be one of {sorted(ROUNDING_STRATEGIES)}")
        return normalized


class PricingConfig(BaseModel):
    rounding: RoundingConfig = Field(default_factory=RoundingConfig)
    tax_inclusive_pricing: bool = False
    consistent_reads: bool = True


class MetricsConfig(BaseModel):
    enabled: bool = False
    namespace: str = "VariantPricing"


class ServiceConfig(BaseModel):
    schema_version: int = 1
    tables: Optional[TablesConfig] = None
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
