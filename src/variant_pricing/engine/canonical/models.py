from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class PriceListType(str, Enum):
    DEFAULT = "default"
    SALE = "sale"


class PriceRecord(BaseModel):
    id: Optional[str] = None
    amount: int
    currency_code: Optional[str] = None
    region_id: Optional[str] = None
    price_list_id: Optional[str] = None
    price_list_type: Optional[PriceListType] = None
    min_quantity: Optional[int] = None
    max_quantity: Optional[int] = None
    includes_tax: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("currency_code")
    @classmethod
    def normalize_currency(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip().lower()


class TaxRate(BaseModel):
    rate: Optional[Decimal] = None
    name: str
    code: Optional[str] = None


class PriceSelectionContext(BaseModel):
    region_id: Optional[str] = None
    currency_code: Optional[str] = None
    customer_id: Optional[str] = None
    quantity: Optional[int] = None
    include_discount_prices: bool = False
    tax_rates: Optional[List[TaxRate]] = None

    @field_validator("currency_code")
    @classmethod
    def normalize_currency(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip().lower()


class PricingContext(PriceSelectionContext):
    automatic_taxes: bool = False
    tax_rate: Optional[Decimal] = None
    tax_inclusive_pricing: bool = False


class VariantPriceRequest(BaseModel):
    variant_id: str
    quantity: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("variant_id")
    @classmethod
    def required_stripped(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("variant_id is required")
        return value.strip()

    @field_validator("quantity")
    @classmethod
    def positive_quantity(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise ValueError("quantity must be >= 1")
        return value


class ProductVariantPricing(BaseModel):
    prices: List[PriceRecord] = Field(default_factory=list)
    original_price: Optional[int] = None
    calculated_price: Optional[int] = None
    calculated_price_type: Optional[PriceListType] = None
    original_price_includes_tax: Optional[bool] = None
    calculated_price_includes_tax: Optional[bool] = None
    original_price_incl_tax: Optional[int] = None
    calculated_price_incl_tax: Optional[int] = None
    original_tax: Optional[int] = None
    calculated_tax: Optional[int] = None
    tax_rates: Optional[List[TaxRate]] = None
    metadata: Optional[Dict[str, Any]] = None
