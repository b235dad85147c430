from datetime import datetime, timezone

import pytest

from variant_pricing.engine.canonical.models import PriceListType
from variant_pricing.persistence.eligibility import check_price_item, is_price_visible, to_price_record
from variant_pricing.persistence.memory import InMemoryPrices
from variant_pricing.util.errors import InvalidPriceDataError

AS_OF = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _visible(item: dict, **overrides) -> bool:
    kwargs = {
        "region_id": "reg_eu",
        "currency_code": "eur",
        "customer_id": "cus_1",
        "include_discount_prices": True,
        "as_of": AS_OF,
    }
    kwargs.update(overrides)
    return is_price_visible(item, **kwargs)


def test_price_must_match_region_or_currency() -> None:
    assert _visible({"amount": 1, "region_id": "reg_eu"})
    assert _visible({"amount": 1, "currency_code": "EUR"})
    assert not _visible({"amount": 1, "region_id": "reg_us", "currency_code": "usd"})
    assert _visible({"amount": 1, "currency_code": "usd"}, region_id=None, currency_code=None)


def test_price_lists_need_discounts_requested() -> None:
    item = {"amount": 1, "currency_code": "eur", "price_list": {"id": "pl_1", "status": "active"}}
    assert _visible(item)
    assert not _visible(item, include_discount_prices=False)
    assert _visible({"amount": 1, "currency_code": "eur"}, include_discount_prices=False)


def test_price_list_status_and_window() -> None:
    draft = {"amount": 1, "currency_code": "eur", "price_list": {"id": "pl_1", "status": "draft"}}
    future = {
        "amount": 1,
        "currency_code": "eur",
        "price_list": {"id": "pl_2", "starts_at": "2026-11-01T00:00:00+00:00"},
    }
    expired = {
        "amount": 1,
        "currency_code": "eur",
        "price_list": {"id": "pl_3", "ends_at": "2026-10-01T00:00:00"},
    }
    running = {
        "amount": 1,
        "currency_code": "eur",
        "price_list": {
            "id": "pl_4",
            "starts_at": "2026-10-01T00:00:00+00:00",
            "ends_at": "2026-10-31T00:00:00+00:00",
        },
    }
    assert not _visible(draft)
    assert not _visible(future)
    assert not _visible(expired)
    assert _visible(running)


def test_customer_restricted_price_list() -> None:
    item = {
        "amount": 1,
        "currency_code": "eur",
        "price_list": {"id": "pl_1", "customer_ids": ["cus_1", "cus_2"]},
    }
    assert _visible(item)
    assert not _visible(item, customer_id="cus_9")
    assert not _visible(item, customer_id=None)


def test_stored_item_is_converted_to_record() -> None:
    record = to_price_record(
        {
            "price_id": "price_1",
            "amount": 1500,
            "currency_code": "EUR",
            "min_quantity": 2,
            "price_list": {"id": "pl_1", "type": "sale"},
            "metadata": {"window_width": 90, "window_height": 180},
        }
    )
    assert record.id == "price_1"
    assert record.amount == 1500
    assert record.currency_code == "eur"
    assert record.price_list_id == "pl_1"
    assert record.price_list_type == PriceListType.SALE
    assert record.min_quantity == 2
    assert record.max_quantity is None
    assert record.metadata == {"window_width": 90, "window_height": 180}


@pytest.mark.parametrize("list_type", ["override", "OVERRIDE", "clearance"])
def test_unknown_price_list_types_are_reported_as_sale(list_type: str) -> None:
    record = to_price_record(
        {"amount": 5, "currency_code": "eur", "price_list": {"id": "pl_1", "type": list_type}}
    )
    assert record.price_list_type == PriceListType.SALE


def test_known_price_list_types_are_kept() -> None:
    default = to_price_record({"amount": 5, "price_list": {"id": "pl_1", "type": "default"}})
    untyped = to_price_record({"amount": 5, "price_list": {"id": "pl_2"}})
    assert default.price_list_type == PriceListType.DEFAULT
    assert untyped.price_list_type is None


def test_malformed_price_list_window_is_invalid_data() -> None:
    item = {"amount": 1, "currency_code": "eur", "price_list": {"id": "pl_1", "starts_at": "next week"}}
    with pytest.raises(InvalidPriceDataError):
        _visible(item)
    with pytest.raises(InvalidPriceDataError):
        check_price_item(item)
    with pytest.raises(InvalidPriceDataError):
        InMemoryPrices().put(item)
