import pytest
from fastapi.testclient import TestClient

import variant_pricing.app.api.app as app_module
from variant_pricing.app.models.config import ServiceConfig
from variant_pricing.app.wiring import build_pricing_service
from variant_pricing.persistence.memory import load_fixture
from variant_pricing.util.errors import InvalidPriceDataError, RetryableError


@pytest.fixture()
def client(fixture_path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    service = build_pricing_service(ServiceConfig(), stores=load_fixture(fixture_path))
    monkeypatch.setattr(app_module, "pricing_service", service)
    return TestClient(app_module.app)


def test_health(client: TestClient) -> None:
    response = client.get("/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_price_window_variant(client: TestClient) -> None:
    response = client.post(
        "/v1/variants/variant_window/pricing",
        json={
            "quantity": 1,
            "metadata": {"window_width": 100, "window_height": 200},
            "context": {"region_id": "reg_eu", "include_discount_prices": True},
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["calculated_price"] == 6000
    assert body["calculated_price_type"] == "sale"
    assert body["calculated_price_incl_tax"] == 6600
    assert body["original_price"] == 9000
    assert len(body["prices"]) == 5


def test_unknown_variant_is_404(client: TestClient) -> None:
    response = client.post("/v1/variants/variant_missing/pricing", json={"context": {"region_id": "reg_eu"}})
    assert response.status_code == 404
    assert "variant_missing" in response.json()["detail"]


def test_currency_outside_region_is_400(client: TestClient) -> None:
    response = client.post(
        "/v1/variants/variant_flat/pricing",
        json={"context": {"region_id": "reg_eu", "currency_code": "usd"}},
    )
    assert response.status_code == 400


def test_invalid_quantity_is_rejected(client: TestClient) -> None:
    response = client.post("/v1/variants/variant_flat/pricing", json={"quantity": 0})
    assert response.status_code == 422


def test_storage_failure_is_503(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(*args, **kwargs):
        raise RetryableError("throttled")

    monkeypatch.setattr(app_module.pricing_service.price_repository, "find_for_variant", _fail)
    response = client.post("/v1/variants/variant_flat/pricing", json={"context": {"currency_code": "usd"}})
    assert response.status_code == 503


def test_invalid_stored_price_is_500(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(*args, **kwargs):
        raise InvalidPriceDataError("invalid price list instant 'next week'")

    monkeypatch.setattr(app_module.pricing_service.price_repository, "find_for_variant", _fail)
    response = client.post("/v1/variants/variant_flat/pricing", json={"context": {"currency_code": "usd"}})
    assert response.status_code == 500
    assert response.json() == {"detail": "Stored price data is invalid"}
