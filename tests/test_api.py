import json
import logging

import pytest

from app.core.logging import JsonFormatter, bind_request_id, unbind_request_id
from app.routers.currency import get_conversion_service
from app.services.rates.conversion import ConversionService
from app.services.rates.errors import ProviderUnreachable

PAYLOAD = {
    "from": {"currency_code": "USD", "units": 65, "nanos": 500000000},
    "to": "EUR",
}


def test_healthz(client):
    r = client.get("/_healthz")
    assert r.status_code == 200
    assert r.text == "SERVING"


def test_supported_lists_codes(client):
    r = client.get("/supported")
    assert r.status_code == 200
    codes = r.json()
    assert "USD" in codes and "EUR" in codes
    assert len(codes) == len(set(codes))


def test_convert(client, fake_provider):
    r = client.post("/convert", json=PAYLOAD)
    assert r.status_code == 200
    assert r.json() == {"currency_code": "EUR", "units": 58, "nanos": 950000000}
    assert fake_provider.calls == [("USD", "EUR")]
    assert r.headers["X-Request-Id"]


def test_convert_echoes_request_id(client):
    r = client.post("/convert", json=PAYLOAD, headers={"X-Request-Id": "abc-123"})
    assert r.headers["X-Request-Id"] == "abc-123"


def test_convert_with_static_rates(static_client):
    r = static_client.post(
        "/convert",
        json={"from": {"currency_code": "EUR", "units": 100, "nanos": 0}, "to": "usd"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["currency_code"] == "USD"
    assert body["units"] == 113
    # 100 * 1.1305 is not exact in binary floating point; truncation may drop a nano
    assert 49_999_999 <= body["nanos"] <= 50_000_000


def test_unsupported_target(client, fake_provider):
    r = client.post("/convert", json={**PAYLOAD, "to": "XYZ"})
    assert r.status_code == 400
    assert r.json()["error"] == "unsupported_currency"
    assert fake_provider.calls == []


def test_missing_rate_maps_to_404(client, fake_provider):
    r = client.post("/convert", json={**PAYLOAD, "to": "GBP"})
    assert r.status_code == 404
    assert r.json()["error"] == "rate_unavailable"


def test_uncarried_amount_rejected(client, fake_provider):
    body = {"from": {"currency_code": "USD", "units": 5, "nanos": -1}, "to": "EUR"}
    r = client.post("/convert", json=body)
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_amount"
    assert fake_provider.calls == []


@pytest.mark.parametrize(
    "body",
    [
        {"to": "EUR"},
        {"from": {"currency_code": "USD", "units": 1.5, "nanos": 0}, "to": "EUR"},
        {"from": {"currency_code": "USD", "units": 1, "nanos": 1000000000}, "to": "EUR"},
        {"from": {"currency_code": "DOLLAR", "units": 1}, "to": "EUR"},
    ],
)
def test_malformed_body(client, body):
    r = client.post("/convert", json=body)
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"


def test_provider_unreachable_maps_to_503(client):
    class DownProvider:
        name = "down"

        async def lookup_rate(self, base_currency, target_currency):
            raise ProviderUnreachable("connection refused")

    client.app.dependency_overrides[get_conversion_service] = lambda: ConversionService(
        DownProvider()
    )
    r = client.post("/convert", json=PAYLOAD)
    assert r.status_code == 503
    assert r.json() == {"error": "provider_unreachable", "detail": "connection refused"}


def test_unknown_route(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


def test_json_log_line_uses_severity():
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    token = bind_request_id("rid-1")
    try:
        line = json.loads(JsonFormatter().format(record))
    finally:
        unbind_request_id(token)
    assert line["severity"] == "INFO"
    assert line["message"] == "hello world"
    assert line["request_id"] == "rid-1"
    assert "status_code" not in line


def test_access_line_carries_request_fields(client, caplog):
    with caplog.at_level(logging.INFO, logger="app.access"):
        client.post("/convert", json=PAYLOAD, headers={"X-Request-Id": "rid-2"})
    records = [r for r in caplog.records if r.name == "app.access"]
    assert len(records) == 1
    line = json.loads(JsonFormatter().format(records[0]))
    assert line["method"] == "POST"
    assert line["path"] == "/convert"
    assert line["status_code"] == 200
    assert line["duration_ms"] >= 0
