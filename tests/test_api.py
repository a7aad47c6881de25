from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from currency_converter.db.dal import Database
from currency_converter.main import create_app
from currency_converter.models import RateSnapshot
from currency_converter.routers.deps import get_conversion_handler
from currency_converter.services.conversion import ConversionHandler
from currency_converter.services.history import HistoryRecorder
from currency_converter.services.rates.resolver import RateResolver, RateResolverConfig


class BrokenResolver:
    async def quote(self, from_currency, to_currency):
        raise ZeroDivisionError("float division by zero")


class FailingHistoryStore:
    def insert_conversion(self, record):
        raise RuntimeError("history table missing")

    def insert_rate_snapshot(self, snapshot):  # pragma: no cover
        raise RuntimeError("history table missing")


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert "POST /convert" in resp.json()["endpoints"]


def test_convert_static_usd_eur(client):
    resp = client.post("/convert", json={"amount": 100, "from": "USD", "to": "EUR"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["result"] == 92.0
    assert data["rate"] == pytest.approx(0.92)
    assert data["message"] == "Conversion successful"


def test_convert_eur_gbp(client):
    resp = client.post("/convert", json={"amount": 50, "from": "EUR", "to": "GBP"})
    assert resp.status_code == 200
    assert resp.json()["result"] == 42.93
    assert resp.json()["rate"] == pytest.approx(0.858696, rel=1e-6)


def test_convert_response_carries_request_id(client):
    resp = client.post("/convert", json={"amount": 1, "from": "USD", "to": "JPY"})
    assert resp.headers.get("X-Request-ID")


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"from": "USD", "to": "EUR"}, "Missing required fields: amount, from, or to"),
        ({"amount": -3, "from": "USD", "to": "EUR"}, "Amount must be a positive number"),
        ({"amount": "ten", "from": "USD", "to": "EUR"}, "Amount must be a positive number"),
        ({"amount": 10, "from": "EUR", "to": "EUR"}, "Cannot convert currency to itself"),
        ({"amount": 10**400, "from": "USD", "to": "EUR"}, "Amount must be a positive number"),
        ({"amount": 10, "from": 840, "to": "EUR"}, "Currency codes must be strings"),
        ({"amount": 1e308, "from": "USD", "to": "VND"}, "Converted amount is too large"),
    ],
)
def test_convert_validation_errors(client, payload, message):
    resp = client.post("/convert", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": message}


def test_convert_non_object_body(client):
    resp = client.post("/convert", json=[1, 2, 3])
    assert resp.status_code == 400
    assert resp.json()["message"] == "Missing required fields: amount, from, or to"


def test_convert_malformed_json(client):
    resp = client.post(
        "/convert", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_convert_records_history(settings):
    app = create_app(settings_override=settings)
    with TestClient(app) as client:
        resp = client.post("/convert", json={"amount": 100, "from": "USD", "to": "EUR"})
        assert resp.status_code == 200
    # leaving the client runs shutdown, which drains pending writes
    db = Database(settings.db_path)
    [row] = db.list_conversions()
    assert (row["amount"], row["from_currency"], row["to_currency"]) == (100, "USD", "EUR")
    assert row["converted_amount"] == 92.0
    assert row["exchange_rate"] == pytest.approx(0.92)


def test_history_endpoint_lists_snapshots(settings):
    app = create_app(settings_override=settings)
    with TestClient(app) as client:
        client.post("/convert", json={"amount": 100, "from": "USD", "to": "EUR"})
        client.post("/convert", json={"amount": 10, "from": "EUR", "to": "USD"})
        client.post("/convert", json={"amount": 10, "from": "EUR", "to": "GBP"})
    with TestClient(app) as client:
        resp = client.get("/history/eur")
    assert resp.status_code == 200
    history = resp.json()["history"]
    assert len(history) == 2
    assert all(p["rate_to_usd"] == pytest.approx(0.92) for p in history)
    assert history[0]["recorded_at"] <= history[1]["recorded_at"]


def test_assumed_parity_is_not_a_rate_snapshot(settings):
    app = create_app(settings_override=settings)
    with TestClient(app) as client:
        resp = client.post("/convert", json={"amount": 5, "from": "USD", "to": "XYZ"})
        assert resp.status_code == 200
        assert resp.json()["rate"] == 1.0
    with TestClient(app) as client:
        history = client.get("/history/XYZ").json()["history"]
    assert history == []
    assert len(Database(settings.db_path).list_conversions()) == 1


def test_history_endpoint_empty(client):
    resp = client.get("/history/XYZ")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "history": []}


def test_history_limit(settings, db):
    settings.history_limit = 2
    for day in (1, 2, 3):
        db.insert_rate_snapshot(
            RateSnapshot("EUR", 0.9 + day / 100, datetime(2024, 1, day, tzinfo=timezone.utc))
        )
    app = create_app(settings_override=settings)
    with TestClient(app) as client:
        history = client.get("/history/EUR").json()["history"]
    assert [p["rate_to_usd"] for p in history] == [pytest.approx(0.92), pytest.approx(0.93)]


def test_currencies(client):
    resp = client.get("/currencies")
    assert resp.status_code == 200
    codes = [c["code"] for c in resp.json()["currencies"]]
    assert codes == ["USD", "EUR", "GBP", "JPY", "CAD", "AUD", "INR", "PHP", "THB", "VND"]
    assert resp.json()["currencies"][0] == {"code": "USD", "name": "US Dollar"}


def test_unknown_route(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_live_provider_rate_used(app, client):
    transport = httpx.MockTransport(
        lambda r: httpx.Response(
            200, json={"result": "success", "conversion_rates": {"EUR": 0.91}}
        )
    )
    resolver = RateResolver(
        RateResolverConfig(provider_api_key="k"), store=app.state.db, transport=transport
    )
    app.dependency_overrides[get_conversion_handler] = lambda: ConversionHandler(resolver)
    resp = client.post("/convert", json={"amount": 100, "from": "USD", "to": "EUR"})
    assert resp.json()["result"] == 91.0
    assert resp.json()["rate"] == 0.91


def test_provider_outage_is_invisible(app, client):
    def down(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    resolver = RateResolver(
        RateResolverConfig(provider_api_key="k"),
        store=app.state.db,
        transport=httpx.MockTransport(down),
    )
    app.dependency_overrides[get_conversion_handler] = lambda: ConversionHandler(resolver)
    resp = client.post("/convert", json={"amount": 100, "from": "USD", "to": "EUR"})
    assert resp.status_code == 200
    assert resp.json()["result"] == 92.0


def test_history_failure_keeps_200(app, client):
    handler = ConversionHandler(
        RateResolver(RateResolverConfig()), HistoryRecorder(FailingHistoryStore())
    )
    app.dependency_overrides[get_conversion_handler] = lambda: handler
    resp = client.post("/convert", json={"amount": 100, "from": "USD", "to": "EUR"})
    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "result": 92.0,
        "rate": pytest.approx(0.92),
        "message": "Conversion successful",
    }


def test_internal_error_returns_500(app, client):
    app.dependency_overrides[get_conversion_handler] = lambda: ConversionHandler(
        BrokenResolver()
    )
    resp = client.post("/convert", json={"amount": 100, "from": "USD", "to": "EUR"})
    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "message": "Internal server error",
        "error": "float division by zero",
    }
