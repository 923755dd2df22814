"""Tests for the FastAPI service."""

from fastapi.testclient import TestClient
from prometheus_client import CONTENT_TYPE_LATEST

import cspi.web.main as web_main
from cspi.web.app import create_app


def test_app_metadata():
    app = create_app()
    assert app.title == "cspi - Bitcoin composite sentiment index"


def test_health_before_first_cycle(stub_engine_factory):
    with TestClient(create_app(stub_engine_factory())) as client:
        response = client.get("/health", headers={"X-Request-ID": "req-1"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["request_id"] == "req-1"
    assert body["data"]["status"] == "ok"
    assert body["data"]["last_update"] is None
    assert body["data"]["collecting"] is False


def test_refresh_then_snapshot(stub_engine_factory):
    with TestClient(create_app(stub_engine_factory())) as client:
        refreshed = client.post("/refresh")
        snapshot = client.get("/snapshot")
        health = client.get("/health")

    assert refreshed.status_code == 200
    refresh_body = refreshed.json()
    assert refresh_body["success"] is True
    assert refresh_body["data"]["breakdown"]["valid_data_count"] == 3
    assert refresh_body["data"]["outcomes"]["rsi"]["ok"] is False
    assert refresh_body["data"]["sell_signals"]["stage_1"]["active"] is False

    data = snapshot.json()["data"]
    assert data["cspi_score"] == 36.4
    assert data["cspi_level"] == "PARTIAL"
    assert data["mvrv_z_score"] == 2.4
    assert data["timestamp"] is not None
    assert health.json()["data"]["cspi_level"] == "PARTIAL"


def test_refresh_failure_is_reported(stub_engine_factory):
    with TestClient(create_app(stub_engine_factory(mvrv=RuntimeError("boom")))) as client:
        response = client.post("/refresh")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "boom"


def test_probe_indicator(stub_engine_factory):
    with TestClient(create_app(stub_engine_factory())) as client:
        scalar = client.get("/indicators/kimchi_premium")
        structured = client.get("/indicators/fear_greed")
        unavailable = client.get("/indicators/btc_dominance")
        unknown = client.get("/indicators/hash_ribbons")

    assert scalar.json()["data"] == {"indicator": "kimchi_premium", "value": 2.0}
    assert structured.json()["data"]["value"] == {"value": 60, "classification": "Greed"}
    assert unavailable.status_code == 200
    assert unavailable.json()["success"] is False
    assert unknown.status_code == 404
    assert unknown.json()["error"] == "HTTPException"
    assert "hash_ribbons" in unknown.json()["message"]


def test_metrics_endpoint_exposes_prometheus_payload(stub_engine_factory, metrics):
    with TestClient(create_app(stub_engine_factory())) as client:
        client.post("/refresh")
        response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"] == CONTENT_TYPE_LATEST
    assert "cspi_cycles_total" in response.text
    assert 'cspi_indicator_outcomes_total{indicator="mvrv",outcome="success"} 1.0' in response.text


def test_launcher_installs_logging_from_settings(monkeypatch, tmp_path):
    calls: dict[str, object] = {}
    monkeypatch.setenv("CSPI_LOGGING_LEVEL", "DEBUG")
    monkeypatch.setenv("CSPI_LOGGING_FILE", str(tmp_path / "web.jsonl"))
    monkeypatch.setenv("CSPI_PORT", "8123")
    monkeypatch.setattr(web_main, "configure_logging_from_settings", lambda settings: calls.update(logging=settings))
    monkeypatch.setattr(web_main.uvicorn, "run", lambda app, **kwargs: calls.update(app=app, **kwargs))

    web_main.cspi_web_main()

    assert calls["logging"].level == "DEBUG"
    assert calls["logging"].file == str(tmp_path / "web.jsonl")
    assert calls["app"] == "cspi.web.app:app"
    assert calls["port"] == 8123
    assert calls["log_level"] == "debug"
