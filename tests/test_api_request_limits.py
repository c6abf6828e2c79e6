from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fairmint.api.app import create_app
from fairmint.api.errors import ApiError
from fairmint.runtime.errors import ConsistencyViolation, DataUnavailable, InvalidInput
from fairmint.runtime.sources import InMemoryIndexer
from fairmint.runtime.tracker_config import TrackerConfig


def _client() -> TestClient:
    return TestClient(create_app(config=TrackerConfig(), boot_runtime=False))


def test_request_too_large_returns_413(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAIRMINT_MAX_REQUEST_BYTES", "128")
    holders = [{"address": f"bc1h{i}", "balance": i} for i in range(50)]
    r = _client().post("/v1/distribution/analyze", json={"holders": holders})
    assert r.status_code == 413
    assert r.json()["error"]["code"] == "request_too_large"


def test_size_limit_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAIRMINT_MAX_REQUEST_BYTES", "128")
    monkeypatch.setenv("FAIRMINT_SIZE_LIMIT_DISABLE", "1")
    holders = [{"address": f"bc1h{i}", "balance": i} for i in range(50)]
    r = _client().post("/v1/distribution/analyze", json={"holders": holders})
    assert r.status_code == 200


def test_metrics_disabled_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FAIRMINT_METRICS_ENABLED", raising=False)
    assert _client().get("/v1/metrics").status_code == 404


def test_metrics_exposes_counters_when_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAIRMINT_METRICS_ENABLED", "1")
    c = _client()
    c.get("/v1/emission/stats")  # 503: no indexer attached
    r = c.get("/v1/metrics")
    assert r.status_code == 200
    assert "fairmint_uptime_ms" in r.text


def test_tracker_errors_map_to_status_codes() -> None:
    assert ApiError.from_tracker_error(InvalidInput("invalid_height", "x")).status_code == 400
    assert ApiError.from_tracker_error(DataUnavailable("claimants_unavailable", "x")).status_code == 503
    assert ApiError.from_tracker_error(ConsistencyViolation("supply", "x")).status_code == 500


def test_error_body_shape() -> None:
    err = ApiError.from_tracker_error(InvalidInput("invalid_amount", "amount_must_be_non_negative", {"amount": "-1"}))
    assert err.to_json() == {
        "ok": False,
        "error": {"code": "invalid_amount", "message": "amount_must_be_non_negative", "details": {"amount": "-1"}},
    }


def test_metrics_reports_indexer_and_integrity_gauges(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAIRMINT_METRICS_ENABLED", "1")
    ix = InMemoryIndexer(height=850_010, synced_height=850_004)
    c = TestClient(create_app(config=TrackerConfig(), indexer=ix, boot_runtime=False))
    text = c.get("/v1/metrics").text
    assert "fairmint_indexer_height 850010" in text
    assert "fairmint_indexer_synced_height 850004" in text
    assert "fairmint_indexer_lag_blocks 6" in text
    assert "fairmint_integrity_failures 0" in text
