# src/fairmint/api/routes_public_parts/metrics.py
from __future__ import annotations

from fastapi import APIRouter, Request, Response

from fairmint.runtime.metrics import format_prometheus, metrics_enabled, set_gauge

router = APIRouter()


def _refresh_app_gauges(request: Request) -> None:
    """Gauges read from app state at scrape time rather than on every request."""
    state = request.app.state
    set_gauge("integrity_failures", len(getattr(state, "integrity_failures", []) or []))

    ix = getattr(state, "indexer", None)
    set_gauge("indexer_attached", 1 if ix is not None else 0)
    if ix is not None:
        tip = int(ix.current_height())
        synced = int(getattr(ix, "synced_height", tip))
        set_gauge("indexer_height", tip)
        set_gauge("indexer_synced_height", synced)
        set_gauge("indexer_lag_blocks", max(0, tip - synced))


@router.get("/metrics")
def metrics(request: Request) -> Response:
    """Prometheus text: tracker counters plus indexer and integrity gauges.

    Off unless FAIRMINT_METRICS_ENABLED=1.
    """
    if not metrics_enabled():
        return Response(status_code=404, content="not_found\n", media_type="text/plain")
    _refresh_app_gauges(request)
    return Response(content=format_prometheus(), media_type="text/plain")
