# src/fairmint/api/routes_public_parts/alerts.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, Request

from fairmint.api.routes_public_parts.common import Json, _analyzer, _cfg, _indexer, _schedule, _tracker
from fairmint.runtime.alerts import Alert, distribution_alerts, participation_alerts
from fairmint.runtime.errors import DataUnavailable

router = APIRouter()


@router.get("/alerts")
def alerts(request: Request, scope: Optional[str] = Query(default=None)) -> Json:
    """Alerts for the current block, plus holder concentration when balances are indexed."""
    cfg = _cfg(request)
    ix = _indexer(request)
    snap = _tracker(request).current_snapshot(ix, ix)

    out: List[Alert] = participation_alerts(snap, _schedule(request), cfg.alerts, token_symbol=cfg.token_symbol)

    balances_indexed = True
    try:
        holders = ix.balances(scope)
    except DataUnavailable:
        balances_indexed = False
    else:
        gini = _analyzer(request).gini_coefficient(h.balance for h in holders)
        out.extend(distribution_alerts(gini, cfg.alerts, height=snap.height))

    return {
        "ok": True,
        "data": {
            "alerts": [a.to_json() for a in out],
            "total_alerts": len(out),
            "current_height": snap.height,
            "balances_indexed": balances_indexed,
        },
    }
