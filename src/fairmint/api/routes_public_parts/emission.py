# src/fairmint/api/routes_public_parts/emission.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Request

from fairmint.api.routes_public_parts.common import Json, _height_or_current, _schedule
from fairmint.ledger.amounts import to_decimal_string

router = APIRouter()


@router.get("/emission/stats")
def emission_stats(request: Request, height: Optional[int] = Query(default=None, ge=0)) -> Json:
    """Supply summary at `height` (default: indexer's current height)."""
    h = _height_or_current(request, height)
    return {"ok": True, "data": _schedule(request).supply_summary(h).to_json()}


@router.get("/emission/reward/{height}")
def emission_reward(request: Request, height: int) -> Json:
    sched = _schedule(request)
    return {
        "ok": True,
        "data": {
            "height": height,
            "epoch": sched.halving_epoch(height),
            "reward": to_decimal_string(sched.block_reward(height)),
            "cumulative_emission": to_decimal_string(sched.cumulative_emission(height)),
        },
    }


@router.get("/emission/schedule")
def emission_schedule(request: Request, max_epochs: int = Query(default=32, ge=1, le=256)) -> Json:
    table = _schedule(request).emission_schedule_table(max_epochs)
    return {"ok": True, "data": [e.to_json() for e in table]}


@router.get("/emission/halvings")
def emission_halvings(
    request: Request,
    height: Optional[int] = Query(default=None, ge=0),
    max_halvings: int = Query(default=10, ge=1, le=64),
) -> Json:
    h = _height_or_current(request, height)
    events = _schedule(request).halving_events(h, max_halvings)
    return {"ok": True, "data": {"current_height": h, "events": [e.to_json() for e in events]}}


@router.get("/emission/projection")
def emission_projection(
    request: Request,
    height: Optional[int] = Query(default=None, ge=0),
    months: int = Query(default=12, ge=0, le=240),
) -> Json:
    """Month-by-month supply estimate. Approximate; for display only."""
    h = _height_or_current(request, height)
    rows = _schedule(request).project_supply(h, months)
    return {"ok": True, "data": {"current_height": h, "approximate": True, "projection": [r.to_json() for r in rows]}}
