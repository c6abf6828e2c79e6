# src/fairmint/api/routes_public_parts/participation.py
from __future__ import annotations

from fastapi import APIRouter, Query, Request

from fairmint.api.errors import ApiError
from fairmint.api.routes_public_parts.common import Json, _cfg, _indexer, _tracker
from fairmint.ledger.amounts import to_decimal_string
from fairmint.runtime.sources import collect_claimants

router = APIRouter()


@router.get("/participation/current")
def participation_current(request: Request) -> Json:
    ix = _indexer(request)
    snap = _tracker(request).current_snapshot(ix, ix)
    return {"ok": True, "data": snap.to_json()}


@router.get("/participation/trend")
def participation_trend(
    request: Request,
    start: int = Query(..., ge=0),
    end: int = Query(..., ge=0),
) -> Json:
    if end < start:
        raise ApiError.bad_request("invalid_range", "end must be >= start", {"start": start, "end": end})
    limit = int(_cfg(request).max_trend_range)
    if end - start + 1 > limit:
        raise ApiError.bad_request("range_too_large", "height range exceeds max_trend_range", {"limit": limit})

    by_height = collect_claimants(_indexer(request), start, end)
    trend = _tracker(request).trend(start, end, by_height)
    return {"ok": True, "data": trend.to_json()}


@router.get("/participation/{height}")
def participation_at(request: Request, height: int, include_claimants: bool = False) -> Json:
    claimants = _indexer(request).claimants_at(height)
    snap = _tracker(request).snapshot_for_block(height, claimants)
    data = snap.to_json()
    if include_claimants:
        data["claimants"] = [c.to_json() for c in claimants]
    return {"ok": True, "data": data}


@router.get("/participation/{height}/treasury")
def participation_treasury(request: Request, height: int) -> Json:
    claimants = _indexer(request).claimants_at(height)
    amount = _tracker(request).treasury_contribution(height, claimants)
    return {"ok": True, "data": {"height": height, "treasury_contribution": to_decimal_string(amount)}}
