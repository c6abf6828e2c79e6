# src/fairmint/api/routes_public_parts/distribution.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Request

from fairmint.api.routes_public_parts.common import Json, _analyzer, _indexer
from fairmint.api.schemas import DistributionAnalyzeRequest, ParticipantHistoryRequest
from fairmint.runtime.sources import parse_balance_entries

router = APIRouter()


@router.get("/distribution")
def distribution(request: Request, scope: Optional[str] = Query(default=None)) -> Json:
    """Metrics over the indexer's balance snapshot (no Gini history)."""
    holders = _indexer(request).balances(scope)
    report, _ = _analyzer(request).distribution_report(holders)
    return {"ok": True, "data": report.to_json()}


@router.post("/distribution/analyze")
def distribution_analyze(request: Request, body: DistributionAnalyzeRequest) -> Json:
    holders = parse_balance_entries(h.model_dump() for h in body.holders)
    report, history = _analyzer(request).distribution_report(
        holders,
        body.gini_history,
        window=body.window,
        periods=body.periods,
    )
    return {"ok": True, "data": report.to_json(), "gini_history": history}


@router.post("/distribution/participants")
def distribution_participants(request: Request, body: ParticipantHistoryRequest) -> Json:
    analysis = _analyzer(request).analyze_participant_history(body.addresses, set(body.known))
    return {
        "ok": True,
        "data": analysis.to_json(),
        "known": sorted(analysis.known_participants),
    }
