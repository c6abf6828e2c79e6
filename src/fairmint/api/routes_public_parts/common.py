# src/fairmint/api/routes_public_parts/common.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request

from fairmint.api.errors import ApiError
from fairmint.ledger.distribution import DistributionAnalyzer
from fairmint.ledger.emission import EmissionSchedule
from fairmint.runtime.participation import ParticipationTracker
from fairmint.runtime.tracker_config import TrackerConfig

Json = Dict[str, Any]


def _cfg(request: Request) -> TrackerConfig:
    return request.app.state.cfg


def _schedule(request: Request) -> EmissionSchedule:
    return request.app.state.schedule


def _tracker(request: Request) -> ParticipationTracker:
    return request.app.state.tracker


def _analyzer(request: Request) -> DistributionAnalyzer:
    return request.app.state.analyzer


def _indexer(request: Request):
    ix = getattr(request.app.state, "indexer", None)
    if ix is None:
        raise ApiError.unavailable("indexer_not_attached", "no indexer snapshot is loaded", {})
    return ix


def _height_or_current(request: Request, height: Optional[int]) -> int:
    """Explicit ?height= wins; otherwise ask the indexer."""
    if height is not None:
        return int(height)
    return int(_indexer(request).current_height())
