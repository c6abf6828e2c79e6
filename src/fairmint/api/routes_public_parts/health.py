# src/fairmint/api/routes_public_parts/health.py
from __future__ import annotations

from fastapi import APIRouter, Request

from fairmint.api.routes_public_parts.common import Json, _cfg

router = APIRouter()


@router.get("/health")
def health(request: Request) -> Json:
    """Liveness plus the startup integrity check of the emission constants."""
    failed = list(getattr(request.app.state, "integrity_failures", []) or [])
    ix = getattr(request.app.state, "indexer", None)
    return {
        "ok": not failed,
        "token_symbol": _cfg(request).token_symbol,
        "integrity_failures": failed,
        "indexer_attached": ix is not None,
        "current_height": int(ix.current_height()) if ix is not None else None,
        "synced_height": int(getattr(ix, "synced_height", 0)) if ix is not None else None,
    }
