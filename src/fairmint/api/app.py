# src/fairmint/api/app.py
from __future__ import annotations

import logging
import os
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fairmint.api.errors import ApiError
from fairmint.api.routes_public import public_router
from fairmint.api.security import RequestSizeLimitMiddleware
from fairmint.api.structured_logging import RequestLogMiddleware
from fairmint.ledger.distribution import DistributionAnalyzer
from fairmint.ledger.emission import EmissionSchedule
from fairmint.runtime.errors import TrackerError
from fairmint.runtime.participation import ParticipationTracker
from fairmint.runtime.runtime_logging import log_event
from fairmint.runtime.sources import InMemoryIndexer
from fairmint.runtime.tracker_config import TrackerConfig, load_tracker_config

log = logging.getLogger("fairmint.api")


def load_indexer(cfg: TrackerConfig) -> Optional[InMemoryIndexer]:
    """Load the indexer snapshot named by config or FAIRMINT_SNAPSHOT_PATH, if any.

    Tests monkeypatch `fairmint.api.app.load_indexer` to inject a fake.
    """
    path = os.environ.get("FAIRMINT_SNAPSHOT_PATH") or cfg.snapshot_path
    if not path:
        return None
    ix = InMemoryIndexer.load_snapshot_file(path)
    log_event(log, "indexer_snapshot_loaded", path=path, height=ix.current_height(), synced_height=ix.synced_height)
    return ix


def create_app(
    *,
    config: Optional[TrackerConfig] = None,
    indexer: Any = None,
    boot_runtime: bool = True,
) -> FastAPI:
    """Create the FastAPI application.

    The emission schedule, tracker and analyzer are built once here and kept
    on app.state; routes never construct their own.

    boot_runtime:
      - True (default): load an indexer snapshot when none is injected
      - False: no snapshot loading (unit tests / import-time validation)
    """
    cfg = config or load_tracker_config()

    schedule = EmissionSchedule(cfg.emission)
    integrity_failures = schedule.verify_integrity()

    if indexer is None and boot_runtime:
        indexer = load_indexer(cfg)

    app = FastAPI(title="fairmint", version="0.1.0")

    app.state.cfg = cfg
    app.state.schedule = schedule
    app.state.tracker = ParticipationTracker(schedule, treasury_address=cfg.treasury_address)
    app.state.analyzer = DistributionAnalyzer()
    app.state.indexer = indexer
    app.state.integrity_failures = integrity_failures

    # --- Middleware ---
    app.add_middleware(RequestSizeLimitMiddleware)
    app.add_middleware(RequestLogMiddleware)

    # --- Errors ---
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_json())

    @app.exception_handler(TrackerError)
    async def _tracker_error(request: Request, exc: TrackerError) -> JSONResponse:
        err = ApiError.from_tracker_error(exc)
        if err.status_code >= 500:
            log_event(log, "tracker_error", level=logging.WARNING, code=exc.code, reason=exc.reason, path=request.url.path)
        return JSONResponse(status_code=err.status_code, content=err.to_json())

    # --- Routers ---
    app.include_router(public_router)

    return app
