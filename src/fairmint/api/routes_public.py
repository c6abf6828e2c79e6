# src/fairmint/api/routes_public.py
from __future__ import annotations

from fastapi import APIRouter

from fairmint.api.routes_public_parts.alerts import router as alerts_router
from fairmint.api.routes_public_parts.distribution import router as distribution_router
from fairmint.api.routes_public_parts.emission import router as emission_router
from fairmint.api.routes_public_parts.health import router as health_router
from fairmint.api.routes_public_parts.metrics import router as metrics_router
from fairmint.api.routes_public_parts.participation import router as participation_router

public_router = APIRouter()

# Versioned API surface
public_router.include_router(health_router, prefix="/v1", tags=["health"])
public_router.include_router(emission_router, prefix="/v1", tags=["emission"])
public_router.include_router(participation_router, prefix="/v1", tags=["participation"])
public_router.include_router(distribution_router, prefix="/v1", tags=["distribution"])
public_router.include_router(alerts_router, prefix="/v1", tags=["alerts"])

# Ops
public_router.include_router(metrics_router, prefix="/v1", tags=["metrics"])
