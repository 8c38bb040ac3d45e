# src/threadcycle/api/routes_public.py
from __future__ import annotations

from fastapi import APIRouter

from threadcycle.api.routes_public_parts.chain import router as chain_router
from threadcycle.api.routes_public_parts.garments import router as garments_router
from threadcycle.api.routes_public_parts.health import router as health_router
from threadcycle.api.routes_public_parts.metrics import router as metrics_router
from threadcycle.api.routes_public_parts.rewards import router as rewards_router
from threadcycle.api.routes_public_parts.tx import router as tx_router

public_router = APIRouter()

public_router.include_router(health_router, prefix="", tags=["health"])
public_router.include_router(tx_router, prefix="/v1", tags=["tx"])
public_router.include_router(rewards_router, prefix="/v1", tags=["rewards"])
public_router.include_router(garments_router, prefix="/v1", tags=["garments"])
public_router.include_router(chain_router, prefix="/v1", tags=["chain"])

# Ops
public_router.include_router(metrics_router, prefix="/v1", tags=["metrics"])
