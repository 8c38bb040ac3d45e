from __future__ import annotations

import time
from typing import Any, Optional

from fastapi import APIRouter, Request

router = APIRouter()


def _now_ms() -> int:
    return int(time.time() * 1000)


def _health_payload(request: Request) -> dict[str, object]:
    # health must never crash; best-effort telemetry only
    ex: Optional[Any] = getattr(request.app.state, "executor", None)

    chain_id = getattr(ex, "chain_id", None) if ex is not None else None
    height = None
    if ex is not None:
        try:
            height = int(ex.height)
        except (AttributeError, TypeError, ValueError):
            height = None

    return {
        "ok": True,
        "service": "threadcycle-ledger",
        "version": "v1",
        "ts_ms": _now_ms(),
        "chain_id": chain_id or None,
        "height": height,
        "executor": {"attached": ex is not None},
    }


@router.get("/v1/health")
def v1_health(request: Request) -> dict[str, object]:
    return _health_payload(request)


@router.get("/healthz")
def healthz(request: Request) -> dict[str, object]:
    # Kubernetes-style alias
    return _health_payload(request)
