from __future__ import annotations

from fastapi import APIRouter, Query, Response
from fastapi.responses import JSONResponse

from threadcycle.runtime.metrics import format_prometheus, metrics_enabled, snapshot


router = APIRouter()


@router.get("/metrics")
def metrics(fmt: str = Query(default="prometheus", alias="format", pattern="^(prometheus|json)$")) -> Response:
    """Ledger tx counters (per tx_type / rejection code) and supply gauges.

    404 unless THREADCYCLE_METRICS_ENABLED=1. `?format=json` returns the raw snapshot.
    """
    if not metrics_enabled():
        return Response(status_code=404, content="not_found\n", media_type="text/plain")
    if fmt == "json":
        return JSONResponse({"ok": True, "metrics": snapshot()})
    return Response(content=format_prometheus(), media_type="text/plain")
