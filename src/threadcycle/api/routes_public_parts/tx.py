from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Query, Request

from threadcycle.api.routes_public_parts.common import _executor
from threadcycle.api.schemas import TxSubmitRequest

router = APIRouter()

Json = Dict[str, Any]


@router.post("/tx")
def tx_submit(body: TxSubmitRequest, request: Request) -> Json:
    """Apply one tx envelope and return its receipt.

    Ledger rejections are part of the receipt (ok=false, error.code), not HTTP
    errors: the receipt is the response to the request.
    """
    ex = _executor(request)
    receipt = ex.submit(body.model_dump())
    return receipt.to_json()


@router.get("/tx/receipts")
def tx_receipts(request: Request, limit: int = Query(default=50, ge=0, le=1000)) -> Json:
    ex = _executor(request)
    items = [r.to_json() for r in ex.receipts(limit)]
    return {"ok": True, "count": len(items), "receipts": items}
