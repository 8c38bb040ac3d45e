from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from threadcycle.api.errors import ApiError
from threadcycle.api.routes_public_parts.common import _executor, _mode
from threadcycle.api.schemas import ChainAdvanceRequest

router = APIRouter()

Json = Dict[str, Any]


@router.get("/chain/height")
def chain_height(request: Request) -> Json:
    ex = _executor(request)
    return {"ok": True, "chain_id": ex.chain_id, "height": ex.height}


@router.post("/chain/advance")
def chain_advance(body: ChainAdvanceRequest, request: Request) -> Json:
    """Move the block-height clock forward.

    Dev/testnet only: in prod the host environment owns the clock.
    """
    ex = _executor(request)
    if _mode(request) == "prod":
        raise ApiError.forbidden("forbidden", "height clock is host-controlled in prod", {})
    return {"ok": True, "height": ex.advance(body.blocks)}
