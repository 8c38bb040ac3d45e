from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from threadcycle.api.routes_public_parts.common import _executor, _not_found
from threadcycle.runtime.errors import GarmentError

router = APIRouter()

Json = Dict[str, Any]


@router.get("/garments")
def garments_summary(request: Request) -> Json:
    g = _executor(request).garments
    return {
        "ok": True,
        "admin": g.get_admin(),
        "paused": g.is_paused(),
        "provenance_contract": g.get_provenance_contract(),
        "total_minted": g.get_total_minted(),
    }


@router.get("/garments/owners/{account}")
def garments_owned(account: str, request: Request) -> Json:
    g = _executor(request).garments
    return {
        "ok": True,
        "account": account,
        "token_count": g.get_token_count(account),
        "token_ids": g.snapshot().owned_by(account),
    }


@router.get("/garments/{token_id}")
def garment_get(token_id: int, request: Request) -> Json:
    g = _executor(request).garments
    try:
        tok = g.get_token(token_id)
    except GarmentError as e:
        raise _not_found(e)
    return {"ok": True, "token_id": token_id, **tok}


@router.get("/garments/{token_id}/events")
def garment_events(token_id: int, request: Request) -> Json:
    g = _executor(request).garments
    try:
        events = g.get_lifecycle_events(token_id)
    except GarmentError as e:
        raise _not_found(e)
    items = [ev.to_json() for ev in events]
    return {"ok": True, "token_id": token_id, "count": len(items), "events": items}
