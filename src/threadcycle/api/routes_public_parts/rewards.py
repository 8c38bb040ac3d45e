from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from threadcycle.api.routes_public_parts.common import _executor

router = APIRouter()

Json = Dict[str, Any]


@router.get("/rewards")
def rewards_summary(request: Request) -> Json:
    r = _executor(request).rewards
    return {
        "ok": True,
        "admin": r.get_admin(),
        "paused": r.is_paused(),
        "provenance_contract": r.get_provenance_contract(),
        "total_supply": r.get_total_supply(),
        "reward_per_action": r.get_reward_per_action(),
        "cooldown_period": r.get_cooldown_period(),
    }


@router.get("/rewards/balances/{account}")
def rewards_balance(account: str, request: Request) -> Json:
    r = _executor(request).rewards
    return {"ok": True, "account": account, "balance": r.get_balance(account)}


@router.get("/rewards/actions/{account}")
def rewards_actions(account: str, request: Request) -> Json:
    ex = _executor(request)
    r = ex.rewards
    return {
        "ok": True,
        "account": account,
        "action_count": r.get_action_count(account),
        "last_action_height": r.get_last_action_height(account),
        "cooldown_expired": r.is_cooldown_expired(account, ex.height),
    }
