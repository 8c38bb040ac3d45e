# src/threadcycle/runtime/domain_dispatch.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Set

from threadcycle.runtime.errors import ApplyError
from threadcycle.runtime.garments import GarmentRegistry
from threadcycle.runtime.rewards import RewardLedger
from threadcycle.runtime.tx_types import TxEnvelope


@dataclass
class Ledgers:
    """The two components of one deployment."""

    rewards: RewardLedger
    garments: GarmentRegistry


ApplyFn = Callable[[Ledgers, TxEnvelope, int], Optional[Any]]


def _tx_type(env: TxEnvelope) -> str:
    return str(env.tx_type or "").strip().upper()


def _as_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    raise ApplyError("invalid_payload", "bad_bool", {"value": v})


def _require(env: TxEnvelope, key: str) -> Any:
    payload = env.payload if isinstance(env.payload, dict) else {}
    v = payload.get(key)
    if v is None:
        raise ApplyError("invalid_payload", f"missing_{key}", {"tx_type": env.tx_type, "missing": key})
    return v


REWARD_TX_TYPES: Set[str] = {
    "REWARD_SET_PAUSED",
    "REWARD_SET_PROVENANCE",
    "REWARD_SET_RATE",
    "REWARD_SET_COOLDOWN",
    "REWARD_TRANSFER_ADMIN",
    "REWARD_MINT",
    "REWARD_TRANSFER",
    "REWARD_ACTION",
    "REWARD_BURN",
}

GARMENT_TX_TYPES: Set[str] = {
    "GARMENT_SET_PAUSED",
    "GARMENT_SET_PROVENANCE",
    "GARMENT_TRANSFER_ADMIN",
    "GARMENT_MINT",
    "GARMENT_TRANSFER",
    "GARMENT_UPDATE_METADATA",
    "GARMENT_LIFECYCLE_EVENT",
    "GARMENT_BURN",
}

SUPPORTED_TX_TYPES: Set[str] = REWARD_TX_TYPES | GARMENT_TX_TYPES


def apply_rewards(ledgers: Ledgers, env: TxEnvelope, height: int) -> Optional[Any]:
    """
    Returns:
      - the operation's success value
      - None: tx_type not in the rewards domain
    """
    t = _tx_type(env)
    if t not in REWARD_TX_TYPES:
        return None

    r = ledgers.rewards
    signer = env.signer

    if t == "REWARD_SET_PAUSED":
        return r.set_paused(signer, _as_bool(_require(env, "paused")))

    if t == "REWARD_SET_PROVENANCE":
        return r.set_provenance_contract(signer, str(_require(env, "contract")))

    if t == "REWARD_SET_RATE":
        return r.set_reward_per_action(signer, _require(env, "amount"))

    if t == "REWARD_SET_COOLDOWN":
        return r.set_cooldown_period(signer, _require(env, "blocks"))

    if t == "REWARD_TRANSFER_ADMIN":
        return r.transfer_admin(signer, str(_require(env, "new_admin")))

    if t == "REWARD_MINT":
        return r.mint(signer, str(_require(env, "recipient")), _require(env, "amount"))

    if t == "REWARD_TRANSFER":
        return r.transfer(signer, str(_require(env, "recipient")), _require(env, "amount"))

    if t == "REWARD_ACTION":
        return r.reward_action(
            signer,
            str(_require(env, "user")),
            str(_require(env, "action_type")),
            height=height,
        )

    if t == "REWARD_BURN":
        return r.burn(signer, _require(env, "amount"))

    return None


def apply_garments(ledgers: Ledgers, env: TxEnvelope, height: int) -> Optional[Any]:
    t = _tx_type(env)
    if t not in GARMENT_TX_TYPES:
        return None

    g = ledgers.garments
    signer = env.signer

    if t == "GARMENT_SET_PAUSED":
        return g.set_paused(signer, _as_bool(_require(env, "paused")))

    if t == "GARMENT_SET_PROVENANCE":
        return g.set_provenance_contract(signer, str(_require(env, "contract")))

    if t == "GARMENT_TRANSFER_ADMIN":
        return g.transfer_admin(signer, str(_require(env, "new_admin")))

    if t == "GARMENT_MINT":
        return g.mint(signer, str(_require(env, "recipient")), _require(env, "metadata"))

    if t == "GARMENT_TRANSFER":
        return g.transfer(signer, _require(env, "token_id"), str(_require(env, "recipient")))

    if t == "GARMENT_UPDATE_METADATA":
        return g.update_metadata(signer, _require(env, "token_id"), _require(env, "metadata"))

    if t == "GARMENT_LIFECYCLE_EVENT":
        return g.add_lifecycle_event(
            signer,
            _require(env, "token_id"),
            str(_require(env, "event_type")),
            _require(env, "details"),
            height=height,
        )

    if t == "GARMENT_BURN":
        return g.burn(signer, _require(env, "token_id"))

    return None


_APPLIERS: tuple[ApplyFn, ...] = (
    apply_rewards,
    apply_garments,
)


def apply_tx(ledgers: Ledgers, env: Any, *, height: int) -> Any:
    """Dispatch a TxEnvelope to the first domain applier that claims it.

    Raises ApplyError for unknown tx types and for every rejected operation.
    """
    e = TxEnvelope.from_json(env)
    if not str(e.signer or "").strip():
        raise ApplyError("invalid_payload", "missing_signer", {"tx_type": e.tx_type})

    for fn in _APPLIERS:
        out = fn(ledgers, e, int(height))
        if out is not None:
            return out

    raise ApplyError("tx_unimplemented", "tx_type_not_implemented", {"tx_type": e.tx_type})


__all__ = [
    "GARMENT_TX_TYPES",
    "Ledgers",
    "REWARD_TX_TYPES",
    "SUPPORTED_TX_TYPES",
    "apply_tx",
]
