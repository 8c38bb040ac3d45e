from __future__ import annotations

from dataclasses import dataclass, field
import copy
from typing import Any, Dict, List, Optional


Json = Dict[str, Any]


@dataclass(frozen=True, slots=True)
class RewardLedgerView:
    """
    Immutable read-only snapshot of the reward ledger.
    """

    admin: str
    paused: bool = False
    provenance_contract: Optional[str] = None
    total_supply: int = 0
    reward_per_action: int = 0
    cooldown_period: int = 0
    balances: Dict[str, int] = field(default_factory=dict)
    last_action_height: Dict[str, int] = field(default_factory=dict)
    action_count: Dict[str, int] = field(default_factory=dict)

    def balance(self, account: str) -> int:
        return int(self.balances.get(account, 0))

    def balances_total(self) -> int:
        return sum(int(v) for v in self.balances.values())

    def to_json(self) -> Json:
        return {
            "admin": self.admin,
            "paused": bool(self.paused),
            "provenance_contract": self.provenance_contract,
            "total_supply": int(self.total_supply),
            "reward_per_action": int(self.reward_per_action),
            "cooldown_period": int(self.cooldown_period),
            "balances": dict(sorted(self.balances.items())),
            "last_action_height": dict(sorted(self.last_action_height.items())),
            "action_count": dict(sorted(self.action_count.items())),
        }


@dataclass(frozen=True, slots=True)
class GarmentRegistryView:
    """
    Immutable read-only snapshot of the garment registry.

    tokens: token_id -> {"owner": ..., "metadata": ...}
    lifecycle_events: token_id -> [{"event_type", "height", "details"}, ...]
    """

    admin: str
    paused: bool = False
    provenance_contract: Optional[str] = None
    total_minted: int = 0
    tokens: Dict[int, Json] = field(default_factory=dict)
    lifecycle_events: Dict[int, List[Json]] = field(default_factory=dict)
    token_count: Dict[str, int] = field(default_factory=dict)

    def owned_by(self, account: str) -> List[int]:
        return sorted(tid for tid, rec in self.tokens.items() if rec.get("owner") == account)

    def to_json(self) -> Json:
        # JSON object keys must be strings; ids keep numeric order.
        return {
            "admin": self.admin,
            "paused": bool(self.paused),
            "provenance_contract": self.provenance_contract,
            "total_minted": int(self.total_minted),
            "tokens": {str(tid): copy.deepcopy(self.tokens[tid]) for tid in sorted(self.tokens)},
            "lifecycle_events": {
                str(tid): copy.deepcopy(self.lifecycle_events[tid]) for tid in sorted(self.lifecycle_events)
            },
            "token_count": dict(sorted(self.token_count.items())),
        }
