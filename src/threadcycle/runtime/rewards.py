# src/threadcycle/runtime/rewards.py
from __future__ import annotations

"""
Reward ledger state transitions.

This module implements the fungible reward token:
- admin-gated configuration (pause, provenance contract, reward rate, cooldown)
- admin mint under a hard supply cap
- holder transfer / burn
- cooldown-gated reward issuance, callable only by the provenance contract

Every operation either passes all of its checks and commits every effect, or
raises a RewardError before touching state. Check order is part of the
observable contract: the raised code identifies the first failing check.
"""

import logging
import threading
from typing import Any, Dict, Optional

from threadcycle.ledger.constants import (
    DEFAULT_COOLDOWN_BLOCKS,
    DEFAULT_REWARD_PER_ACTION,
    MAX_SUPPLY,
    REWARDABLE_ACTIONS,
)
from threadcycle.ledger.state import RewardLedgerView
from threadcycle.runtime.access import AccessPolicy
from threadcycle.runtime.errors import (
    ERR_COOLDOWN_ACTIVE,
    ERR_INSUFFICIENT_BALANCE,
    ERR_INVALID_AMOUNT,
    ERR_INVALID_EVENT,
    ERR_MAX_SUPPLY_REACHED,
    RewardError,
)
from threadcycle.runtime.ledger_logging import log_event

log = logging.getLogger("threadcycle.rewards")


def _is_uint(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v >= 0


def _require_positive_amount(amount: Any, *, field: str = "amount") -> int:
    if not _is_uint(amount) or amount <= 0:
        raise RewardError(ERR_INVALID_AMOUNT, f"{field}_must_be_positive", {field: amount})
    return int(amount)


class RewardLedger:
    """Capped fungible reward token with a per-account cooldown gate."""

    def __init__(
        self,
        admin: str,
        *,
        reward_per_action: int = DEFAULT_REWARD_PER_ACTION,
        cooldown_period: int = DEFAULT_COOLDOWN_BLOCKS,
    ) -> None:
        if not _is_uint(reward_per_action) or reward_per_action <= 0:
            raise ValueError(f"reward_per_action must be > 0; got: {reward_per_action!r}")
        if not _is_uint(cooldown_period) or cooldown_period <= 0:
            raise ValueError(f"cooldown_period must be > 0; got: {cooldown_period!r}")

        self.policy = AccessPolicy(admin=admin, error_cls=RewardError)
        self._lock = threading.RLock()

        self._balances: Dict[str, int] = {}
        self._total_supply = 0
        self._reward_per_action = int(reward_per_action)
        self._cooldown_period = int(cooldown_period)

        # Per-account bookkeeping, written only by reward_action
        self._last_action_height: Dict[str, int] = {}
        self._action_count: Dict[str, int] = {}

    # ------------------------------------------------------------------
    # Admin configuration
    # ------------------------------------------------------------------

    def set_paused(self, caller: str, flag: bool) -> bool:
        with self._lock:
            out = self.policy.set_paused(caller, flag)
            log_event(log, "reward_paused_set", paused=out)
            return out

    def set_provenance_contract(self, caller: str, addr: str) -> bool:
        with self._lock:
            self.policy.set_provenance_contract(caller, addr)
            log_event(log, "reward_provenance_set", contract=addr)
            return True

    def transfer_admin(self, caller: str, new_admin: str) -> bool:
        with self._lock:
            self.policy.transfer_admin(caller, new_admin)
            log_event(log, "reward_admin_transferred", old_admin=caller, new_admin=new_admin)
            return True

    def set_reward_per_action(self, caller: str, amount: int) -> bool:
        with self._lock:
            self.policy.require_admin(caller)
            amt = _require_positive_amount(amount)
            self._reward_per_action = amt
            log_event(log, "reward_rate_set", reward_per_action=amt)
            return True

    def set_cooldown_period(self, caller: str, blocks: int) -> bool:
        with self._lock:
            self.policy.require_admin(caller)
            n = _require_positive_amount(blocks, field="blocks")
            self._cooldown_period = n
            log_event(log, "reward_cooldown_set", cooldown_period=n)
            return True

    # ------------------------------------------------------------------
    # Supply
    # ------------------------------------------------------------------

    def _require_supply_room(self, amount: int) -> None:
        if self._total_supply + amount > MAX_SUPPLY:
            raise RewardError(
                ERR_MAX_SUPPLY_REACHED,
                "max_supply_exceeded",
                {"total_supply": self._total_supply, "amount": amount, "max_supply": MAX_SUPPLY},
            )

    def _credit(self, account: str, amount: int) -> None:
        self._balances[account] = self._balances.get(account, 0) + amount

    def _debit(self, account: str, amount: int) -> None:
        bal = self._balances.get(account, 0) - amount
        if bal:
            self._balances[account] = bal
        else:
            self._balances.pop(account, None)

    def _require_balance(self, account: str, amount: int) -> None:
        bal = self._balances.get(account, 0)
        if bal < amount:
            raise RewardError(
                ERR_INSUFFICIENT_BALANCE,
                "insufficient_funds",
                {"account": account, "balance": bal, "amount": amount},
            )

    def mint(self, caller: str, recipient: str, amount: int) -> bool:
        with self._lock:
            self.policy.require_admin(caller)
            self.policy.require_non_zero_address(recipient)
            amt = _require_positive_amount(amount)
            self._require_supply_room(amt)

            self._credit(recipient, amt)
            self._total_supply += amt
            log_event(log, "reward_mint", recipient=recipient, amount=amt, total_supply=self._total_supply)
            return True

    def transfer(self, caller: str, recipient: str, amount: int) -> bool:
        with self._lock:
            self.policy.require_not_paused()
            self.policy.require_non_zero_address(recipient)
            amt = _require_positive_amount(amount)
            self._require_balance(caller, amt)

            self._debit(caller, amt)
            self._credit(recipient, amt)
            log_event(log, "reward_transfer", sender=caller, recipient=recipient, amount=amt)
            return True

    def burn(self, caller: str, amount: int) -> bool:
        with self._lock:
            self.policy.require_not_paused()
            amt = _require_positive_amount(amount)
            self._require_balance(caller, amt)

            self._debit(caller, amt)
            self._total_supply -= amt
            log_event(log, "reward_burn", account=caller, amount=amt, total_supply=self._total_supply)
            return True

    # ------------------------------------------------------------------
    # Provenance-triggered rewards
    # ------------------------------------------------------------------

    def is_cooldown_expired(self, user: str, height: int) -> bool:
        """True when `user` may be rewarded at block `height`.

        A user who never acted is always eligible; otherwise at least
        `cooldown_period` blocks must have elapsed since the last reward.
        """
        with self._lock:
            last = self._last_action_height.get(user)
            if last is None:
                return True
            return int(height) - last >= self._cooldown_period

    def reward_action(self, caller: str, user: str, action_type: str, *, height: int) -> int:
        with self._lock:
            self.policy.require_provenance_caller(caller)
            if action_type not in REWARDABLE_ACTIONS:
                raise RewardError(ERR_INVALID_EVENT, "unknown_action_type", {"action_type": action_type})
            if not self.is_cooldown_expired(user, height):
                raise RewardError(
                    ERR_COOLDOWN_ACTIVE,
                    "cooldown_not_elapsed",
                    {
                        "user": user,
                        "height": int(height),
                        "last_action_height": self._last_action_height.get(user),
                        "cooldown_period": self._cooldown_period,
                    },
                )
            self.policy.require_not_paused()
            reward = self._reward_per_action
            self._require_supply_room(reward)

            self._credit(user, reward)
            self._last_action_height[user] = int(height)
            self._action_count[user] = self._action_count.get(user, 0) + 1
            self._total_supply += reward
            log_event(
                log,
                "reward_action",
                user=user,
                action_type=action_type,
                height=int(height),
                reward=reward,
                total_supply=self._total_supply,
            )
            return reward

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def get_balance(self, account: str) -> int:
        with self._lock:
            return self._balances.get(account, 0)

    def get_total_supply(self) -> int:
        with self._lock:
            return self._total_supply

    def get_admin(self) -> str:
        with self._lock:
            return self.policy.admin

    def is_paused(self) -> bool:
        with self._lock:
            return self.policy.paused

    def get_provenance_contract(self) -> Optional[str]:
        with self._lock:
            return self.policy.provenance_contract

    def get_reward_per_action(self) -> int:
        with self._lock:
            return self._reward_per_action

    def get_cooldown_period(self) -> int:
        with self._lock:
            return self._cooldown_period

    def get_action_count(self, account: str) -> int:
        with self._lock:
            return self._action_count.get(account, 0)

    def get_last_action_height(self, account: str) -> Optional[int]:
        """Height of the last rewarded action, or None if the account never acted."""
        with self._lock:
            return self._last_action_height.get(account)

    def snapshot(self) -> RewardLedgerView:
        with self._lock:
            return RewardLedgerView(
                admin=self.policy.admin,
                paused=self.policy.paused,
                provenance_contract=self.policy.provenance_contract,
                total_supply=self._total_supply,
                reward_per_action=self._reward_per_action,
                cooldown_period=self._cooldown_period,
                balances=dict(self._balances),
                last_action_height=dict(self._last_action_height),
                action_count=dict(self._action_count),
            )


__all__ = ["RewardLedger"]
