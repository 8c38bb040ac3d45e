# src/threadcycle/runtime/access.py
from __future__ import annotations

"""Shared access policy for the reward ledger and the garment registry.

Both components hold the same three pieces of privileged state (admin,
paused flag, provenance contract) and gate their operations with the same
predicates. Each `require_*` check is side-effect free and raises on the
first failure, so callers compose them in the order their operation needs.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from threadcycle.ledger.constants import ZERO_ADDRESS
from threadcycle.runtime.errors import (
    ERR_NOT_AUTHORIZED,
    ERR_PAUSED,
    ERR_PROVENANCE_NOT_SET,
    ERR_ZERO_ADDRESS,
    ApplyError,
)

Json = Dict[str, Any]


@dataclass
class AccessPolicy:
    admin: str
    error_cls: Type[ApplyError] = ApplyError
    paused: bool = False
    provenance_contract: Optional[str] = None

    def is_admin(self, caller: str) -> bool:
        return caller == self.admin

    def require_admin(self, caller: str) -> None:
        if not self.is_admin(caller):
            raise self.error_cls(ERR_NOT_AUTHORIZED, "caller_not_admin", {"caller": caller})

    def require_not_paused(self) -> None:
        if self.paused:
            raise self.error_cls(ERR_PAUSED, "contract_paused", {})

    def require_non_zero_address(self, addr: str) -> None:
        if addr == ZERO_ADDRESS:
            raise self.error_cls(ERR_ZERO_ADDRESS, "zero_address_rejected", {"address": addr})

    def require_provenance_caller(self, caller: str) -> None:
        if self.provenance_contract is None:
            raise self.error_cls(ERR_PROVENANCE_NOT_SET, "provenance_contract_unset", {})
        if caller != self.provenance_contract:
            raise self.error_cls(
                ERR_NOT_AUTHORIZED,
                "caller_not_provenance_contract",
                {"caller": caller},
            )

    # --- admin-held configuration (allowed while paused) ---

    def set_paused(self, caller: str, flag: bool) -> bool:
        self.require_admin(caller)
        self.paused = bool(flag)
        return self.paused

    def set_provenance_contract(self, caller: str, addr: str) -> bool:
        self.require_admin(caller)
        self.require_non_zero_address(addr)
        self.provenance_contract = addr
        return True

    def transfer_admin(self, caller: str, new_admin: str) -> bool:
        self.require_admin(caller)
        self.require_non_zero_address(new_admin)
        self.admin = new_admin
        return True

    def to_json(self) -> Json:
        return {
            "admin": self.admin,
            "paused": bool(self.paused),
            "provenance_contract": self.provenance_contract,
        }


__all__ = ["AccessPolicy"]
