from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

# Symbolic error codes shared by both components
ERR_NOT_AUTHORIZED = "NotAuthorized"
ERR_INSUFFICIENT_BALANCE = "InsufficientBalance"
ERR_ID_SPACE_EXHAUSTED = "IdSpaceExhausted"
ERR_NOT_OWNER = "NotOwner"
ERR_PAUSED = "Paused"
ERR_ZERO_ADDRESS = "ZeroAddress"
ERR_INVALID_AMOUNT = "InvalidAmount"
ERR_INVALID_METADATA = "InvalidMetadata"
ERR_NO_SUCH_TOKEN = "NoSuchToken"
ERR_INVALID_EVENT = "InvalidEvent"
ERR_MAX_SUPPLY_REACHED = "MaxSupplyReached"
ERR_EVENT_LOG_FULL = "EventLogFull"
ERR_COOLDOWN_ACTIVE = "CooldownActive"
ERR_PROVENANCE_NOT_SET = "ProvenanceNotSet"


@dataclass
class ApplyError(Exception):
    """Canonical error type for ledger operations and tx dispatch failures."""

    code: str
    reason: str
    details: Any | None = None

    # Numeric wire slots; component subclasses fill this in.
    NUMBERS: ClassVar[Dict[str, int]] = {}

    @property
    def number(self) -> Optional[int]:
        return self.NUMBERS.get(self.code)

    def to_json(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "number": self.number,
            "reason": self.reason,
            "details": self.details if self.details is not None else {},
        }

    def __str__(self) -> str:  # pragma: no cover
        if self.details is None:
            return f"{self.code}:{self.reason}"
        return f"{self.code}:{self.reason}:{self.details}"


@dataclass
class RewardError(ApplyError):
    NUMBERS: ClassVar[Dict[str, int]] = {
        ERR_NOT_AUTHORIZED: 100,
        ERR_INSUFFICIENT_BALANCE: 101,
        ERR_PAUSED: 104,
        ERR_ZERO_ADDRESS: 105,
        ERR_INVALID_AMOUNT: 106,
        ERR_INVALID_EVENT: 107,
        ERR_MAX_SUPPLY_REACHED: 108,
        ERR_COOLDOWN_ACTIVE: 109,
        ERR_PROVENANCE_NOT_SET: 110,
    }


@dataclass
class GarmentError(ApplyError):
    # 106/107/108 are reused with garment-specific meanings.
    NUMBERS: ClassVar[Dict[str, int]] = {
        ERR_NOT_AUTHORIZED: 100,
        ERR_ID_SPACE_EXHAUSTED: 102,
        ERR_NOT_OWNER: 103,
        ERR_PAUSED: 104,
        ERR_ZERO_ADDRESS: 105,
        ERR_INVALID_METADATA: 106,
        ERR_NO_SUCH_TOKEN: 107,
        ERR_EVENT_LOG_FULL: 108,
        ERR_INVALID_EVENT: 109,
        ERR_PROVENANCE_NOT_SET: 110,
    }


__all__ = [
    "ApplyError",
    "RewardError",
    "GarmentError",
    "ERR_NOT_AUTHORIZED",
    "ERR_INSUFFICIENT_BALANCE",
    "ERR_ID_SPACE_EXHAUSTED",
    "ERR_NOT_OWNER",
    "ERR_PAUSED",
    "ERR_ZERO_ADDRESS",
    "ERR_INVALID_AMOUNT",
    "ERR_INVALID_METADATA",
    "ERR_NO_SUCH_TOKEN",
    "ERR_INVALID_EVENT",
    "ERR_MAX_SUPPLY_REACHED",
    "ERR_EVENT_LOG_FULL",
    "ERR_COOLDOWN_ACTIVE",
    "ERR_PROVENANCE_NOT_SET",
]
