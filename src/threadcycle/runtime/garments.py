# src/threadcycle/runtime/garments.py
from __future__ import annotations

"""
Garment registry state transitions.

Non-fungible garments keyed by a sequential id (starting at 1, never reused),
each with an owner, mutable metadata, and a bounded append-only lifecycle log
written only by the provenance contract.

Same contract as the reward ledger: all checks run before any effect, and
the raised GarmentError names the first failing check.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from threadcycle.ledger.constants import (
    LIFECYCLE_EVENT_TYPES,
    MAX_LIFECYCLE_EVENTS,
    MAX_NFTS,
    MAX_TEXT_LEN,
    MIN_TEXT_LEN,
)
from threadcycle.ledger.state import GarmentRegistryView
from threadcycle.runtime.access import AccessPolicy
from threadcycle.runtime.errors import (
    ERR_EVENT_LOG_FULL,
    ERR_ID_SPACE_EXHAUSTED,
    ERR_INVALID_EVENT,
    ERR_INVALID_METADATA,
    ERR_NO_SUCH_TOKEN,
    ERR_NOT_OWNER,
    GarmentError,
)
from threadcycle.runtime.ledger_logging import log_event

Json = Dict[str, Any]

log = logging.getLogger("threadcycle.garments")


@dataclass(frozen=True, slots=True)
class LifecycleEvent:
    event_type: str
    height: int
    details: str

    def to_json(self) -> Json:
        return {"event_type": self.event_type, "height": int(self.height), "details": self.details}


class LifecycleLog:
    """Fixed-capacity, insertion-ordered event log for one garment."""

    __slots__ = ("capacity", "_events")

    def __init__(self, capacity: int = MAX_LIFECYCLE_EVENTS) -> None:
        self.capacity = int(capacity)
        self._events: List[LifecycleEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    def is_full(self) -> bool:
        return len(self._events) >= self.capacity

    def append(self, event: LifecycleEvent) -> None:
        if self.is_full():
            raise OverflowError(f"lifecycle log full ({self.capacity} events)")
        self._events.append(event)

    def events(self) -> Tuple[LifecycleEvent, ...]:
        return tuple(self._events)


@dataclass(slots=True)
class Garment:
    owner: str
    metadata: str

    def to_json(self) -> Json:
        return {"owner": self.owner, "metadata": self.metadata}


def _require_text(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not (MIN_TEXT_LEN <= len(value) <= MAX_TEXT_LEN):
        raise GarmentError(
            ERR_INVALID_METADATA,
            f"{field}_length_out_of_range",
            {"field": field, "length": len(value) if isinstance(value, str) else None, "max": MAX_TEXT_LEN},
        )
    return value


class GarmentRegistry:
    """Sequential-id garment NFTs with per-garment lifecycle logs."""

    def __init__(self, admin: str) -> None:
        self.policy = AccessPolicy(admin=admin, error_cls=GarmentError)
        self._lock = threading.RLock()

        self._tokens: Dict[int, Garment] = {}
        self._events: Dict[int, LifecycleLog] = {}
        self._token_count: Dict[str, int] = {}
        # Monotonic; next id is always total_minted + 1, independent of len(_tokens)
        self._total_minted = 0

    # ------------------------------------------------------------------
    # Admin configuration
    # ------------------------------------------------------------------

    def set_paused(self, caller: str, flag: bool) -> bool:
        with self._lock:
            out = self.policy.set_paused(caller, flag)
            log_event(log, "garment_paused_set", paused=out)
            return out

    def set_provenance_contract(self, caller: str, addr: str) -> bool:
        with self._lock:
            self.policy.set_provenance_contract(caller, addr)
            log_event(log, "garment_provenance_set", contract=addr)
            return True

    def transfer_admin(self, caller: str, new_admin: str) -> bool:
        with self._lock:
            self.policy.transfer_admin(caller, new_admin)
            log_event(log, "garment_admin_transferred", old_admin=caller, new_admin=new_admin)
            return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_token(self, token_id: Any) -> Garment:
        g = self._tokens.get(token_id) if isinstance(token_id, int) and not isinstance(token_id, bool) else None
        if g is None:
            raise GarmentError(ERR_NO_SUCH_TOKEN, "token_not_found", {"token_id": token_id})
        return g

    def _bump_count(self, account: str, delta: int) -> None:
        n = self._token_count.get(account, 0) + delta
        if n:
            self._token_count[account] = n
        else:
            self._token_count.pop(account, None)

    # ------------------------------------------------------------------
    # Token lifecycle
    # ------------------------------------------------------------------

    def mint(self, caller: str, recipient: str, metadata: str) -> int:
        with self._lock:
            self.policy.require_admin(caller)
            self.policy.require_non_zero_address(recipient)
            meta = _require_text(metadata, field="metadata")
            self.policy.require_not_paused()
            token_id = self._total_minted + 1
            if token_id > MAX_NFTS:
                raise GarmentError(ERR_ID_SPACE_EXHAUSTED, "max_nfts_reached", {"max_nfts": MAX_NFTS})

            self._tokens[token_id] = Garment(owner=recipient, metadata=meta)
            self._bump_count(recipient, 1)
            self._total_minted = token_id
            log_event(log, "garment_mint", token_id=token_id, recipient=recipient)
            return token_id

    def transfer(self, caller: str, token_id: int, recipient: str) -> bool:
        with self._lock:
            self.policy.require_not_paused()
            self.policy.require_non_zero_address(recipient)
            g = self._require_token(token_id)
            if g.owner != caller:
                raise GarmentError(ERR_NOT_OWNER, "caller_not_owner", {"token_id": token_id, "caller": caller})

            g.owner = recipient
            self._bump_count(caller, -1)
            self._bump_count(recipient, 1)
            log_event(log, "garment_transfer", token_id=token_id, sender=caller, recipient=recipient)
            return True

    def update_metadata(self, caller: str, token_id: int, metadata: str) -> bool:
        with self._lock:
            self.policy.require_admin(caller)
            meta = _require_text(metadata, field="metadata")
            g = self._require_token(token_id)

            g.metadata = meta
            log_event(log, "garment_metadata_updated", token_id=token_id)
            return True

    def add_lifecycle_event(
        self,
        caller: str,
        token_id: int,
        event_type: str,
        details: str,
        *,
        height: int,
    ) -> bool:
        with self._lock:
            self.policy.require_provenance_caller(caller)
            if event_type not in LIFECYCLE_EVENT_TYPES:
                raise GarmentError(ERR_INVALID_EVENT, "unknown_event_type", {"event_type": event_type})
            text = _require_text(details, field="details")
            self._require_token(token_id)
            evlog = self._events.get(token_id)
            if evlog is not None and evlog.is_full():
                raise GarmentError(
                    ERR_EVENT_LOG_FULL,
                    "lifecycle_log_full",
                    {"token_id": token_id, "capacity": evlog.capacity},
                )

            if evlog is None:
                evlog = LifecycleLog()
                self._events[token_id] = evlog
            evlog.append(LifecycleEvent(event_type=event_type, height=int(height), details=text))
            log_event(
                log,
                "garment_lifecycle_event",
                token_id=token_id,
                event_type=event_type,
                height=int(height),
                count=len(evlog),
            )
            return True

    def burn(self, caller: str, token_id: int) -> bool:
        with self._lock:
            self.policy.require_admin(caller)
            g = self._require_token(token_id)

            self._bump_count(g.owner, -1)
            del self._tokens[token_id]
            self._events.pop(token_id, None)
            log_event(log, "garment_burn", token_id=token_id, owner=g.owner)
            return True

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def get_token(self, token_id: int) -> Json:
        with self._lock:
            return self._require_token(token_id).to_json()

    def get_owner(self, token_id: int) -> str:
        with self._lock:
            return self._require_token(token_id).owner

    def get_metadata(self, token_id: int) -> str:
        with self._lock:
            return self._require_token(token_id).metadata

    def get_lifecycle_events(self, token_id: int) -> List[LifecycleEvent]:
        with self._lock:
            self._require_token(token_id)
            evlog = self._events.get(token_id)
            return list(evlog.events()) if evlog is not None else []

    def get_total_minted(self) -> int:
        with self._lock:
            return self._total_minted

    def get_token_count(self, account: str) -> int:
        with self._lock:
            return self._token_count.get(account, 0)

    def get_admin(self) -> str:
        with self._lock:
            return self.policy.admin

    def is_paused(self) -> bool:
        with self._lock:
            return self.policy.paused

    def get_provenance_contract(self) -> Optional[str]:
        with self._lock:
            return self.policy.provenance_contract

    def snapshot(self) -> GarmentRegistryView:
        with self._lock:
            return GarmentRegistryView(
                admin=self.policy.admin,
                paused=self.policy.paused,
                provenance_contract=self.policy.provenance_contract,
                total_minted=self._total_minted,
                tokens={tid: g.to_json() for tid, g in self._tokens.items()},
                lifecycle_events={
                    tid: [e.to_json() for e in evlog.events()] for tid, evlog in self._events.items()
                },
                token_count=dict(self._token_count),
            )


__all__ = ["GarmentRegistry", "LifecycleEvent", "LifecycleLog"]
