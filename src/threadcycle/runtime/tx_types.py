from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from threadcycle.runtime.errors import ApplyError


@dataclass(frozen=True)
class TxEnvelope:
    tx_type: str
    signer: str
    payload: Dict[str, Any] = field(default_factory=dict)
    nonce: int = 0

    @staticmethod
    def from_json(j: Any) -> "TxEnvelope":
        """Parse an envelope; malformed fields raise ApplyError("invalid_payload")."""
        if isinstance(j, TxEnvelope):
            return j
        if not isinstance(j, Mapping):
            raise ApplyError("invalid_payload", "bad_envelope", {"type": type(j).__name__})

        payload = j.get("payload")
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ApplyError("invalid_payload", "bad_payload", {"type": type(payload).__name__})

        nonce = j.get("nonce")
        if nonce is None:
            nonce = 0
        if isinstance(nonce, bool) or not isinstance(nonce, int) or nonce < 0:
            raise ApplyError("invalid_payload", "bad_nonce", {"nonce": repr(nonce)})

        return TxEnvelope(
            tx_type=str(j.get("tx_type") or ""),
            signer=str(j.get("signer") or ""),
            payload=dict(payload),
            nonce=nonce,
        )

    @staticmethod
    def unparsed(j: Any) -> "TxEnvelope":
        """Best-effort envelope for receipting a submission from_json rejected."""
        src = j if isinstance(j, Mapping) else {}
        return TxEnvelope(tx_type=str(src.get("tx_type") or ""), signer=str(src.get("signer") or ""))

    def to_json(self) -> Dict[str, Any]:
        return {
            "tx_type": self.tx_type,
            "signer": self.signer,
            "payload": self.payload,
            "nonce": self.nonce,
        }


@dataclass(frozen=True)
class TxReceipt:
    """Outcome of one submitted tx: a success value or exactly one error."""

    ok: bool
    tx_type: str
    signer: str
    height: int
    value: Any = None
    error: Optional[Dict[str, Any]] = None

    @staticmethod
    def applied(env: TxEnvelope, height: int, value: Any) -> "TxReceipt":
        return TxReceipt(True, env.tx_type, env.signer, int(height), value, None)

    @staticmethod
    def rejected(env: TxEnvelope, height: int, err: ApplyError) -> "TxReceipt":
        return TxReceipt(False, env.tx_type, env.signer, int(height), None, err.to_json())

    @property
    def code(self) -> Optional[str]:
        return None if self.error is None else self.error.get("code")

    def to_json(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "ok": self.ok,
            "tx_type": self.tx_type,
            "signer": self.signer,
            "height": self.height,
        }
        if self.ok:
            out["value"] = self.value
        else:
            out["error"] = dict(self.error or {})
        return out
