from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from threadcycle.runtime.chain_config import ChainConfig
from threadcycle.runtime.domain_dispatch import Ledgers, apply_tx
from threadcycle.runtime.errors import ApplyError
from threadcycle.runtime.garments import GarmentRegistry
from threadcycle.runtime.ledger_logging import log_event
from threadcycle.runtime.metrics import inc_counter, inc_labeled_counter, set_gauge
from threadcycle.runtime.rewards import RewardLedger
from threadcycle.runtime.tx_types import TxEnvelope, TxReceipt

Json = Dict[str, Any]

log = logging.getLogger("threadcycle.executor")


class LedgerExecutor:
    """Single-writer executor for one deployment of both components.

    Owns the block-height clock. Every submitted tx runs under one lock, sees
    exactly one height, and yields exactly one receipt; txs are therefore
    linearised in submission order.
    """

    def __init__(self, cfg: ChainConfig) -> None:
        self.cfg = cfg
        self.chain_id = cfg.chain_id
        self._lock = threading.Lock()
        self._height = int(cfg.start_height)
        self.ledgers = Ledgers(
            rewards=RewardLedger(
                cfg.admin,
                reward_per_action=int(cfg.reward_per_action),
                cooldown_period=int(cfg.cooldown_blocks),
            ),
            garments=GarmentRegistry(cfg.admin),
        )
        self._receipts: Deque[TxReceipt] = deque(maxlen=max(int(cfg.receipt_history), 0))
        set_gauge("chain_height", self._height)

    @property
    def rewards(self) -> RewardLedger:
        return self.ledgers.rewards

    @property
    def garments(self) -> GarmentRegistry:
        return self.ledgers.garments

    # ------------------------------------------------------------------
    # Block-height clock
    # ------------------------------------------------------------------

    @property
    def height(self) -> int:
        with self._lock:
            return self._height

    def advance(self, blocks: int = 1) -> int:
        n = int(blocks)
        if n < 1:
            raise ValueError(f"blocks must be >= 1; got: {blocks}")
        with self._lock:
            self._height += n
            set_gauge("chain_height", self._height)
            return self._height

    def set_height(self, height: int) -> int:
        h = int(height)
        with self._lock:
            if h < self._height:
                raise ValueError(f"height must be non-decreasing: {h} < {self._height}")
            self._height = h
            set_gauge("chain_height", self._height)
            return self._height

    # ------------------------------------------------------------------
    # Tx submission
    # ------------------------------------------------------------------

    def submit(self, env: Any) -> TxReceipt:
        with self._lock:
            h = self._height
            e: Optional[TxEnvelope] = None
            try:
                e = TxEnvelope.from_json(env)
                value = apply_tx(self.ledgers, e, height=h)
            except ApplyError as err:
                if e is None:
                    e = TxEnvelope.unparsed(env)
                receipt = TxReceipt.rejected(e, h, err)
                inc_counter("tx_rejected_total")
                inc_counter(f"tx_rejected_{err.code}")
                inc_labeled_counter("tx_rejected", {"tx_type": e.tx_type, "code": err.code})
                log_event(
                    log,
                    "tx_rejected",
                    tx_type=e.tx_type,
                    signer=e.signer,
                    height=h,
                    code=err.code,
                    reason=err.reason,
                )
            else:
                receipt = TxReceipt.applied(e, h, value)
                inc_counter("tx_applied_total")
                inc_labeled_counter("tx_applied", {"tx_type": e.tx_type})
                log_event(log, "tx_applied", tx_type=e.tx_type, signer=e.signer, height=h)

            self._receipts.append(receipt)
            set_gauge("reward_total_supply", self.rewards.get_total_supply())
            set_gauge("garment_total_minted", self.garments.get_total_minted())
            return receipt

    def receipts(self, limit: Optional[int] = None) -> List[TxReceipt]:
        """Most recent receipts, oldest first."""
        with self._lock:
            out = list(self._receipts)
        if limit is not None:
            n = max(int(limit), 0)
            out = out[-n:] if n else []
        return out

    def snapshot(self) -> Json:
        with self._lock:
            return {
                "chain_id": self.chain_id,
                "height": self._height,
                "rewards": self.rewards.snapshot().to_json(),
                "garments": self.garments.snapshot().to_json(),
            }


__all__ = ["LedgerExecutor"]
