from __future__ import annotations

"""Pydantic request schemas for the public API.

These exist only for HTTP input validation; payload semantics are enforced
by the ledger components themselves.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class TxSubmitRequest(BaseModel):
    tx_type: str = Field(..., min_length=1, description="e.g. REWARD_MINT, GARMENT_LIFECYCLE_EVENT")
    signer: str = Field(..., min_length=1, description="Caller principal supplied by the host")
    payload: Dict[str, Any] = Field(default_factory=dict)
    nonce: int = Field(default=0, ge=0)


class ChainAdvanceRequest(BaseModel):
    blocks: int = Field(default=1, ge=1, description="Number of blocks to advance the height clock")
