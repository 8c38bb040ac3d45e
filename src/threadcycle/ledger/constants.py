# src/threadcycle/ledger/constants.py
from __future__ import annotations

"""Circular-economy ledger constants.

- Reward token: 6 decimal places, hard-capped supply
- Garment registry: sequential ids from 1, hard-capped id space
- Lifecycle logs: bounded per garment
"""

from typing import FrozenSet

# Monetary precision (1 token = 1e-6 units)
TOKEN_DECIMALS: int = 6
TOKEN_UNIT: int = 10**TOKEN_DECIMALS

# Supply cap, in units
MAX_SUPPLY: int = 1_000_000_000

# Reward schedule defaults
DEFAULT_REWARD_PER_ACTION: int = TOKEN_UNIT  # 1 token
DEFAULT_COOLDOWN_BLOCKS: int = 1_440  # ~1 day at 1 minute blocks

# Garment registry
MAX_NFTS: int = 1_000_000
MAX_LIFECYCLE_EVENTS: int = 50
MIN_TEXT_LEN: int = 1
MAX_TEXT_LEN: int = 256

# Reserved burn principal; never a valid recipient or authorized contract
ZERO_ADDRESS: str = "SP000000000000000000002Q6VF78"

LIFECYCLE_EVENT_TYPES: FrozenSet[str] = frozenset({"production", "repair", "resale", "recycle", "donation"})

# Production is recorded on the garment but never rewarded
REWARDABLE_ACTIONS: FrozenSet[str] = frozenset({"recycle", "resale", "donation", "repair"})
