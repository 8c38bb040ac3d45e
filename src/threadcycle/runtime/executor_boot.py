# src/threadcycle/runtime/executor_boot.py

from __future__ import annotations

from typing import Optional

from threadcycle.runtime.chain_config import ChainConfig, load_chain_config
from threadcycle.runtime.executor import LedgerExecutor


def build_executor(cfg: Optional[ChainConfig] = None) -> LedgerExecutor:
    """
    Build a LedgerExecutor from an explicit ChainConfig or, if omitted,
    from THREADCYCLE_CONFIG_PATH / THREADCYCLE_* environment variables.

    `threadcycle.api.app` calls build_executor() with no args in production.
    """
    c = cfg or load_chain_config()
    return LedgerExecutor(c)
