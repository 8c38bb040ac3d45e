# src/threadcycle/runtime/chain_config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from threadcycle.ledger.constants import (
    DEFAULT_COOLDOWN_BLOCKS,
    DEFAULT_REWARD_PER_ACTION,
    MAX_SUPPLY,
    ZERO_ADDRESS,
)


def _as_int(v: Any, default: int) -> int:
    if v is None or (isinstance(v, str) and not v.strip()):
        return int(default)
    try:
        return int(v)
    except (TypeError, ValueError):
        raise ValueError(f"expected an integer, got: {v!r}")


def _as_str(v: Any, default: str) -> str:
    if v is None:
        return str(default)
    s = str(v)
    return s if s.strip() else str(default)


@dataclass(frozen=True)
class ChainConfig:
    chain_id: str
    mode: str  # "dev" | "testnet" | "prod"

    # Deployer identity; initial admin of both components
    admin: str

    # Block-height clock starts here and only moves forward
    start_height: int

    reward_per_action: int
    cooldown_blocks: int

    api_host: str
    api_port: int

    log_level: str

    # In-memory receipt history kept by the executor
    receipt_history: int


_ALLOWED_MODES = {"dev", "testnet", "prod"}

# Env var per config field; file values win over these when a file is given.
_ENV_KEYS: Mapping[str, str] = {
    "chain_id": "THREADCYCLE_CHAIN_ID",
    "mode": "THREADCYCLE_MODE",
    "admin": "THREADCYCLE_ADMIN",
    "start_height": "THREADCYCLE_START_HEIGHT",
    "reward_per_action": "THREADCYCLE_REWARD_PER_ACTION",
    "cooldown_blocks": "THREADCYCLE_COOLDOWN_BLOCKS",
    "api_host": "THREADCYCLE_API_HOST",
    "api_port": "THREADCYCLE_API_PORT",
    "log_level": "THREADCYCLE_LOG_LEVEL",
    "receipt_history": "THREADCYCLE_RECEIPT_HISTORY",
}


def validate_chain_config(cfg: ChainConfig) -> None:
    """Fail-fast validation for operator config."""

    if not isinstance(cfg.chain_id, str) or not cfg.chain_id.strip():
        raise ValueError("chain_id must be a non-empty string")

    mode = str(cfg.mode or "").strip().lower()
    if mode not in _ALLOWED_MODES:
        raise ValueError(f"mode must be one of {_ALLOWED_MODES}; got: {cfg.mode!r}")

    if not isinstance(cfg.admin, str) or not cfg.admin.strip():
        raise ValueError("admin must be a non-empty principal (set THREADCYCLE_ADMIN)")
    if cfg.admin == ZERO_ADDRESS:
        raise ValueError("admin must not be the zero address")

    if int(cfg.start_height) < 0:
        raise ValueError(f"start_height must be >= 0; got: {cfg.start_height}")

    if not (0 < int(cfg.reward_per_action) <= MAX_SUPPLY):
        raise ValueError(f"reward_per_action must be 1..{MAX_SUPPLY}; got: {cfg.reward_per_action}")

    if int(cfg.cooldown_blocks) <= 0:
        raise ValueError(f"cooldown_blocks must be > 0; got: {cfg.cooldown_blocks}")

    if int(cfg.api_port) <= 0 or int(cfg.api_port) > 65535:
        raise ValueError(f"api_port must be 1..65535; got: {cfg.api_port}")

    if int(cfg.receipt_history) < 0:
        raise ValueError(f"receipt_history must be >= 0; got: {cfg.receipt_history}")


def default_chain_config() -> ChainConfig:
    return ChainConfig(
        chain_id="threadcycle-dev",
        # Production-safe default: no dev-only endpoints unless asked for.
        mode="prod",
        admin="",
        start_height=0,
        reward_per_action=DEFAULT_REWARD_PER_ACTION,
        cooldown_blocks=DEFAULT_COOLDOWN_BLOCKS,
        api_host="127.0.0.1",
        api_port=8080,
        log_level="INFO",
        receipt_history=1_000,
    )


def _build(raw: Mapping[str, Any], base: ChainConfig) -> ChainConfig:
    return ChainConfig(
        chain_id=_as_str(raw.get("chain_id"), base.chain_id),
        mode=_as_str(raw.get("mode"), base.mode).strip().lower(),
        admin=_as_str(raw.get("admin"), base.admin).strip(),
        start_height=_as_int(raw.get("start_height"), base.start_height),
        reward_per_action=_as_int(raw.get("reward_per_action"), base.reward_per_action),
        cooldown_blocks=_as_int(raw.get("cooldown_blocks"), base.cooldown_blocks),
        api_host=_as_str(raw.get("api_host"), base.api_host),
        api_port=_as_int(raw.get("api_port"), base.api_port),
        log_level=_as_str(raw.get("log_level"), base.log_level).strip().upper(),
        receipt_history=_as_int(raw.get("receipt_history"), base.receipt_history),
    )


def chain_config_from_env(environ: Optional[Mapping[str, str]] = None) -> ChainConfig:
    env = os.environ if environ is None else environ
    raw = {field: env.get(key) for field, key in _ENV_KEYS.items()}
    return _build(raw, default_chain_config())


def read_chain_config_file(path: str) -> ChainConfig:
    """Read a JSON chain config; unspecified fields fall back to env, then defaults."""
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("chain config must be a JSON object")

    cfg = _build(raw, chain_config_from_env())
    validate_chain_config(cfg)
    return cfg


def load_chain_config(*, config_path: Optional[str] = None) -> ChainConfig:
    p = config_path or os.environ.get("THREADCYCLE_CONFIG_PATH")
    if p:
        return read_chain_config_file(p)

    cfg = chain_config_from_env()
    validate_chain_config(cfg)
    return cfg
