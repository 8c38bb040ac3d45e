# src/threadcycle/runtime/ledger_logging.py
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict


Json = Dict[str, Any]


def component_of(logger: logging.Logger) -> str:
    """Last dotted segment of the logger name, e.g. threadcycle.rewards -> rewards."""
    return logger.name.rsplit(".", 1)[-1]


def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    """Emit one ledger event as a single JSON line at INFO.

    Every line carries ts_ms, component and event; principals, amounts,
    token ids and heights ride along as the caller's fields. Values that
    are not JSON-native (e.g. Decimal, Path) are rendered with str().
    """
    if not logger.isEnabledFor(logging.INFO):
        return
    payload: Json = {"ts_ms": int(time.time() * 1000), "component": component_of(logger), "event": str(event)}
    payload.update({k: v for k, v in fields.items() if k not in payload})
    logger.info(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str))
