# src/threadcycle/runtime/metrics.py
from __future__ import annotations

import os
import threading
import time
from typing import Dict, Mapping, Tuple

# Label sets are stored sorted so {"a": 1, "b": 2} and {"b": 2, "a": 1} share a series
LabelKey = Tuple[Tuple[str, str], ...]

_lock = threading.Lock()
_counters: Dict[str, int] = {}
_gauges: Dict[str, int] = {}
_labeled: Dict[str, Dict[LabelKey, int]] = {}
_started_ms = int(time.time() * 1000)


def metrics_enabled() -> bool:
    v = (os.environ.get("THREADCYCLE_METRICS_ENABLED") or "").strip().lower()
    if not v:
        return False
    return v in {"1", "true", "yes", "y", "on"}


def inc_counter(name: str, value: int = 1) -> None:
    n = str(name or "").strip()
    if not n:
        return
    with _lock:
        _counters[n] = int(_counters.get(n, 0)) + int(value)


def inc_labeled_counter(name: str, labels: Mapping[str, str], value: int = 1) -> None:
    """Per-label-set counter, e.g. tx_rejected{tx_type="REWARD_BURN",code="InsufficientBalance"}."""
    n = str(name or "").strip()
    if not n:
        return
    key: LabelKey = tuple(sorted((str(k), str(v)) for k, v in labels.items()))
    with _lock:
        series = _labeled.setdefault(n, {})
        series[key] = int(series.get(key, 0)) + int(value)


def set_gauge(name: str, value: int) -> None:
    n = str(name or "").strip()
    if not n:
        return
    with _lock:
        _gauges[n] = int(value)


def reset() -> None:
    """Drop all counters and gauges (test isolation)."""
    with _lock:
        _counters.clear()
        _gauges.clear()
        _labeled.clear()


def labeled_value(name: str, **labels: str) -> int:
    key: LabelKey = tuple(sorted((k, str(v)) for k, v in labels.items()))
    with _lock:
        return int(_labeled.get(name, {}).get(key, 0))


def snapshot() -> dict:
    with _lock:
        return {
            "ts_ms": int(time.time() * 1000),
            "started_ms": int(_started_ms),
            "uptime_ms": int(time.time() * 1000) - int(_started_ms),
            "counters": dict(_counters),
            "gauges": dict(_gauges),
            "labeled": {
                name: [{"labels": dict(key), "value": v} for key, v in sorted(series.items())]
                for name, series in _labeled.items()
            },
        }


def _escape(v: str) -> str:
    return v.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_prometheus(prefix: str = "threadcycle_") -> str:
    """Prometheus exposition text for the ledger's counters and gauges.

    Plain counters end in _total; labeled series carry tx_type / outcome / code.
    """
    pre = str(prefix or "").strip() or "threadcycle_"
    snap = snapshot()
    lines: list[str] = []

    lines.append(f"# TYPE {pre}uptime_ms gauge")
    lines.append(f"{pre}uptime_ms {int(snap.get('uptime_ms') or 0)}")

    for name, v in sorted(snap["counters"].items()):
        lines.append(f"# TYPE {pre}{name} counter")
        lines.append(f"{pre}{name} {int(v)}")

    for name, series in sorted(snap["labeled"].items()):
        lines.append(f"# TYPE {pre}{name} counter")
        for item in series:
            labels = ",".join(f'{k}="{_escape(v)}"' for k, v in sorted(item["labels"].items()))
            lines.append(f"{pre}{name}{{{labels}}} {int(item['value'])}")

    for name, v in sorted(snap["gauges"].items()):
        lines.append(f"# TYPE {pre}{name} gauge")
        lines.append(f"{pre}{name} {int(v)}")

    return "\n".join(lines) + "\n"
