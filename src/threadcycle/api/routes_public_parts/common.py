from __future__ import annotations

from fastapi import Request

from threadcycle.api.errors import ApiError
from threadcycle.runtime.errors import ApplyError


def _executor(request: Request):
    ex = getattr(request.app.state, "executor", None)
    if ex is None:
        raise ApiError.internal("not_ready", "executor not attached to app.state", {})
    return ex


def _mode(request: Request) -> str:
    cfg = getattr(getattr(request.app.state, "executor", None), "cfg", None)
    return str(getattr(cfg, "mode", "prod") or "prod").strip().lower()


def _not_found(err: ApplyError) -> ApiError:
    """Per-token read queries surface NoSuchToken as HTTP 404."""
    return ApiError.not_found(err.code, err.reason, err.to_json())
