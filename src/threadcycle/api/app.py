from __future__ import annotations

import os

from fastapi import FastAPI

from threadcycle.api.errors import ApiError, api_error_handler
from threadcycle.api.routes_public import public_router
from threadcycle.api.structured_logging import RequestLogMiddleware
from threadcycle.runtime.chain_config import ChainConfig
from threadcycle.runtime.executor_boot import build_executor as _build_executor


def build_executor(cfg: ChainConfig | None = None):
    """Build a LedgerExecutor for API runtime.

    This wrapper exists so tests can monkeypatch `threadcycle.api.app.build_executor`
    without reaching into runtime modules.
    """
    return _build_executor(cfg)


def create_app(*, boot_runtime: bool = True, cfg: ChainConfig | None = None) -> FastAPI:
    """Create the FastAPI application.

    boot_runtime:
      - True (default): load chain config + attach executor
      - False: keep lightweight for unit tests / import-time validation
    """
    if boot_runtime:
        executor = build_executor(cfg)
        mode = executor.cfg.mode
    else:
        executor = None
        mode = (os.environ.get("THREADCYCLE_MODE") or "prod").strip().lower()

    # Disable docs in production.
    if mode == "prod":
        app = FastAPI(title="ThreadCycle Ledger API", docs_url=None, redoc_url=None, openapi_url=None)
    else:
        app = FastAPI(title="ThreadCycle Ledger API")

    app.state.executor = executor

    app.add_middleware(RequestLogMiddleware)
    app.add_exception_handler(ApiError, api_error_handler)

    app.include_router(public_router)

    return app
