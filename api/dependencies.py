from __future__ import annotations

import logging
import os
from functools import lru_cache

from fastapi import Request

from frontmatter_viewer.sync import (
    DEFAULT_API_PREFIXES,
    DocumentFetcher,
    HostHistory,
    SyncConfig,
    SyncController,
)


def setup_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@lru_cache(maxsize=1)
def get_config() -> SyncConfig:
    prefixes = os.getenv("GROWI_API_PREFIXES")
    return SyncConfig(
        base_url=os.getenv("GROWI_BASE_URL", "http://localhost:3000"),
        api_prefixes=tuple(p.strip() for p in prefixes.split(",") if p.strip()) if prefixes else DEFAULT_API_PREFIXES,
        stabilize_timeout=int(os.getenv("STABILIZE_TIMEOUT_MS", "1500")) / 1000,
        poll_interval=int(os.getenv("POLL_INTERVAL_MS", "50")) / 1000,
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "10")),
        initial_url=os.getenv("INITIAL_URL", "/"),
    )


def get_fetcher(request: Request) -> DocumentFetcher:
    return request.app.state.fetcher


def get_controller(request: Request) -> SyncController:
    return request.app.state.controller


def get_history(request: Request) -> HostHistory:
    return request.app.state.history

