from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .fetcher import DEFAULT_API_PREFIXES


@dataclass
class SyncConfig:
    base_url: str = "http://localhost:3000"
    api_prefixes: Tuple[str, ...] = DEFAULT_API_PREFIXES
    stabilize_timeout: float = 1.5
    poll_interval: float = 0.05
    request_timeout: float = 10.0
    initial_url: str = "/"
