from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlsplit


class FetchOutcomeKind(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    FAILURE = "failure"


class ControllerPhase(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    DISPLAYING = "displaying"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class Address:
    path: str
    query: str = ""

    @classmethod
    def from_url(cls, url: str) -> "Address":
        parts = urlsplit(url)
        path = parts.path or "/"
        query = f"?{parts.query}" if parts.query else ""
        return cls(path=path, query=query)

    @property
    def combined(self) -> str:
        return self.path + self.query

    @property
    def page_id(self) -> str:
        return self.path[1:] if self.path.startswith("/") else self.path

    @property
    def revision_id(self) -> Optional[str]:
        values = parse_qs(self.query.lstrip("?")).get("revisionId")
        return values[0] if values else None


@dataclass(frozen=True)
class NavigationEvent:
    old: Address
    new: Address


@dataclass(frozen=True)
class MetadataBlock:
    raw_text: str
    structured: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return len(self.structured) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {"rawText": self.raw_text, "structured": self.structured}


@dataclass(frozen=True)
class FetchOutcome:
    kind: FetchOutcomeKind
    body: Optional[str] = None

    @classmethod
    def success(cls, body: str) -> "FetchOutcome":
        return cls(FetchOutcomeKind.SUCCESS, body)

    @classmethod
    def empty(cls) -> "FetchOutcome":
        return cls(FetchOutcomeKind.EMPTY)

    @classmethod
    def failure(cls) -> "FetchOutcome":
        return cls(FetchOutcomeKind.FAILURE)

    @property
    def ok(self) -> bool:
        return self.kind == FetchOutcomeKind.SUCCESS


@dataclass(frozen=True)
class ControllerState:
    phase: ControllerPhase = ControllerPhase.IDLE
    address: Optional[Address] = None
    block: Optional[MetadataBlock] = None

    @property
    def visible(self) -> bool:
        return self.phase == ControllerPhase.DISPLAYING
