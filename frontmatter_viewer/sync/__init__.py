"""
Sync subsystem exports.
"""

from .config import SyncConfig
from .controller import NullPresenter, Presenter, SyncController
from .errors import FrontmatterError, MalformedBlock, MissingBody, NetworkFailure, NonJsonResponse
from .extractor import extract_metadata, locate_block
from .fetcher import DEFAULT_API_PREFIXES, DocumentFetcher
from .models import (
    Address,
    ControllerPhase,
    ControllerState,
    FetchOutcome,
    FetchOutcomeKind,
    MetadataBlock,
    NavigationEvent,
)
from .navigation import (
    AddressSubscription,
    HistoryPatchSubscription,
    HostHistory,
    ManualAddressSubscription,
    NavigationMonitor,
    is_canonical_path,
)
from .parser import parse_block, parse_scalar, parse_simple_yaml, render_simple_yaml

__all__ = [
    "Address",
    "AddressSubscription",
    "ControllerPhase",
    "ControllerState",
    "DEFAULT_API_PREFIXES",
    "DocumentFetcher",
    "FetchOutcome",
    "FetchOutcomeKind",
    "FrontmatterError",
    "HistoryPatchSubscription",
    "HostHistory",
    "MalformedBlock",
    "ManualAddressSubscription",
    "MetadataBlock",
    "MissingBody",
    "NavigationEvent",
    "NavigationMonitor",
    "NetworkFailure",
    "NonJsonResponse",
    "NullPresenter",
    "Presenter",
    "SyncConfig",
    "SyncController",
    "extract_metadata",
    "is_canonical_path",
    "locate_block",
    "parse_block",
    "parse_scalar",
    "parse_simple_yaml",
    "render_simple_yaml",
]
