from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol, Set

from .config import SyncConfig
from .extractor import extract_metadata
from .fetcher import DocumentFetcher
from .models import Address, ControllerPhase, ControllerState, MetadataBlock, NavigationEvent
from .navigation import Detach, NavigationMonitor, is_canonical_path

logger = logging.getLogger(__name__)


class Presenter(Protocol):
    def present(self, block: Optional[MetadataBlock], visible: bool) -> None:
        ...


class NullPresenter:
    def present(self, block: Optional[MetadataBlock], visible: bool) -> None:
        return None


class SyncController:
    """
    Keeps the displayed metadata in step with the host's active address.

    Every navigation records the new address as the last one acted on.
    Asynchronous completions (address stabilization, page fetch) carry the
    address they were started for and are only applied while the controller
    is started and that address is still the last one acted on.
    """

    def __init__(
        self,
        monitor: NavigationMonitor,
        fetcher: DocumentFetcher,
        presenter: Optional[Presenter] = None,
        config: Optional[SyncConfig] = None,
    ):
        self.monitor = monitor
        self.fetcher = fetcher
        self.presenter = presenter or NullPresenter()
        self.config = config or SyncConfig()
        self._state = ControllerState()
        self._last_address: Optional[Address] = None
        self._detach: Optional[Detach] = None
        self._started = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def visible(self) -> bool:
        return self._state.visible

    @property
    def block(self) -> Optional[MetadataBlock]:
        return self._state.block

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        """Must be called from within a running event loop."""
        if self._started:
            return
        self._loop = asyncio.get_running_loop()
        self._started = True
        self._detach = self.monitor.watch(self._on_navigation)
        # The initial address is already canonical, no stabilization needed.
        self._act_on(self.monitor.current_address(), settle=False)

    def stop(self) -> None:
        self._started = False
        if self._detach is not None:
            self._detach()
            self._detach = None
        self._last_address = None
        self._set_state(ControllerState())

    async def wait_idle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_navigation(self, event: NavigationEvent) -> None:
        if not self._started:
            return
        self._act_on(event.new, settle=not is_canonical_path(event.old.path))

    def _act_on(self, address: Address, settle: bool) -> None:
        self._last_address = address
        if not is_canonical_path(address.path):
            self._hide(address)
            return
        task = self._loop.create_task(self._run_pipeline(address, settle))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_pipeline(self, address: Address, settle: bool) -> None:
        try:
            if settle:
                settled = await self.monitor.wait_for_canonical_address(
                    timeout=self.config.stabilize_timeout,
                    poll_interval=self.config.poll_interval,
                )
                if settled != address or self._is_stale(address):
                    logger.debug("Dropping stabilization result for %s (settled on %s)",
                                 address.combined, settled.combined)
                    return

            self._set_state(ControllerState(ControllerPhase.FETCHING, address))
            outcome = await self.fetcher.fetch(address.page_id, address.revision_id)
            if self._is_stale(address):
                logger.debug("Dropping stale fetch result for %s", address.combined)
                return

            block = extract_metadata(outcome.body) if outcome.ok else None
            if block is None or block.is_empty:
                self._hide(address)
            else:
                self._display(address, block)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Metadata update failed for %s: %s", address.combined, exc)
            if not self._is_stale(address):
                self._hide(address)

    def _is_stale(self, address: Address) -> bool:
        return not self._started or self._last_address != address

    def _hide(self, address: Address) -> None:
        self._set_state(ControllerState(ControllerPhase.HIDDEN, address))
        self.presenter.present(None, False)

    def _display(self, address: Address, block: MetadataBlock) -> None:
        self._set_state(ControllerState(ControllerPhase.DISPLAYING, address, block))
        self.presenter.present(block, True)

    def _set_state(self, state: ControllerState) -> None:
        if state.phase != self._state.phase:
            logger.info("Controller %s -> %s (%s)", self._state.phase.value, state.phase.value,
                        state.address.combined if state.address else "-")
        self._state = state
