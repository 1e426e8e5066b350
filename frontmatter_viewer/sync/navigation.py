from __future__ import annotations

import asyncio
import logging
import re
from typing import Callable, List, Protocol

from .models import Address, NavigationEvent

logger = logging.getLogger(__name__)

# Page ids are 24-character hexadecimal object ids, e.g. /6999390af17c96c558f7d57e
CANONICAL_PATH_PATTERN = re.compile(r"/[0-9a-f]{24}", re.IGNORECASE)

NavigationCallback = Callable[[NavigationEvent], None]
Detach = Callable[[], None]


def is_canonical_path(path: str) -> bool:
    return bool(CANONICAL_PATH_PATTERN.fullmatch(path))


class HostHistory:
    """
    Minimal session history of the host application: a stack of entries with
    push/replace mutation and back/forward traversal. Traversal notifies
    popstate listeners; push and replace do not.
    """

    def __init__(self, initial_url: str = "/"):
        self._entries: List[Address] = [Address.from_url(initial_url)]
        self._index = 0
        self._popstate_listeners: List[Callable[[], None]] = []

    @property
    def location(self) -> Address:
        return self._entries[self._index]

    def push_state(self, url: str) -> None:
        del self._entries[self._index + 1:]
        self._entries.append(Address.from_url(url))
        self._index += 1

    def replace_state(self, url: str) -> None:
        self._entries[self._index] = Address.from_url(url)

    def back(self) -> None:
        self._go(-1)

    def forward(self) -> None:
        self._go(1)

    def add_popstate_listener(self, listener: Callable[[], None]) -> None:
        self._popstate_listeners.append(listener)

    def remove_popstate_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._popstate_listeners:
            self._popstate_listeners.remove(listener)

    def _go(self, delta: int) -> None:
        target = self._index + delta
        if not 0 <= target < len(self._entries):
            return
        self._index = target
        for listener in list(self._popstate_listeners):
            listener()


class AddressSubscription(Protocol):
    def current_address(self) -> Address:
        ...

    def subscribe(self, callback: NavigationCallback) -> Detach:
        ...


class _ChangeDetector:
    """Fires the callback once per distinct path+query value."""

    def __init__(self, initial: Address, callback: NavigationCallback):
        self.last = initial
        self.callback = callback

    def observe(self, address: Address) -> None:
        if address.combined == self.last.combined:
            return
        event = NavigationEvent(old=self.last, new=address)
        self.last = address
        self.callback(event)


class HistoryPatchSubscription:
    """
    Production adapter. Wraps the host's push_state/replace_state so every
    mutation is followed by change detection, and listens for popstate.

    Each subscription wraps whatever primitives are installed when it
    subscribes and puts exactly those back on detach, so stacked
    subscriptions on one history must be detached in reverse (LIFO) order.
    """

    def __init__(self, history: HostHistory):
        self.history = history

    def current_address(self) -> Address:
        return self.history.location

    def subscribe(self, callback: NavigationCallback) -> Detach:
        history = self.history
        detector = _ChangeDetector(history.location, callback)
        original_push = history.push_state
        original_replace = history.replace_state

        def push_state(url: str) -> None:
            original_push(url)
            detector.observe(history.location)

        def replace_state(url: str) -> None:
            original_replace(url)
            detector.observe(history.location)

        def on_popstate() -> None:
            detector.observe(history.location)

        history.push_state = push_state
        history.replace_state = replace_state
        history.add_popstate_listener(on_popstate)
        detached = False

        def detach() -> None:
            nonlocal detached
            if detached:
                return
            detached = True
            history.push_state = original_push
            history.replace_state = original_replace
            history.remove_popstate_listener(on_popstate)

        return detach


class ManualAddressSubscription:
    """
    Test adapter: addresses are set programmatically through navigate().
    """

    def __init__(self, initial_url: str = "/"):
        self._address = Address.from_url(initial_url)
        self._detectors: List[_ChangeDetector] = []

    def current_address(self) -> Address:
        return self._address

    def navigate(self, url: str) -> None:
        self._address = Address.from_url(url)
        for detector in list(self._detectors):
            detector.observe(self._address)

    def subscribe(self, callback: NavigationCallback) -> Detach:
        detector = _ChangeDetector(self._address, callback)
        self._detectors.append(detector)

        def detach() -> None:
            if detector in self._detectors:
                self._detectors.remove(detector)

        return detach


class NavigationMonitor:
    def __init__(self, subscription: AddressSubscription):
        self.subscription = subscription

    def current_address(self) -> Address:
        return self.subscription.current_address()

    def watch(self, callback: NavigationCallback) -> Detach:
        return self.subscription.subscribe(callback)

    async def wait_for_canonical_address(self, timeout: float = 1.5, poll_interval: float = 0.05) -> Address:
        """
        Poll until the host rewrites the address into its page-id form.

        The host first pushes a provisional path and shortly afterwards
        replaces it with the canonical one. On timeout the current address
        is returned as-is.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            address = self.current_address()
            if is_canonical_path(address.path):
                return address
            if loop.time() >= deadline:
                break
            await asyncio.sleep(poll_interval)
        address = self.current_address()
        logger.warning("Address did not settle into a page id within %.0f ms: %s", timeout * 1000, address.combined)
        return address

