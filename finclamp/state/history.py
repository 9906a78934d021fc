"""
Back/forward navigation.

The only asynchronous input to the engine: when the user moves through
history, registered handlers fire once and mounted stores re-read their
fields from the URL. There is no polling.
"""

import logging
from typing import Callable, List

from finclamp.state.store import InputStateStore
from finclamp.state.url_codec import AddressBar

logger = logging.getLogger(__name__)

NavigationHandler = Callable[[str], None]


class HistoryBridge:
    """Dispatches history navigation on an AddressBar to registered handlers."""

    def __init__(self, address_bar: AddressBar):
        self.address_bar = address_bar
        self._handlers: List[NavigationHandler] = []

    def on_history_navigation(self, handler: NavigationHandler) -> Callable[[], None]:
        """Register ``handler(url)``; returns a function that unregisters it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def bind(self, store: InputStateStore) -> Callable[[], None]:
        """Re-hydrate ``store`` whenever the user navigates."""
        return self.on_history_navigation(lambda url: store.hydrate())

    def push(self, url: str) -> None:
        """Add a history entry (opening a calculator, following a shared link)."""
        self.address_bar.push_state(url)

    def back(self) -> bool:
        return self._navigate(-1)

    def forward(self) -> bool:
        return self._navigate(1)

    def _navigate(self, delta: int) -> bool:
        if not self.address_bar.go(delta):
            return False
        url = self.address_bar.url
        logger.info(f"History navigation to {url}")
        for handler in list(self._handlers):
            handler(url)
        return True
