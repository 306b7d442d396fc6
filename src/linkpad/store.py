"""PageStore — the content source pages are read from and written to.

A store is an ordinary object: build one at startup and hand it to the
session, server or CLI that needs it.

Contract (shared with ``SqlitePageStore``):
  - ``subscribe(page_id, callback)`` calls ``callback(content)`` right away
    with the current content, then again after every write to that page.
    It returns a function that cancels the subscription.
  - ``write(page_id, content)`` stores the text and notifies subscribers;
    it raises ``StoreError`` when the content cannot be persisted.
"""

from __future__ import annotations
import logging
import time
from collections import defaultdict
from typing import Callable

from .types import PageData

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]
Unsubscribe = Callable[[], None]


class Subscribers:
    """Per-page listener registry used by both store backends."""

    __slots__ = ("_listeners",)

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def add(self, page_id: str, listener: Listener) -> Unsubscribe:
        self._listeners[page_id].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(page_id, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(page_id, None)

        return unsubscribe

    def notify(self, page_id: str, content: str) -> None:
        # Copy: a listener may unsubscribe while being notified
        for listener in list(self._listeners.get(page_id, ())):
            listener(content)

    def count(self, page_id: str) -> int:
        return len(self._listeners.get(page_id, ()))


class PageStore:
    """In-memory page store.  Content is lost when the process exits."""

    __slots__ = ("_pages", "_subscribers")

    def __init__(self) -> None:
        self._pages: dict[str, PageData] = {}
        self._subscribers = Subscribers()

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def get(self, page_id: str) -> str:
        data = self._pages.get(page_id)
        return data.content if data else ""

    def get_data(self, page_id: str) -> PageData | None:
        return self._pages.get(page_id)

    def write(self, page_id: str, content: str) -> None:
        self._pages[page_id] = PageData(content=content, updated_at=time.time())
        logger.debug("wrote page %r (%d chars)", page_id, len(content))
        self._subscribers.notify(page_id, content)

    def subscribe(self, page_id: str, callback: Listener) -> Unsubscribe:
        unsubscribe = self._subscribers.add(page_id, callback)
        callback(self.get(page_id))
        return unsubscribe

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def pages(self) -> list[str]:
        return sorted(self._pages)

    def delete(self, page_id: str) -> None:
        if self._pages.pop(page_id, None) is not None:
            self._subscribers.notify(page_id, "")

    def subscriber_count(self, page_id: str) -> int:
        return self._subscribers.count(page_id)

    @property
    def size(self) -> int:
        return len(self._pages)

    def close(self) -> None:
        pass
