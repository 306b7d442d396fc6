"""PadSession — one viewer's state: current page, mode and live content.

Usage:

    store = PageStore()
    session = PadSession.create(store)

    session.navigate("#/notes")      # subscribes to "notes"
    session.edit("call +1 415-555-2671")
    html = session.render()

    session.close()                  # drop the subscription

Content written by anyone else to the same store reaches the session
through its subscription, so ``lines`` always reflects the latest text.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Protocol

from .errors import StoreError
from .formatter import Formatter, FormatterConfig
from .pages import HOME_PAGE, is_special_page, page_from_fragment, sanitize_page_name
from .render import render_html
from .store import Listener, Unsubscribe
from .types import Mode, Token

logger = logging.getLogger(__name__)


class ContentSource(Protocol):
    def subscribe(self, page_id: str, callback: Listener) -> Unsubscribe: ...
    def write(self, page_id: str, content: str) -> None: ...


@dataclass
class PadSession:
    """Binds a store and a formatter to the page currently on screen."""

    store: ContentSource
    formatter: Formatter = field(default_factory=Formatter)
    page: str = HOME_PAGE
    mode: Mode = Mode.VIEW
    content: str = ""
    error: str | None = None
    _unsubscribe: Unsubscribe | None = field(default=None, repr=False)

    @classmethod
    def create(
        cls,
        store: ContentSource,
        *,
        config: FormatterConfig | None = None,
        page: str = HOME_PAGE,
    ) -> "PadSession":
        session = cls(store=store, formatter=Formatter(config))
        session.navigate(page)
        return session

    @property
    def is_home(self) -> bool:
        return self.page == HOME_PAGE

    @property
    def is_special(self) -> bool:
        return is_special_page(self.page)

    def navigate(self, target: str) -> str:
        """Switch to a page given as a ``#/fragment`` or a bare name."""
        if target.startswith("#"):
            page = page_from_fragment(target)
        else:
            page = sanitize_page_name(target.strip("/"))

        self._drop_subscription()
        self.page = page
        self.mode = Mode.VIEW
        self.error = None
        self.content = ""

        if not (self.is_home or self.is_special):
            self._unsubscribe = self.store.subscribe(page, self._on_content)
        return page

    def edit(self, content: str) -> bool:
        """Replace the page text locally and in the store.

        Returns False (and records ``error``) when the store rejects it.
        Home and special pages are read-only and stay unchanged.
        """
        if self.is_home or self.is_special:
            return False
        self.content = content
        try:
            self.store.write(self.page, content)
        except StoreError as e:
            logger.error("write failed for page %r: %s", self.page, e)
            self.error = str(e)
            return False
        self.error = None
        return True

    def set_mode(self, mode: Mode) -> None:
        self.mode = mode

    def toggle_mode(self) -> Mode:
        self.mode = Mode.VIEW if self.mode is Mode.EDIT else Mode.EDIT
        return self.mode

    @property
    def lines(self) -> list[list[Token]]:
        return self.formatter.format(self.content)

    def render(self) -> str:
        return render_html(self.lines)

    def close(self) -> None:
        self._drop_subscription()

    def _on_content(self, content: str) -> None:
        self.content = content
        self.error = None

    def _drop_subscription(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
