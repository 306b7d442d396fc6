"""Core types."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class LinkKind(str, Enum):
    """Pattern family a link was detected by."""
    FULL_URL = "full_url"
    PROTOCOL_LINK = "protocol_link"
    EMAIL = "email"
    BARE_DOMAIN = "bare_domain"
    PHONE = "phone"
    INTERNAL_PATH = "internal_path"

    @property
    def external(self) -> bool:
        return self is not LinkKind.INTERNAL_PATH


class Mode(str, Enum):
    VIEW = "view"
    EDIT = "edit"


@dataclass(frozen=True, slots=True)
class Match:
    """A single candidate link found in one line."""
    start: int
    length: int
    text: str
    kind: LinkKind
    target: str            # href, e.g. "mailto:a@b.co", "#/home"

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True, slots=True)
class Link:
    kind: LinkKind
    target: str
    external: bool


@dataclass(frozen=True, slots=True)
class Token:
    """A run of plain text, or one link when ``link`` is set."""
    text: str
    link: Link | None = None

    @property
    def is_link(self) -> bool:
        return self.link is not None


@dataclass(frozen=True, slots=True)
class PageData:
    """Stored page content."""
    content: str
    updated_at: float      # epoch seconds
