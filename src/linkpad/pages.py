"""Page identity — canonical page ids from raw names and URL fragments.

Page ids double as storage keys, so characters that are unsafe in a
key path (``. # $ [ ] /``) and whitespace are replaced with ``-``.
Routes such as ``/x/shortcuts`` therefore flatten to ``x-shortcuts``.
"""

from __future__ import annotations
import random
import re

HOME_PAGE = "home"
SPECIAL_PREFIX = "x-"

_UNSAFE = re.compile(r"[.#$\[\]\s/]")
_FRAGMENT_PREFIX = re.compile(r"^#/?")


def sanitize_page_name(name: str) -> str:
    return _UNSAFE.sub("-", name).lower() or HOME_PAGE


def page_from_fragment(fragment: str) -> str:
    """``"#/Foo Bar"`` → ``"foo-bar"``; empty, ``#`` and ``#/`` → home."""
    raw = _FRAGMENT_PREFIX.sub("", fragment.strip()).strip("/")
    if not raw:
        return HOME_PAGE
    return sanitize_page_name(raw)


def fragment_for_page(page: str) -> str:
    page = sanitize_page_name(page)
    return "#/" if page == HOME_PAGE else f"#/{page}"


def is_special_page(page: str) -> bool:
    """Built-in pages (``x-about``, ``x-shortcuts``) that have no stored content."""
    return page.startswith(SPECIAL_PREFIX)


def generate_random_page(rng: random.Random | None = None) -> str:
    """A fresh four-digit page id."""
    return str((rng or random).randint(1000, 9999))
