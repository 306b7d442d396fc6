"""Exception classes for linkpad.

The linkification engine never raises; these cover the collaborators
around it (configuration and page storage).
"""

from __future__ import annotations


class LinkpadError(Exception):
    """Base exception for all linkpad errors."""


class ConfigError(LinkpadError):
    """Invalid configuration value (unknown link kind, store backend, ...)."""


class StoreError(LinkpadError):
    """A page store failed to read or persist content."""

    def __init__(self, message: str, page_id: str | None = None) -> None:
        self.page_id = page_id
        if page_id is not None:
            message = f"{page_id}: {message}"
        super().__init__(message)
