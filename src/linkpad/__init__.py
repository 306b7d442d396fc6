"""linkpad — shared text pages that turn URLs, emails, phones and paths into links."""

from .formatter import Formatter, FormatterConfig, build_tokens, format_content
from .patterns import collect_matches, resolve_overlaps, scan_line
from .store import PageStore
from .store_sqlite import SqlitePageStore
from .session import PadSession
from .render import render_html, serialize_lines
from .config import create_session, create_store, load_config, load_from_yaml
from .errors import ConfigError, LinkpadError, StoreError
from .types import Link, LinkKind, Match, Mode, PageData, Token

__all__ = [
    "Formatter", "FormatterConfig", "build_tokens", "format_content",
    "collect_matches", "resolve_overlaps", "scan_line",
    "PageStore", "SqlitePageStore",
    "PadSession",
    "render_html", "serialize_lines",
    "create_session", "create_store", "load_config", "load_from_yaml",
    "ConfigError", "LinkpadError", "StoreError",
    "Link", "LinkKind", "Match", "Mode", "PageData", "Token",
]
__version__ = "0.1.0"
