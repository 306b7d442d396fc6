"""YAML/dict config loader for linkpad.

Supports loading from a YAML file or a plain dict (for embedding in a
larger application config).

Example YAML:

    linkpad:
      namespace: qkrsai
      skip_kinds:
        - phone
      store:
        backend: sqlite          # "memory" or "sqlite"
        path: ~/.linkpad/pages.db
      server:
        host: 127.0.0.1
        port: 18792
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .formatter import Formatter, FormatterConfig
from .pages import HOME_PAGE
from .session import PadSession
from .store import PageStore
from .store_sqlite import DEFAULT_NAMESPACE, SqlitePageStore
from .types import LinkKind

DEFAULT_DB = os.environ.get(
    "LINKPAD_DB",
    str(Path.home() / ".linkpad" / "pages.db"),
)
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = int(os.environ.get("LINKPAD_PORT", "18792"))

_BACKENDS = ("memory", "sqlite")


def parse_kinds(values: list[str] | str | None) -> set[LinkKind]:
    """``["phone", "EMAIL"]`` or ``"phone,email"`` → set of LinkKind."""
    if not values:
        return set()
    if isinstance(values, str):
        values = [v for v in values.split(",") if v.strip()]
    kinds: set[LinkKind] = set()
    for value in values:
        try:
            kinds.add(LinkKind(value.strip().lower()))
        except ValueError:
            valid = ", ".join(k.value for k in LinkKind)
            raise ConfigError(f"unknown link kind {value!r} (expected one of: {valid})") from None
    return kinds


def load_config(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    # Support nested under "linkpad" key or flat
    if "linkpad" in data:
        data = data["linkpad"] or {}

    store = data.get("store") or {}
    server = data.get("server") or {}
    backend = store.get("backend", "memory")
    if backend not in _BACKENDS:
        raise ConfigError(f"unknown store backend {backend!r}")

    try:
        port = int(server.get("port", DEFAULT_PORT))
    except (TypeError, ValueError):
        raise ConfigError(f"invalid server port {server.get('port')!r}") from None

    return {
        "namespace": data.get("namespace", DEFAULT_NAMESPACE),
        "start_page": data.get("start_page", HOME_PAGE),
        "skip_kinds": parse_kinds(data.get("skip_kinds")),
        "store_backend": backend,
        "store_path": store.get("path", DEFAULT_DB),
        "server_host": server.get("host", DEFAULT_HOST),
        "server_port": port,
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml
    with open(path) as f:
        return load_config(yaml.safe_load(f) or {})


def _normalized(config: dict[str, Any]) -> dict[str, Any]:
    return config if "store_backend" in config else load_config(config)


def create_formatter(config: dict[str, Any]) -> Formatter:
    cfg = _normalized(config)
    return Formatter(FormatterConfig(skip_kinds=set(cfg["skip_kinds"])))


def create_store(config: dict[str, Any]) -> PageStore | SqlitePageStore:
    cfg = _normalized(config)
    if cfg["store_backend"] == "sqlite":
        return SqlitePageStore(cfg["namespace"], db_path=cfg["store_path"])
    return PageStore()


def create_session(
    config: dict[str, Any],
    store: PageStore | SqlitePageStore | None = None,
) -> PadSession:
    """Create a fully configured session; builds a store unless one is given."""
    cfg = _normalized(config)
    return PadSession.create(
        store if store is not None else create_store(cfg),
        config=FormatterConfig(skip_kinds=set(cfg["skip_kinds"])),
        page=cfg["start_page"],
    )
