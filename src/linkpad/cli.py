"""CLI interface for linkpad.

Usage:
    # Linkify text (stdin: plain text, stdout: JSON lines of tokens)
    echo 'see qk.rs/info or call +1 415-555-2671' | linkpad format

    # Render text as HTML
    echo 'mail a@b.co' | linkpad render

    # Read / write a stored page
    echo 'hello /home' | linkpad put notes
    linkpad get notes

    # Serve pages over HTTP
    linkpad serve --port 18792

Pages are persisted in SQLite (``--db``, or LINKPAD_DB).
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from .config import (
    DEFAULT_DB,
    DEFAULT_HOST,
    DEFAULT_PORT,
    create_store,
    load_from_yaml,
    parse_kinds,
)
from .errors import ConfigError, LinkpadError
from .formatter import Formatter, FormatterConfig
from .pages import sanitize_page_name
from .render import render_html, serialize_lines
from .server import serve
from .store import PageStore
from .store_sqlite import DEFAULT_NAMESPACE, SqlitePageStore


def _build_formatter(args: argparse.Namespace) -> Formatter:
    kinds = set(args.config["skip_kinds"]) if args.config else set()
    kinds |= parse_kinds(args.skip_kinds)
    return Formatter(FormatterConfig(skip_kinds=kinds))


def _open_store(
    args: argparse.Namespace,
    *,
    persistent: bool = True,
) -> PageStore | SqlitePageStore:
    """Store named by the config file, else SQLite from --db/--namespace.

    Page commands exit right after they run, so they refuse the memory backend.
    """
    if args.config and (args.db is None and args.namespace is None):
        if persistent and args.config["store_backend"] == "memory":
            raise ConfigError(
                "the memory store does not outlive this command; "
                "configure store.backend: sqlite or pass --db"
            )
        return create_store(args.config)
    return SqlitePageStore(
        args.namespace or DEFAULT_NAMESPACE,
        db_path=args.db or DEFAULT_DB,
    )


def cmd_format(args: argparse.Namespace) -> None:
    """Linkify stdin, print tokens as JSON."""
    lines = _build_formatter(args).format(sys.stdin.read())
    json.dump({"lines": serialize_lines(lines)}, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_render(args: argparse.Namespace) -> None:
    """Linkify stdin, print HTML."""
    lines = _build_formatter(args).format(sys.stdin.read())
    sys.stdout.write(render_html(lines))
    sys.stdout.write("\n")


def cmd_get(args: argparse.Namespace) -> None:
    """Print a page's raw content."""
    store = _open_store(args)
    try:
        sys.stdout.write(store.get(sanitize_page_name(args.page)))
    finally:
        store.close()


def cmd_put(args: argparse.Namespace) -> None:
    """Replace a page's content with stdin."""
    store = _open_store(args)
    page = sanitize_page_name(args.page)
    try:
        store.write(page, sys.stdin.read())
    finally:
        store.close()
    sys.stderr.write(f"Saved page {page}\n")


def cmd_pages(args: argparse.Namespace) -> None:
    """List stored pages as JSON."""
    store = _open_store(args)
    try:
        json.dump(store.pages(), sys.stdout)
    finally:
        store.close()
    sys.stdout.write("\n")


def cmd_delete(args: argparse.Namespace) -> None:
    store = _open_store(args)
    page = sanitize_page_name(args.page)
    try:
        store.delete(page)
    finally:
        store.close()
    sys.stderr.write(f"Deleted page {page}\n")


def cmd_serve(args: argparse.Namespace) -> None:
    cfg = args.config or {}
    host = args.host or cfg.get("server_host", DEFAULT_HOST)
    port = args.port if args.port is not None else cfg.get("server_port", DEFAULT_PORT)
    store = _open_store(args, persistent=False)
    try:
        serve(store, host=host, port=port, formatter=_build_formatter(args))
    finally:
        store.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkpad",
        description="Shared text pages with automatic links",
    )
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--db", default=None, help=f"SQLite page store (default: {DEFAULT_DB})")
    parser.add_argument("--namespace", default=None, help="Page namespace within the store")
    parser.add_argument("--skip-kinds", default="", help="Comma-separated link kinds to leave as text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("format", help="Linkify text (stdin) to JSON")
    sub.add_parser("render", help="Linkify text (stdin) to HTML")
    p = sub.add_parser("get", help="Print a page")
    p.add_argument("page")
    p = sub.add_parser("put", help="Write a page from stdin")
    p.add_argument("page")
    sub.add_parser("pages", help="List pages")
    p = sub.add_parser("delete", help="Delete a page")
    p.add_argument("page")
    p = sub.add_parser("serve", help="Run the HTTP sidecar")
    p.add_argument("--host", default=None)
    p.add_argument("--port", type=int, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cmds = {
        "format": cmd_format,
        "render": cmd_render,
        "get": cmd_get,
        "put": cmd_put,
        "pages": cmd_pages,
        "delete": cmd_delete,
        "serve": cmd_serve,
    }
    try:
        args.config = load_from_yaml(args.config) if args.config else None
        cmds[args.command](args)
    except LinkpadError as e:
        sys.stderr.write(f"linkpad: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
