"""HTTP sidecar server for linkpad.

Runs as a lightweight ``http.server`` on localhost so any front end can
read, write and linkify pages without embedding Python.

Endpoints:
    GET    /health         — Health check
    GET    /pages          — List pages
    GET    /pages/<name>   — Page content plus formatted lines
    PUT    /pages/<name>   — Write page content ({"content": "..."})
    POST   /pages/<name>   — Same as PUT
    DELETE /pages/<name>   — Delete a page
    GET    /render/<name>  — Page rendered as HTML
    POST   /format         — Format ad-hoc text ({"content": "..."})

All endpoints except /render expect/return JSON.
"""

from __future__ import annotations
import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import unquote, urlsplit

from .config import DEFAULT_HOST, DEFAULT_PORT
from .errors import StoreError
from .formatter import Formatter
from .pages import sanitize_page_name
from .render import render_html, serialize_lines
from .store import PageStore
from .store_sqlite import SqlitePageStore

logger = logging.getLogger(__name__)


class BadRequest(ValueError):
    pass


class PadServer(HTTPServer):
    """HTTPServer carrying the store and formatter its handlers use."""

    def __init__(
        self,
        address: tuple[str, int],
        store: PageStore | SqlitePageStore,
        formatter: Formatter | None = None,
    ) -> None:
        self.store = store
        self.formatter = formatter or Formatter()
        super().__init__(address, PadHandler)


class PadHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the linkpad sidecar."""

    server: PadServer

    def _read_json(self) -> dict[str, Any]:
        try:
            length = int(self.headers.get("Content-Length", 0))
        except ValueError:
            raise BadRequest("invalid Content-Length") from None
        if length < 0:
            raise BadRequest("invalid Content-Length")
        try:
            body = self.rfile.read(length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise BadRequest(f"body is not valid UTF-8: {e}") from e
        if not body:
            return {}
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise BadRequest(f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise BadRequest("expected a JSON object")
        return data

    def _read_content(self) -> str:
        content = self._read_json().get("content", "")
        if not isinstance(content, str):
            raise BadRequest("'content' must be a string")
        return content

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self._send(status, "application/json", body)

    def _respond_html(self, status: int, html: str) -> None:
        self._send(status, "text/html; charset=utf-8", html.encode("utf-8"))

    def _send(self, status: int, content_type: str, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - " + format, self.address_string(), *args)

    def _route(self) -> tuple[str, str | None]:
        """Split the path into a resource and an optional page name."""
        path = urlsplit(self.path).path
        parts = path.strip("/").split("/", 1)
        resource = parts[0]
        page = sanitize_page_name(unquote(parts[1])) if len(parts) > 1 else None
        return resource, page

    def _page_payload(self, page: str) -> dict[str, Any]:
        store = self.server.store
        data = store.get_data(page)
        content = data.content if data else ""
        return {
            "page": page,
            "content": content,
            "updated_at": data.updated_at if data else None,
            "lines": serialize_lines(self.server.formatter.format(content)),
        }

    def _handle(self, method: str) -> None:
        try:
            resource, page = self._route()
            store = self.server.store

            if method == "GET" and resource == "health" and page is None:
                self._respond(200, {"status": "ok", "pages": store.size})

            elif method == "GET" and resource == "pages" and page is None:
                self._respond(200, {"pages": store.pages()})

            elif method == "GET" and resource == "pages":
                self._respond(200, self._page_payload(page))

            elif method in ("PUT", "POST") and resource == "pages" and page is not None:
                store.write(page, self._read_content())
                self._respond(200, {"status": "saved", "page": page})

            elif method == "DELETE" and resource == "pages" and page is not None:
                store.delete(page)
                self._respond(200, {"status": "deleted", "page": page})

            elif method == "GET" and resource == "render" and page is not None:
                lines = self.server.formatter.format(store.get(page))
                self._respond_html(200, render_html(lines))

            elif method == "POST" and resource == "format" and page is None:
                lines = self.server.formatter.format(self._read_content())
                self._respond(200, {"lines": serialize_lines(lines)})

            else:
                self._respond(404, {"error": "not found"})

        except BadRequest as e:
            self._respond(400, {"error": str(e)})
        except StoreError as e:
            logger.error("%s %s failed: %s", method, self.path, e)
            self._respond(500, {"error": str(e)})
        except Exception as e:
            logger.exception("%s %s crashed", method, self.path)
            self._respond(500, {"error": str(e)})

    def do_GET(self) -> None:
        self._handle("GET")

    def do_POST(self) -> None:
        self._handle("POST")

    def do_PUT(self) -> None:
        self._handle("PUT")

    def do_DELETE(self) -> None:
        self._handle("DELETE")


def serve(
    store: PageStore | SqlitePageStore,
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    formatter: Formatter | None = None,
) -> None:
    """Start the linkpad HTTP sidecar and block until interrupted."""
    server = PadServer((host, port), store, formatter)
    print(f"linkpad listening on http://{host}:{server.server_port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down...")
    finally:
        server.server_close()


if __name__ == "__main__":
    import argparse
    from .config import DEFAULT_DB
    parser = argparse.ArgumentParser(description="linkpad HTTP sidecar")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--db", default=DEFAULT_DB)
    args = parser.parse_args()
    store = SqlitePageStore(db_path=args.db)
    try:
        serve(store, host=args.host, port=args.port)
    finally:
        store.close()
