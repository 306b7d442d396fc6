"""Tests for the HTTP sidecar."""

import http.client
import json
import threading
import urllib.error
import urllib.request
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from linkpad import PageStore, SqlitePageStore
from linkpad.server import PadServer


@pytest.fixture
def server():
    srv = PadServer(("127.0.0.1", 0), PageStore())
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    srv.server_close()


def _request(srv, method, path, body=None, raw=None):
    url = f"http://127.0.0.1:{srv.server_port}{path}"
    data = raw if raw is not None else (json.dumps(body).encode() if body is not None else None)
    req = urllib.request.Request(url, data=data, method=method)
    try:
        with urllib.request.urlopen(req) as resp:
            return resp.status, resp.headers.get("Content-Type"), resp.read().decode()
    except urllib.error.HTTPError as e:
        return e.code, e.headers.get("Content-Type"), e.read().decode()


def _json(srv, method, path, body=None, raw=None):
    status, _, text = _request(srv, method, path, body, raw)
    return status, json.loads(text)


def test_health(server):
    assert _json(server, "GET", "/health") == (200, {"status": "ok", "pages": 0})


def test_put_then_get_page(server):
    status, data = _json(server, "PUT", "/pages/Team%20Notes", {"content": "mail a@b.co"})
    assert (status, data) == (200, {"status": "saved", "page": "team-notes"})

    status, data = _json(server, "GET", "/pages/team-notes")
    assert status == 200
    assert data["content"] == "mail a@b.co"
    assert data["updated_at"] > 0
    assert data["lines"][0][1]["target"] == "mailto:a@b.co"

    assert _json(server, "GET", "/pages") == (200, {"pages": ["team-notes"]})


def test_missing_page_is_empty(server):
    status, data = _json(server, "GET", "/pages/nothing")
    assert status == 200
    assert data == {"page": "nothing", "content": "", "updated_at": None, "lines": []}


def test_delete_page(server):
    server.store.write("gone", "x")
    assert _json(server, "DELETE", "/pages/gone") == (200, {"status": "deleted", "page": "gone"})
    assert server.store.pages() == []


def test_format_endpoint(server):
    status, data = _json(server, "POST", "/format", {"content": "/home\n\nx"})
    assert status == 200
    assert data["lines"] == [
        [{"text": "/home", "kind": "internal_path", "target": "#/home", "external": False}],
        [],
        [{"text": "x"}],
    ]


def test_render_endpoint(server):
    server.store.write("notes", "see qk.rs")
    status, ctype, html = _request(server, "GET", "/render/notes")
    assert status == 200
    assert ctype.startswith("text/html")
    assert 'href="https://qk.rs"' in html


def test_bad_json_is_400(server):
    status, data = _json(server, "POST", "/format", raw=b"{not json")
    assert status == 400
    assert "invalid JSON" in data["error"]


def test_non_string_content_is_400(server):
    status, _ = _json(server, "PUT", "/pages/x", {"content": 5})
    assert status == 400


def test_unknown_route_is_404(server):
    assert _json(server, "GET", "/nope") == (404, {"error": "not found"})
    assert _json(server, "DELETE", "/pages") == (404, {"error": "not found"})


def test_invalid_utf8_body_is_400(server):
    status, data = _json(server, "POST", "/format", raw=b'{"content": "\xff\xfe"}')
    assert status == 400
    assert "UTF-8" in data["error"]


def test_bad_content_length_is_400(server):
    conn = http.client.HTTPConnection("127.0.0.1", server.server_port, timeout=5)
    try:
        conn.request("POST", "/format", body=b"{}", headers={"Content-Length": "abc"})
        resp = conn.getresponse()
        assert resp.status == 400
        assert json.loads(resp.read()) == {"error": "invalid Content-Length"}
    finally:
        conn.close()


def test_failed_store_is_500(tmp_path):
    store = SqlitePageStore(db_path=tmp_path / "pages.db")
    store.close()
    srv = PadServer(("127.0.0.1", 0), store)
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    try:
        status, data = _json(srv, "GET", "/pages")
        assert status == 500
        assert "error" in data
        assert _json(srv, "GET", "/health")[0] == 500
    finally:
        srv.shutdown()
        srv.server_close()
