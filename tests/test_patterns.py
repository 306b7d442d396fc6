"""Tests for the pattern recognizers and the overlap resolver."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from linkpad.patterns import (
    collect_matches,
    is_plausible_phone,
    resolve_overlaps,
    scan_bare_domains,
    scan_emails,
    scan_full_urls,
    scan_internal_paths,
    scan_phones,
    scan_protocol_links,
)
from linkpad.types import LinkKind, Match


def _texts(matches):
    return [m.text for m in matches]


def _m(start, length, kind=LinkKind.FULL_URL):
    return Match(start=start, length=length, text="x" * length, kind=kind, target="t")


# ── Full URLs ────────────────────────────────────────────────────────

def test_full_url_detection():
    matches = scan_full_urls("Visit https://example.com/a?b=1 now")
    assert len(matches) == 1
    assert matches[0].start == 6
    assert matches[0].text == "https://example.com/a?b=1"
    assert matches[0].target == "https://example.com/a?b=1"
    assert matches[0].kind is LinkKind.FULL_URL


def test_full_url_case_insensitive_scheme():
    assert _texts(scan_full_urls("HTTP://Example.com")) == ["HTTP://Example.com"]


def test_full_url_requires_authority():
    for line in ("http:///x", "https://.x", "https://?q", "https://$x", "https:// x", "https://"):
        assert scan_full_urls(line) == [], line


def test_full_url_stops_at_whitespace():
    assert _texts(scan_full_urls("a http://x.io/1 b https://y.io c")) == [
        "http://x.io/1",
        "https://y.io",
    ]


# ── tel: links ───────────────────────────────────────────────────────

def test_protocol_link_detection():
    matches = scan_protocol_links("dial tel:+14155552671 now")
    assert _texts(matches) == ["tel:+14155552671"]
    assert matches[0].target == "tel:+14155552671"


def test_protocol_link_caps_digits():
    assert _texts(scan_protocol_links("tel:1234567890123456789")) == ["tel:123456789012345"]


def test_protocol_link_needs_digits():
    assert scan_protocol_links("tel:+") == []


# ── Emails ───────────────────────────────────────────────────────────

def test_email_detection():
    matches = scan_emails("mail me: a.b+tag@sub.example.co")
    assert _texts(matches) == ["a.b+tag@sub.example.co"]
    assert matches[0].target == "mailto:a.b+tag@sub.example.co"
    assert matches[0].start == 9


def test_email_requires_tld():
    assert scan_emails("x@y") == []
    assert scan_emails("x@y.c") == []


# ── Bare domains ─────────────────────────────────────────────────────

def test_bare_domain_with_path():
    matches = scan_bare_domains("see qk.rs/info for details.")
    assert _texts(matches) == ["qk.rs/info"]
    assert matches[0].start == 4
    assert matches[0].target == "https://qk.rs/info"


def test_bare_domain_excludes_trailing_punctuation():
    assert _texts(scan_bare_domains("go to qk.rs.")) == ["qk.rs"]
    assert _texts(scan_bare_domains("a.qk.rs/x?y=1!")) == ["a.qk.rs/x?y=1"]
    assert _texts(scan_bare_domains("qk.rs/")) == ["qk.rs"]


def test_bare_domain_needs_whitespace_anchor():
    assert scan_bare_domains("foo@qk.rs") == []
    assert scan_bare_domains("https://qk.rs") == []
    assert scan_bare_domains("(qk.rs)") == []


def test_bare_domain_tld_is_whole_label():
    assert scan_bare_domains("example.com1") == []
    assert scan_bare_domains("v1.2.3") == []


# ── Phones ───────────────────────────────────────────────────────────

def test_phone_international():
    matches = scan_phones("Call +1 415-555-2671")
    assert _texts(matches) == ["+1 415-555-2671"]
    assert matches[0].start == 5
    assert matches[0].target == "tel:+14155552671"


def test_phone_local_and_parenthesized():
    assert _texts(scan_phones("call 555-1234")) == ["555-1234"]
    matches = scan_phones("(415) 555-2671")
    assert _texts(matches) == ["(415) 555-2671"]
    assert matches[0].target == "tel:4155552671"


def test_phone_rejects_unformatted_long_runs():
    assert scan_phones("id 1234567890") == []
    assert _texts(scan_phones("+14155552671")) == ["+14155552671"]


def test_phone_rejects_short_runs():
    assert scan_phones("order 123456") == []


def test_phone_needs_whitespace_anchor():
    assert scan_phones("x1234567") == []


def test_plausible_phone_heuristic():
    assert is_plausible_phone("5551234")
    assert is_plausible_phone("415 555 2671")
    assert is_plausible_phone("+4155552671")
    assert not is_plausible_phone("4155552671")
    assert not is_plausible_phone("123456")
    assert not is_plausible_phone("+1 234 567 890 123 456")


# ── Internal paths ───────────────────────────────────────────────────

def test_internal_paths():
    matches = scan_internal_paths("/home and /a/b-c are paths")
    assert _texts(matches) == ["/home", "/a/b-c"]
    assert [m.target for m in matches] == ["#/home", "#/a/b-c"]
    assert all(not m.kind.external for m in matches)


def test_internal_path_needs_anchor_and_body():
    assert scan_internal_paths("a/b") == []
    assert scan_internal_paths("see /") == []
    assert scan_internal_paths("http://x/y") == []


# ── Aggregation and overlap resolution ───────────────────────────────

def test_collect_keeps_overlaps():
    matches = collect_matches("write bob.smith@example.com")
    kinds = {m.kind for m in matches}
    assert LinkKind.EMAIL in kinds
    assert LinkKind.BARE_DOMAIN in kinds


def test_resolve_prefers_longer_at_same_start():
    short, long = _m(0, 3), _m(0, 8)
    assert resolve_overlaps([short, long]) == [long]


def test_resolve_prefers_earliest_start():
    first, later = _m(0, 5), _m(3, 10)
    assert resolve_overlaps([later, first]) == [first]


def test_resolve_keeps_adjacent_matches():
    a, b = _m(0, 3), _m(3, 2)
    assert resolve_overlaps([b, a]) == [a, b]


def test_resolve_full_tie_keeps_first_candidate():
    a = _m(2, 4, LinkKind.EMAIL)
    b = _m(2, 4, LinkKind.BARE_DOMAIN)
    assert resolve_overlaps([a, b]) == [a]


def test_resolve_is_order_independent():
    ms = [_m(10, 2), _m(0, 4), _m(2, 5), _m(12, 1), _m(0, 2)]
    expected = [_m(0, 4), _m(10, 2), _m(12, 1)]
    assert resolve_overlaps(ms) == expected
    assert resolve_overlaps(list(reversed(ms))) == expected


def test_resolve_empty():
    assert resolve_overlaps([]) == []
