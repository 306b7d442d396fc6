"""Pattern recognizers — one scanner per link family.

Every scanner takes a single line (no newlines) and returns all of its
matches, left to right and non-overlapping among themselves.  Scanners
know nothing about each other; overlaps between families are settled
afterwards by ``resolve_overlaps``.

Offsets are ``str`` indices, so matches from different scanners always
compare against each other correctly.
"""

from __future__ import annotations
import re
from typing import Callable, Iterable

from .types import LinkKind, Match

Scanner = Callable[[str], list[Match]]

# Start of line or right after whitespace.  A lookbehind keeps the anchor
# character itself out of the match span.
_ANCHOR = r"(?:^|(?<=\s))"

_FULL_URL = re.compile(r"https?://[^\s/$.?#]\S*", re.IGNORECASE)

_PROTOCOL_LINK = re.compile(r"tel:\+?[0-9]{1,15}", re.IGNORECASE)

# Local part starts only at the head of a run, so a line without "@"
# is scanned once instead of once per offset.
_EMAIL = re.compile(
    r"(?<![a-zA-Z0-9._%+\-])[a-zA-Z0-9._%+\-]+"
    r"@(?:[a-zA-Z0-9\-]+\.)+[a-zA-Z]{2,}"
)

_BARE_DOMAIN = re.compile(
    _ANCHOR
    + r"(?:[a-zA-Z0-9\-]+\.)+[a-zA-Z]{2,}(?![a-zA-Z0-9\-])"
    r"(?:/\S*[^\s.,?!])?"       # path must not end in trailing punctuation
)

_PHONE = re.compile(
    _ANCHOR
    + r"\+?\(?[0-9]{1,4}\)?"
    r"(?:[\s.\-]?\(?[0-9]{1,4}\)?){1,5}"
    r"(?:[\s.\-]?[0-9]{1,10}){1,5}"
)
_PHONE_SEPARATOR = re.compile(r"[\s.\-]")
_NON_DIGIT = re.compile(r"[^0-9]")
_NON_DIAL = re.compile(r"[^0-9+]")

_INTERNAL_PATH = re.compile(_ANCHOR + r"/[a-zA-Z0-9_/\-]+")

PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15
# Unformatted runs this long look more like IDs or timestamps than phones.
PHONE_UNFORMATTED_LIMIT = 10


def _scan(
    pattern: re.Pattern,
    line: str,
    kind: LinkKind,
    target: Callable[[str], str],
) -> list[Match]:
    return [
        Match(
            start=m.start(),
            length=m.end() - m.start(),
            text=m.group(),
            kind=kind,
            target=target(m.group()),
        )
        for m in pattern.finditer(line)
    ]


def scan_full_urls(line: str) -> list[Match]:
    """``http://`` and ``https://`` links, linked verbatim."""
    return _scan(_FULL_URL, line, LinkKind.FULL_URL, lambda text: text)


def scan_protocol_links(line: str) -> list[Match]:
    """Explicit ``tel:`` links, linked verbatim."""
    return _scan(_PROTOCOL_LINK, line, LinkKind.PROTOCOL_LINK, lambda text: text)


def scan_emails(line: str) -> list[Match]:
    return _scan(_EMAIL, line, LinkKind.EMAIL, lambda text: f"mailto:{text}")


def scan_bare_domains(line: str) -> list[Match]:
    """Protocol-less domains such as ``qk.rs`` or ``a.qk.rs/info``."""
    return _scan(_BARE_DOMAIN, line, LinkKind.BARE_DOMAIN, lambda text: f"https://{text}")


def is_plausible_phone(text: str) -> bool:
    """Digit-count heuristic applied after the phone pattern matched.

    7 to 15 digits, and long (10+) runs only when they carry a separator
    or a leading ``+``.
    """
    digits = len(_NON_DIGIT.sub("", text))
    if not PHONE_MIN_DIGITS <= digits <= PHONE_MAX_DIGITS:
        return False
    return (
        digits < PHONE_UNFORMATTED_LIMIT
        or _PHONE_SEPARATOR.search(text) is not None
        or text.startswith("+")
    )


def scan_phones(line: str) -> list[Match]:
    matches = _scan(
        _PHONE, line, LinkKind.PHONE, lambda text: "tel:" + _NON_DIAL.sub("", text)
    )
    return [m for m in matches if is_plausible_phone(m.text)]


def scan_internal_paths(line: str) -> list[Match]:
    """In-app paths like ``/home`` or ``/a/b-c``, linked as ``#/...``."""
    return _scan(_INTERNAL_PATH, line, LinkKind.INTERNAL_PATH, lambda text: f"#{text}")


# Order matters only as the final tie-break for identical spans.
SCANNERS: list[Scanner] = [
    scan_full_urls,
    scan_protocol_links,
    scan_emails,
    scan_bare_domains,
    scan_phones,
    scan_internal_paths,
]


def collect_matches(line: str, scanners: Iterable[Scanner] = SCANNERS) -> list[Match]:
    """Run every scanner over one line.  Overlaps and duplicates are kept."""
    matches: list[Match] = []
    for scanner in scanners:
        matches.extend(scanner(line))
    return matches


def resolve_overlaps(matches: Iterable[Match]) -> list[Match]:
    """Reduce candidates to a non-overlapping, left-to-right selection.

    Earliest start wins; at equal start the longer match wins.  A candidate
    overlapping an accepted one is dropped whole, never trimmed.
    """
    ranked = sorted(matches, key=lambda m: (m.start, -m.length))
    taken: list[Match] = []
    last_end = -1
    for m in ranked:
        if m.start >= last_end:
            taken.append(m)
            last_end = m.end
    return taken


def scan_line(line: str) -> list[Match]:
    """All built-in families, resolved.  Returns accepted matches in order."""
    return resolve_overlaps(collect_matches(line))
