"""Formatter — the main API.  Turns page content into link tokens.

Usage:
    from linkpad import Formatter

    formatter = Formatter()          # reusable, stateless between calls

    lines = formatter.format("Visit qk.rs/info\n\nmail a@b.co")
    # [[Token("Visit "), Token("qk.rs/info", Link(BARE_DOMAIN, ...))],
    #  [],                                   # blank line placeholder
    #  [Token("mail "), Token("a@b.co", Link(EMAIL, "mailto:a@b.co", True))]]

Every line is handled on its own: patterns never span a newline, and the
tokens of a line always concatenate back to the line exactly.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .patterns import SCANNERS, Scanner, collect_matches, resolve_overlaps
from .types import Link, LinkKind, Match, Token


@dataclass
class FormatterConfig:
    """Configuration for the Formatter."""
    # Families never linked (their matches are dropped before overlap resolution)
    skip_kinds: set[LinkKind] = field(default_factory=set)
    # Extra scanners, run after the built-in ones
    custom_scanners: list[Scanner] = field(default_factory=list)


def build_tokens(line: str, matches: list[Match]) -> list[Token]:
    """Interleave plain-text runs with link tokens.

    ``matches`` must be ordered and non-overlapping, as returned by
    ``resolve_overlaps``.
    """
    tokens: list[Token] = []
    current = 0
    for m in matches:
        if m.start > current:
            tokens.append(Token(line[current:m.start]))
        tokens.append(Token(m.text, Link(m.kind, m.target, m.kind.external)))
        current = m.end
    if current < len(line):
        tokens.append(Token(line[current:]))
    return tokens


class Formatter:
    """Linkifies plain text, line by line."""

    def __init__(self, config: FormatterConfig | None = None) -> None:
        self.config = config or FormatterConfig()
        self._scanners: list[Scanner] = [*SCANNERS, *self.config.custom_scanners]

    def scan(self, line: str) -> list[Match]:
        """Accepted matches for one line, left to right."""
        candidates = collect_matches(line, self._scanners)
        if self.config.skip_kinds:
            candidates = [m for m in candidates if m.kind not in self.config.skip_kinds]
        return resolve_overlaps(candidates)

    def format_line(self, line: str) -> list[Token]:
        """Tokens for one line.  An empty line gives an empty list."""
        if not line:
            return []
        return build_tokens(line, self.scan(line))

    def format(self, content: str) -> list[list[Token]]:
        """Tokens for every line of ``content``; ``""`` gives ``[]``."""
        if not content:
            return []
        return [self.format_line(line) for line in content.split("\n")]


_default = Formatter()


def format_content(content: str) -> list[list[Token]]:
    """Format with the built-in families only."""
    return _default.format(content)
