"""Presentation — map formatted lines to HTML or JSON-ready data.

The formatter only produces data; everything markup-specific lives here
so another front end can swap this module out.
"""

from __future__ import annotations
from html import escape
from typing import Any

from .types import Token

_LINE = '<div class="line">{}</div>'
_BLANK = '<div class="line blank"><br></div>'
_EXTERNAL_ATTRS = ' target="_blank" rel="noopener noreferrer"'


def render_token(token: Token) -> str:
    if token.link is None:
        return escape(token.text, quote=False)
    link = token.link
    attrs = _EXTERNAL_ATTRS if link.external else ""
    return (
        f'<a href="{escape(link.target)}" class="link link-{link.kind.value}"{attrs}>'
        f"{escape(token.text, quote=False)}</a>"
    )


def render_html(lines: list[list[Token]]) -> str:
    """One ``div`` per line; blank lines keep their height with a ``br``."""
    out: list[str] = []
    for tokens in lines:
        if not tokens:
            out.append(_BLANK)
        else:
            out.append(_LINE.format("".join(render_token(t) for t in tokens)))
    return "\n".join(out)


def serialize_token(token: Token) -> dict[str, Any]:
    if token.link is None:
        return {"text": token.text}
    return {
        "text": token.text,
        "kind": token.link.kind.value,
        "target": token.link.target,
        "external": token.link.external,
    }


def serialize_lines(lines: list[list[Token]]) -> list[list[dict[str, Any]]]:
    return [[serialize_token(t) for t in tokens] for tokens in lines]
