"""Outbound link extraction from escaped HTML embedded in feed entries."""

from __future__ import annotations

from html import unescape
from urllib.parse import urlsplit

from selectolax.lexbor import LexborHTMLParser

# Hosts of the aggregator platform itself; links to them are "internal".
SELF_DOMAINS = ("reddit.com", "redditmedia.com")
SHORT_LINK_DOMAINS = ("redd.it",)


def is_self_host(host: str) -> bool:
    host = host.lower()
    if host in SHORT_LINK_DOMAINS:
        return True
    return any(host == domain or host.endswith("." + domain) for domain in SELF_DOMAINS)


def _qualifies(href: str) -> bool:
    try:
        parts = urlsplit(href)
        host = parts.hostname or ""
    except ValueError:
        return False
    if parts.scheme not in ("http", "https") or not host:
        return False
    return not is_self_host(host)


def resolve_outbound_link(escaped_html: str) -> tuple[str, bool]:
    """Return the first non-self http(s) anchor in ``escaped_html``.

    Entity-escaped content (``&lt;a href=...&gt;``) is unescaped before
    scanning; already-decoded markup passes through unchanged. Anchors are
    visited in document order; the result is ``("", False)`` when nothing
    qualifies.
    """

    if not escaped_html or not escaped_html.strip():
        return "", False
    markup = unescape(escaped_html)
    for node in LexborHTMLParser(markup).css("a"):
        href = (node.attributes.get("href") or "").strip()
        if href and _qualifies(href):
            return href, True
    return "", False


__all__ = ["resolve_outbound_link", "is_self_host", "SELF_DOMAINS"]
