# checklist/utils/urls.py
from __future__ import annotations
from urllib.parse import urlparse
from .. import config

__all__ = ["article_url", "is_url"]


def article_url(article_id: str) -> str:
    """Public page of an article on the fact-checking site."""
    return f"{config.ARTICLE_URL_BASE}{article_id}"


def is_url(value) -> bool:
    """
    True for absolute http(s) URLs.

    Used by the exporter to decide which cells get a clickable link.
    """
    if not isinstance(value, str) or not value:
        return False
    v = value.strip()
    if not v or any(ch.isspace() for ch in v):
        return False
    p = urlparse(v)
    return p.scheme in {"http", "https"} and bool(p.netloc)
