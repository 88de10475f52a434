"""
Product link reconstruction.

API payloads rarely carry a full product URL: usually a relative path, a slug
or just an id. We rebuild an absolute link from the origin (scheme + host) of
the request that returned the payload.
"""

from typing import Optional
from urllib.parse import urlparse, quote_plus

from ..models import ExtractionRules, DEFAULT_RULES


def origin_of(url: str) -> str:
    """Return "scheme://host" for url, or "" if it can't be parsed."""
    try:
        parsed = urlparse(url)
    except (ValueError, TypeError, AttributeError):
        return ""
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme}://{parsed.netloc}"


def is_absolute(link: str) -> bool:
    try:
        parsed = urlparse(link)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


class LinkResolver:
    """Turns partial links into absolute URLs relative to a payload's origin."""

    def __init__(self, rules: ExtractionRules = DEFAULT_RULES):
        self.rules = rules

    def resolve(self, link: Optional[str], origin_url: str) -> Optional[str]:
        """
        Resolve an extracted link against the payload origin.

        Returns None when the link is empty, or relative while the origin is
        unusable; the caller then moves on to the next fallback.
        """
        if not link:
            return None
        link = link.strip()
        if not link:
            return None
        if is_absolute(link):
            return link

        origin = origin_of(origin_url)
        if not origin:
            return None
        if link.startswith('//'):
            # Scheme-relative: //cdn.host/path
            return f"{urlparse(origin).scheme}:{link}"
        if link.startswith('/'):
            return origin + link
        return f"{origin}/{link}"

    def search_url(self, identifier: str, origin_url: str) -> Optional[str]:
        """Build a search link for a product id, e.g. https://host/search/?q=123."""
        origin = origin_of(origin_url)
        if not origin or not identifier:
            return None
        return origin + self.rules.search_path + quote_plus(identifier)
