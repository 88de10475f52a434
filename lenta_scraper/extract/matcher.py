"""
Product matcher.

Decides whether a JSON object looks like a product and, if so, builds an Item
from it. An object qualifies only when it has BOTH a name and a price: plenty
of objects have a title (banners, categories, promo blocks) but very few of
them also carry a price.
"""

from typing import Any, Dict, List, Optional

from ..models import Item, ExtractionRules, DEFAULT_RULES
from .walk import iter_objects
from .prices import PriceNormalizer
from .links import LinkResolver
from ..logger import get_logger

log = get_logger('extract')


def normalize_space(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return ' '.join(text.split())


class ProductMatcher:
    """Find product-like objects in arbitrary decoded JSON."""

    def __init__(
        self,
        rules: ExtractionRules = DEFAULT_RULES,
        normalizer: Optional[PriceNormalizer] = None,
        resolver: Optional[LinkResolver] = None,
    ):
        self.rules = rules
        self.normalizer = normalizer or PriceNormalizer(rules)
        self.resolver = resolver or LinkResolver(rules)

    def extract(self, value: Any, origin_url: str) -> List[Item]:
        """
        Extract every product in a decoded payload.

        Args:
            value: Decoded JSON (object, array or scalar)
            origin_url: URL of the request that returned the payload

        Returns:
            Items in document order. Duplicates are kept; deduplication
            is the collector's job.
        """
        items = []
        for obj in iter_objects(value):
            item = self.match(obj, origin_url)
            if item is not None:
                items.append(item)
        log.debug(f"{len(items)} product(s) in payload from {origin_url}")
        return items

    def match(self, obj: Dict[str, Any], origin_url: str) -> Optional[Item]:
        """Build an Item from obj, or None if it doesn't look like a product."""
        name = self._pick_string(obj, self.rules.name_keys)
        if not name:
            return None

        price = self.normalizer.find_price(obj)
        if not price:
            return None

        url = self._find_url(obj, origin_url)
        return Item(name=normalize_space(name), price=price, url=url)

    def _find_url(self, obj: Dict[str, Any], origin_url: str) -> str:
        # Explicit link field
        link = self._pick_string(obj, self.rules.link_keys)
        url = self.resolver.resolve(link, origin_url)
        if url:
            return url

        # Search link built from an id / sku
        identifier = self._pick_identifier(obj)
        if identifier:
            url = self.resolver.search_url(identifier, origin_url)
            if url:
                return url

        # Last resort: the API URL itself, so there's at least an entry point
        return origin_url

    def _pick_string(self, obj: Dict[str, Any], keys) -> Optional[str]:
        """First non-blank string value among keys."""
        for key in keys:
            value = obj.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return None

    def _pick_identifier(self, obj: Dict[str, Any]) -> Optional[str]:
        for key in self.rules.id_keys:
            value = obj.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            # Numeric ids are common in JSON APIs
            if isinstance(value, int) and not isinstance(value, bool):
                return str(value)
        return None


_default = ProductMatcher()


def extract_items(value: Any, origin_url: str) -> List[Item]:
    """Extract products from a decoded payload with the default rules."""
    return _default.extract(value, origin_url)
