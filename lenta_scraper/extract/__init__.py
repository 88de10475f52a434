"""
Schema-less product extraction from captured JSON payloads.
"""

from .walk import walk, iter_objects
from .prices import PriceNormalizer, normalize_price
from .links import LinkResolver, origin_of
from .matcher import ProductMatcher, extract_items, normalize_space

__all__ = [
    'walk',
    'iter_objects',
    'PriceNormalizer',
    'normalize_price',
    'LinkResolver',
    'origin_of',
    'ProductMatcher',
    'extract_items',
    'normalize_space',
]
