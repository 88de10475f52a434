"""
Lenta Scraper

Collects product listings (name, price, link) from a store website by
intercepting the JSON responses its frontend fetches, instead of parsing
page markup.
"""

from .models import Item, Payload, ExtractionRules, DEFAULT_RULES
from .collector import DedupCollector

__all__ = [
    'Item',
    'Payload',
    'ExtractionRules',
    'DEFAULT_RULES',
    'DedupCollector',
]
