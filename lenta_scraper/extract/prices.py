"""
Price normalization.

Backends encode prices every which way: 89.9, "89,90 ₽", "1 234,50",
{"value": 89.9}, {"price": {"regularPrice": ...}}. Everything is reduced to
one canonical decimal string ("89.9", "1234.50") or rejected.
"""

import math
import re
from decimal import Decimal
from typing import Any, Dict, Optional

from ..models import ExtractionRules, DEFAULT_RULES


PRICE_RE = re.compile(r'[0-9]+(\.[0-9]+)?')

# Regular, no-break, narrow no-break and thin spaces used as thousands separators
GROUPING_SPACES = (' ', '\u00a0', '\u202f', '\u2009')


class PriceNormalizer:
    """Converts raw field values to canonical price strings."""

    def __init__(self, rules: ExtractionRules = DEFAULT_RULES):
        self.rules = rules

    def normalize(self, value: Any) -> Optional[str]:
        """
        Normalize a single field value.

        Returns the canonical decimal string, or None if the value is not a
        price (booleans, null, arrays, unparseable strings, non-positive numbers).
        """
        # bool is an int subclass, check it first
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return self._from_number(value)
        if isinstance(value, str):
            return self._from_string(value)
        if isinstance(value, dict):
            for key in self.rules.inner_value_keys:
                if key in value:
                    return self.normalize(value[key])
        return None

    def find_price(self, obj: Dict[str, Any]) -> Optional[str]:
        """
        Search a candidate object for a price.

        Order:
            1. well-known top-level keys
            2. keys inside a "price"/"prices" sub-object
            3. any own key whose name contains "price"
        """
        rules = self.rules

        for key in rules.price_keys:
            if key in obj:
                price = self.normalize(obj[key])
                if price:
                    return price

        for container_key in rules.price_container_keys:
            container = obj.get(container_key)
            if not isinstance(container, dict):
                continue
            for key, value in container.items():
                if rules.price_substring in key.lower():
                    price = self.normalize(value)
                    if price:
                        return price
            for key in rules.nested_price_keys:
                price = self.normalize(container.get(key))
                if price:
                    return price

        for key, value in obj.items():
            if rules.price_substring in key.lower():
                price = self.normalize(value)
                if price:
                    return price

        return None

    def _from_number(self, value) -> Optional[str]:
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if value <= 0:
            return None
        if isinstance(value, int) or value.is_integer():
            return str(int(value))
        # repr() is the shortest exact round-trip form; Decimal drops the exponent
        return format(Decimal(repr(value)), 'f')

    def _from_string(self, value: str) -> Optional[str]:
        text = value
        for symbol in self.rules.currency_symbols:
            text = text.replace(symbol, '')
        text = text.strip()
        for space in GROUPING_SPACES:
            text = text.replace(space, '')
        if not text:
            return None
        text = text.replace(',', '.')
        if PRICE_RE.fullmatch(text):
            return text
        return None


_default = PriceNormalizer()


def normalize_price(value: Any) -> Optional[str]:
    """Normalize a value with the default rules."""
    return _default.normalize(value)
