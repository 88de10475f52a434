"""
Data models for product extraction.
"""

from dataclasses import dataclass
from typing import List, Tuple, Union


@dataclass(frozen=True)
class ExtractionRules:
    """
    Key-name heuristics used to recognize products in unknown JSON.

    The backend API has no published schema and differs between endpoints,
    so fields are found by probing common synonyms in order.
    """
    name_keys: Tuple[str, ...] = ("name", "title", "productName", "displayName")
    link_keys: Tuple[str, ...] = ("url", "link", "productUrl", "href", "slug")
    id_keys: Tuple[str, ...] = ("id", "productId", "code", "sku")

    # Price search, in order
    price_keys: Tuple[str, ...] = (
        "price", "currentPrice", "regularPrice", "value",
        "amount", "salePrice", "priceValue",
    )
    price_container_keys: Tuple[str, ...] = ("price", "prices")
    nested_price_keys: Tuple[str, ...] = ("value", "current", "regular", "amount")
    inner_value_keys: Tuple[str, ...] = ("value", "amount")
    price_substring: str = "price"

    currency_symbols: Tuple[str, ...] = ("₽",)

    # Fallback link built from a product id: <origin><search_path><id>
    search_path: str = "/search/?q="


DEFAULT_RULES = ExtractionRules()


@dataclass(frozen=True)
class Item:
    """A product record: the unit we export."""
    name: str
    price: str
    url: str

    @property
    def key(self) -> Tuple[str, str, str]:
        """Dedup key. Same triple means same record, whatever payload produced it."""
        return (self.name, self.price, self.url)

    def validate(self) -> 'Item':
        """Raise ValueError unless all fields are non-empty strings."""
        missing = [
            field_name for field_name in ("name", "price", "url")
            if not isinstance(getattr(self, field_name), str) or not getattr(self, field_name)
        ]
        if missing:
            raise ValueError(f"Item is missing required fields: {', '.join(missing)}")
        return self

    def to_row(self) -> List[str]:
        return [self.name, self.price, self.url]

    def to_dict(self) -> dict:
        return {"name": self.name, "price": self.price, "url": self.url}


@dataclass
class Payload:
    """One captured JSON response body and the URL it was requested from."""
    body: Union[bytes, str]
    origin_url: str
