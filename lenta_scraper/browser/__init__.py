"""
Browser side of the scraper: session, response capture, address selection
and category browsing.
"""

from .session import BrowserSession
from .capture import ResponseCapture
from .address import select_address
from .collect import collect_category

__all__ = [
    'BrowserSession',
    'ResponseCapture',
    'select_address',
    'collect_category',
]
