"""
Traversal of decoded JSON.

The API shape can change at any time, so instead of mapping responses onto
fixed structures we visit every object in the document and let the matcher
decide which ones look like products.
"""

from typing import Any, Callable, Dict, Iterator


def iter_objects(value: Any) -> Iterator[Dict[str, Any]]:
    """
    Yield every object (dict) in a decoded JSON value, pre-order.

    Uses an explicit stack, so nesting depth is bounded by memory rather
    than by the interpreter's recursion limit.
    """
    stack = [value]
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            yield node
            stack.extend(reversed(list(node.values())))
        elif isinstance(node, list):
            stack.extend(reversed(node))
        # str / int / float / bool / None are leaves


def walk(value: Any, visit: Callable[[Dict[str, Any]], None]) -> None:
    """Call visit(obj) once for every object node in value."""
    for obj in iter_objects(value):
        visit(obj)
