"""
CSV export of collected items.
"""

import csv
from pathlib import Path
from typing import Iterable, Union

from .models import Item
from .logger import get_logger

log = get_logger('output')

CSV_HEADER = ["name", "price", "url"]


def write_csv(path: Union[str, Path], items: Iterable[Item]) -> Path:
    """
    Write items to a CSV file with a name,price,url header.

    Returns:
        Path of the written file
    """
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for item in items:
            writer.writerow(item.to_row())
            count += 1

    log.info(f"Wrote {count} item(s) to {path}")
    return path
