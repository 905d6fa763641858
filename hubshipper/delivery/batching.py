from itertools import islice
from typing import Any, Dict, Iterable, Iterator, List

from hubshipper.constants import BATCH_RECORDS_KEY, DEFAULT_MAX_BATCH_SIZE


def chunked(records: Iterable[Any], size: int) -> Iterator[List[Any]]:
    """
    Split ``records`` into consecutive lists of at most ``size`` items.

    Raises:
        ValueError: If ``size`` is lower than 1.
    """
    if size < 1:
        raise ValueError(f"Batch size must be at least 1, got {size}")

    iterator = iter(records)
    while True:
        group = list(islice(iterator, size))
        if not group:
            return
        yield group


def wrap_batch(group: List[Any]) -> Dict[str, List[Any]]:
    return {BATCH_RECORDS_KEY: group}


def assemble_units(
    records: Iterable[Any],
    batch_enabled: bool = False,
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
) -> Iterator[Any]:
    """
    Turn records into delivery units, one unit per HTTP request.

    With batching disabled every record is its own unit. Otherwise records are
    grouped in order into ``{"records": [...]}`` units of at most
    ``max_batch_size`` records.
    """
    if not batch_enabled:
        yield from records
        return

    for group in chunked(records, max_batch_size):
        yield wrap_batch(group)
