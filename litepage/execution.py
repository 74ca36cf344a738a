"""Execution primitives that work on streams of records."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from litepage.record import Record


def filter_records(
    records: Iterable[Record], predicate: Callable[[Record], bool]
) -> Iterator[Record]:
    """Yield only the records for which ``predicate`` is true.

    Errors raised by the source or the predicate end the stream.
    """
    for record in records:
        if predicate(record):
            yield record