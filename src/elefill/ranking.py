"""Output collection ordering."""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def sort_by_pt(records: Sequence[T]) -> tuple[list[T], list[int]]:
    """Stable sort by descending `pt`.

    Returns the sorted records and, for each final position, the index the
    record had before sorting. Equal-pt records keep their input order.
    """
    order = sorted(range(len(records)), key=lambda i: records[i].pt, reverse=True)
    return [records[i] for i in order], order
