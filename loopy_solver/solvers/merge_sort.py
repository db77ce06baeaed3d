"""
Merge Sort
==========
Deterministic stable merge sort used to order speculative guesses.

Guess candidates are ranked by a priority score; candidates with equal
scores must keep the order they were discovered in so that the same grid
always produces the same sequence of guesses.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def merge_sort(
    seq: Sequence[T],
    *,
    key: Optional[Callable[[T], Any]] = None,
    reverse: bool = False,
) -> List[T]:
    """
    Return a new list containing items from *seq* in sorted order.

    Parameters
    ----------
    seq : sequence
        Input items.
    key : callable, optional
        One-argument function extracting the comparison key.
    reverse : bool
        Sort in descending order. Equal elements still keep their
        original relative order.

    Returns
    -------
    list
        A fresh sorted list. *seq* is never mutated.
    """
    items: List[T] = list(seq)
    if len(items) <= 1:
        return items

    mid = len(items) // 2
    left = merge_sort(items[:mid], key=key, reverse=reverse)
    right = merge_sort(items[mid:], key=key, reverse=reverse)
    return _merge(left, right, key, reverse)


def _merge(
    left: List[T],
    right: List[T],
    key: Optional[Callable[[T], Any]],
    reverse: bool,
) -> List[T]:
    result: List[T] = []
    i = j = 0

    while i < len(left) and j < len(right):
        lk = key(left[i]) if key is not None else left[i]
        rk = key(right[j]) if key is not None else right[j]
        # Ties take from the left run first
        take_left = (rk <= lk) if reverse else (lk <= rk)
        if take_left:
            result.append(left[i])
            i += 1
        else:
            result.append(right[j])
            j += 1

    result.extend(left[i:])
    result.extend(right[j:])
    return result
