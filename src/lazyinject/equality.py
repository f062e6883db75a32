"""Structural comparison of dependency values.

The injector uses :func:`deep_equal` to decide whether re-registering a
dependency actually changed it. Comparison follows the shape of the value
rather than object identity: two separately built dicts with the same keys
and values are equal, so re-registering a rebuilt configuration does not
re-trigger the resolvers that already consumed it.

Self-referencing containers are supported. While a pair of containers is
being compared it is assumed equal, which makes comparison of two cyclic
values with the same shape terminate and succeed.
"""

from collections.abc import Mapping
from typing import Any

from lazyinject.domain import UNSET

__all__ = ["deep_equal"]


def deep_equal(left: Any, right: Any) -> bool:
    """Return whether ``left`` and ``right`` have the same structure and values.

    Example:
        >>> deep_equal({"a": [1, 2]}, {"a": [1, 2]})   # True
        >>> deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})  # True
        >>> deep_equal([1, 2], (1, 2))                 # False
        >>> deep_equal(True, 1)                        # False
        >>> deep_equal(None, UNSET)                    # False
    """
    return _compare(left, right, set())


def _compare(left: Any, right: Any, in_progress: set[tuple[int, int]]) -> bool:
    if left is right:
        return True
    if left is UNSET or right is UNSET:
        return False
    if isinstance(left, bool) != isinstance(right, bool):
        return False

    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return _guarded(left, right, in_progress, _compare_mappings)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if isinstance(left, tuple) != isinstance(right, tuple):
            return False
        return _guarded(left, right, in_progress, _compare_sequences)

    if isinstance(left, float) and isinstance(right, float) and left != left and right != right:
        return True

    result = left == right
    if isinstance(result, bool):
        return result
    # Elementwise comparisons (arrays, query expressions) count as changed
    # unless they collapse to a single truth value.
    try:
        return bool(result)
    except (TypeError, ValueError):
        return False


def _guarded(left, right, in_progress, compare) -> bool:
    key = (id(left), id(right))
    if key in in_progress:
        return True
    in_progress.add(key)
    try:
        return compare(left, right, in_progress)
    finally:
        in_progress.discard(key)


def _compare_mappings(left: Mapping, right: Mapping, in_progress) -> bool:
    if left.keys() != right.keys():
        return False
    return all(_compare(left[key], right[key], in_progress) for key in left)


def _compare_sequences(left, right, in_progress) -> bool:
    if len(left) != len(right):
        return False
    return all(_compare(a, b, in_progress) for a, b in zip(left, right))
