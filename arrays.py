"""Structural array helpers. Every helper returns a new list."""

import random
from typing import Any, Callable, List, Optional, Union

from collection import contains, entries, property_of, uniq
from utils import bind_callback


def first(array, n: Optional[int] = None):
    """First element of array (None if empty), or a list of the first n."""
    if n is None:
        return array[0] if len(array) else None
    if n <= 0:
        return []
    return list(array[:n])


def last(array, n: Optional[int] = None):
    """Like first, but from the end."""
    if n is None:
        return array[-1] if len(array) else None
    if n <= 0:
        return []
    return list(array[-n:])


def zip_(*arrays) -> List[List[Any]]:
    """
    Group elements at the same index together.

    zip_(['a', 'b', 'c', 'd'], [1, 2, 3])
    -> [['a', 1], ['b', 2], ['c', 3], ['d', None]]
    """
    length = max((len(array) for array in arrays), default=0)
    return [
        [array[i] if i < len(array) else None for array in arrays]
        for i in range(length)
    ]


def flatten(nested) -> List[Any]:
    """Flatten lists and tuples of any depth into one list."""
    result = []
    stack = [iter(nested)]
    while stack:
        for item in stack[-1]:
            if isinstance(item, (list, tuple)):
                stack.append(iter(item))
                break
            result.append(item)
        else:
            stack.pop()
    return result


def intersection(*arrays) -> List[Any]:
    """Unique elements of the first array that appear in all the others."""
    if not arrays:
        return []
    head, rest = arrays[0], arrays[1:]
    return [item for item in uniq(head) if all(contains(other, item) for other in rest)]


def difference(array, *others) -> List[Any]:
    """Elements of array that appear in none of the others."""
    return [item for item in array if not any(contains(other, item) for other in others)]


def shuffle(array, rng: Optional[random.Random] = None) -> List[Any]:
    """Shuffled copy of array (Fisher-Yates)."""
    rng = rng or random.Random()
    result = list(array)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def sort_by(collection, key: Union[str, Callable]) -> List[Any]:
    """
    Values of collection sorted by key.

    A string key sorts by that property of each value, with values lacking
    it placed last. A callable key is called as key(value, key, collection).
    Sorting is stable.
    """
    if isinstance(key, str):
        name = key

        def criterion(entry):
            prop = property_of(entry.value, name)
            return (prop is None, prop)
    else:
        call = bind_callback(key, 1)

        def criterion(entry):
            return call(entry.value, entry.key, collection)

    return [entry.value for entry in sorted(entries(collection), key=criterion)]
