"""
Uniform traversal over sequences and mappings.

A collection is either sequence-shaped (enumerated by ascending index) or
mapping-shaped (enumerated by its own keys). classify() decides which, and
entries() yields the (value, key) pairs every other operation consumes.
None of these operations mutate the collection they are given.
"""

import functools
from collections.abc import Mapping
from typing import Any, Callable, Iterator, List, Optional

from models import Entry, Shape
from utils import bind_callback, strict_equals, strict_key

_MISSING = object()


class EmptyReductionError(TypeError):
    """Raised when reducing an empty collection without an initial value."""
    pass


# ---------- Collection Classifier ----------

def classify(collection) -> Shape:
    if isinstance(collection, Mapping):
        return Shape.MAPPING
    return Shape.SEQUENCE


def entries(collection) -> Iterator[Entry]:
    """Yield an Entry(value, key) for every element; a fresh pass per call."""
    if classify(collection) is Shape.MAPPING:
        for key in collection:
            yield Entry(collection[key], key)
    else:
        for index, value in enumerate(collection):
            yield Entry(value, index)


def _truthy(value) -> bool:
    return bool(value)


# ---------- Traversal Primitives ----------

def each(collection, iterator: Callable) -> None:
    """Call iterator(value, key, collection) for each element."""
    call = bind_callback(iterator, 1)
    for value, key in entries(collection):
        call(value, key, collection)


def index_of(sequence, target) -> int:
    """Index of the first element strictly equal to target, or -1."""
    if classify(sequence) is Shape.MAPPING:
        raise TypeError("index_of requires a sequence, not a mapping")
    for index, value in enumerate(sequence):
        if strict_equals(value, target):
            return index
    return -1


def contains(collection, target) -> bool:
    for value, _ in entries(collection):
        if strict_equals(value, target):
            return True
    return False


# ---------- Derived Combinators ----------

def filter_(collection, predicate: Callable) -> List[Any]:
    """Return all elements that pass the truth test, in encounter order."""
    test = bind_callback(predicate, 1)
    return [value for value, key in entries(collection) if test(value, key, collection)]


def reject(collection, predicate: Callable) -> List[Any]:
    """Return all elements that fail the truth test; the complement of filter_."""
    test = bind_callback(predicate, 1)
    return [value for value, key in entries(collection) if not test(value, key, collection)]


def uniq(array) -> List[Any]:
    """
    Duplicate-free copy of array, keeping first occurrences.

    Hashable values are tracked by their strict_key so lookups stay constant
    time; unhashable ones fall back to a strict-equality scan.
    """
    result = []
    seen_hashable = set()
    seen_other = []
    for value in array:
        try:
            marker = strict_key(value)
            if marker in seen_hashable:
                continue
            seen_hashable.add(marker)
        except TypeError:
            if any(strict_equals(value, other) for other in seen_other):
                continue
            seen_other.append(value)
        result.append(value)
    return result


def map_(collection, transform: Callable) -> List[Any]:
    """Return the results of applying transform to each element."""
    call = bind_callback(transform, 1)
    return [call(value, key, collection) for value, key in entries(collection)]


def property_of(element, name):
    if isinstance(element, Mapping):
        return element.get(name)
    if isinstance(name, str):
        return getattr(element, name, None)
    if isinstance(name, int) and name < 0:
        return None
    try:
        return element[name]
    except (IndexError, KeyError, TypeError):
        return None


def pluck(array, property_name) -> List[Any]:
    """Values of property_name on each element; None where it is absent."""
    return map_(array, lambda element: property_of(element, property_name))


def invoke_method(items, method_name: str, *args, **kwargs) -> List[Any]:
    """Call the method named method_name on every item and collect the results."""
    return [getattr(item, method_name)(*args, **kwargs) for item in items]


def invoke_sort(items, comparator: Optional[Callable] = None) -> List[List[Any]]:
    """Sorted copy of every item, ordered by comparator(a, b) when given."""
    key = functools.cmp_to_key(comparator) if comparator is not None else None
    return [sorted(item, key=key) for item in items]


def invoke(items, method_or_comparator, *args, **kwargs) -> List[Any]:
    if isinstance(method_or_comparator, str):
        return invoke_method(items, method_or_comparator, *args, **kwargs)
    return invoke_sort(items, method_or_comparator)


def reduce_(collection, iterator: Callable, initial=_MISSING):
    """
    Fold the collection with iterator(accumulator, value, key, collection).

    Without an initial value the first element seeds the accumulator and
    folding starts from the second; an empty collection then raises
    EmptyReductionError.
    """
    call = bind_callback(iterator, 2)
    pairs = entries(collection)
    accumulator = initial
    if accumulator is _MISSING:
        try:
            accumulator = next(pairs).value
        except StopIteration:
            raise EmptyReductionError("reduce_() of empty collection with no initial value") from None
    for value, key in pairs:
        accumulator = call(accumulator, value, key, collection)
    return accumulator


def every(collection, predicate: Optional[Callable] = None) -> bool:
    """True if every element passes the truth test (vacuously true when empty)."""
    test = bind_callback(predicate or _truthy, 1)
    for value, key in entries(collection):
        if not test(value, key, collection):
            return False
    return True


def some(collection, predicate: Optional[Callable] = None) -> bool:
    """True if any element passes the truth test; false when empty."""
    test = bind_callback(predicate or _truthy, 1)
    for value, key in entries(collection):
        if test(value, key, collection):
            return True
    return False
