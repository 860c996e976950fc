"""Helpers for merging mappings."""

from typing import MutableMapping


def extend(target: MutableMapping, *sources) -> MutableMapping:
    """Copy every key of each source into target; later sources win."""
    for source in sources:
        for key in source:
            target[key] = source[key]
    return target


def defaults(target: MutableMapping, *sources) -> MutableMapping:
    """Like extend, but never overwrites a key target already has."""
    for source in sources:
        for key in source:
            if key not in target:
                target[key] = source[key]
    return target
