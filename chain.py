import arrays
import collection


class Chain:
    """
    A chainable wrapper around a collection. Every step runs immediately
    and returns a new Chain; value() unwraps the current result.
    """
    def __init__(self, source):
        self._source = source

    # --------- chainable operators ----------
    def map(self, fn):
        return self._with(collection.map_(self._source, fn))

    def filter(self, pred):
        return self._with(collection.filter_(self._source, pred))

    def reject(self, pred):
        return self._with(collection.reject(self._source, pred))

    def uniq(self):
        return self._with(collection.uniq(self._source))

    def pluck(self, name):
        return self._with(collection.pluck(self._source, name))

    def invoke_method(self, method_name, *args, **kwargs):
        return self._with(collection.invoke_method(self._source, method_name, *args, **kwargs))

    def sort_by(self, key):
        return self._with(arrays.sort_by(self._source, key))

    def flatten(self):
        return self._with(arrays.flatten(self._source))

    def first(self, n):
        """Keep only the first n elements."""
        return self._with(arrays.first(self._source, n))

    def last(self, n):
        """Keep only the last n elements."""
        return self._with(arrays.last(self._source, n))

    # --------- terminal operations ----------
    def value(self):
        return self._source

    def to_list(self):
        return [entry.value for entry in collection.entries(self._source)]

    def each(self, fn):
        collection.each(self._source, fn)
        return self

    def reduce(self, fn, *initial):
        """Fold the current result; see collection.reduce_."""
        return collection.reduce_(self._source, fn, *initial)

    def every(self, pred=None):
        return collection.every(self._source, pred)

    def some(self, pred=None):
        return collection.some(self._source, pred)

    def contains(self, target):
        return collection.contains(self._source, target)

    def __iter__(self):
        return iter(self.to_list())

    def __repr__(self):
        return f"Chain({self._source!r})"

    # --------- helpers ----------
    def _with(self, result):
        return Chain(result)


def chain(source) -> Chain:
    return Chain(source)
