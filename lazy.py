"""
Lazy, restartable sequences.

A Sequence only knows how to produce a fresh iterator. Every chain method
returns a new Sequence whose iterator wraps the upstream one, so nothing is
computed until something starts pulling elements.
"""

import operator
from collections.abc import Iterable
from functools import cmp_to_key

from adapters import (
    InvalidArgumentError,
    SequenceExhaustedError,
    SequenceIterator,
    EmptyIterator,
    SingletonIterator,
    IterableIterator,
    RepeatIterator,
    FilterIterator,
    MapIterator,
    ConcatIterator,
    TakeIterator,
    SkipIterator,
    FlatMapIterator,
    DistinctIterator,
    WithoutIterator,
    MaterializingIterator,
)

__all__ = [
    "Sequence",
    "Group",
    "SequenceIterator",
    "InvalidArgumentError",
    "SequenceExhaustedError",
]


def _check_count(operation, count):
    try:
        count = operator.index(count)
    except TypeError:
        raise InvalidArgumentError(
            f"{operation}() needs an integer count, got {type(count).__name__}"
        ) from None
    if count < 0:
        raise InvalidArgumentError(f"{operation}() needs a count >= 0, got {count}")
    return count


def _as_sequence(source):
    return source if isinstance(source, Sequence) else Sequence.create(source)


class Sequence:
    """
    A chainable, lazy sequence. Holds a zero-argument factory that builds a
    new SequenceIterator on every call, which makes the sequence safe to
    traverse any number of times.
    """

    def __init__(self, iterator_factory):
        self._iterator_factory = iterator_factory
        # set only on concat results, so chained concats stay one level deep
        self._concat_parts = None

    # --------- construction ----------
    @staticmethod
    def empty():
        return Sequence(EmptyIterator)

    @staticmethod
    def singleton(element):
        return Sequence(lambda: SingletonIterator(element))

    @staticmethod
    def create(source):
        """
        Wrap an existing collection or iterable. Restartable as long as the
        source itself can be iterated more than once.
        """
        if source is None:
            raise InvalidArgumentError("Cannot create a sequence from None")
        if not isinstance(source, Iterable):
            raise InvalidArgumentError(
                f"Cannot create a sequence from non-iterable {type(source).__name__}"
            )
        return Sequence(lambda: IterableIterator(source))

    @staticmethod
    def of(*elements):
        return Sequence.create(elements)

    @staticmethod
    def repeat(element):
        """Unbounded sequence yielding ``element`` forever."""
        return Sequence(lambda: RepeatIterator(element))

    # --------- iteration ----------
    def iterator(self):
        return self._iterator_factory()

    def __iter__(self):
        return self.iterator()

    # --------- stateless adapters (lazy) ----------
    def filter(self, predicate):
        return Sequence(lambda: FilterIterator(self.iterator(), predicate))

    def map(self, fn):
        return Sequence(lambda: MapIterator(self.iterator(), fn))

    def flat_map(self, fn):
        """fn maps each element to a Sequence (or any iterable) to splice in."""
        return Sequence(lambda: FlatMapIterator(self.iterator(), fn))

    def cast(self, target):
        # unchecked, elements are assumed to already be ``target`` instances
        return Sequence(self._iterator_factory)

    def of_class(self, target):
        return self.filter(lambda element: isinstance(element, target))

    def concat(self, other):
        """
        All of self, then all of other. Concatenating a concatenation adds to
        its list of parts instead of nesting, so long concat chains do not
        deepen the iterator stack.
        """
        other = _as_sequence(other)
        parts = (self._concat_parts or (self,)) + (other._concat_parts or (other,))
        combined = Sequence(lambda: ConcatIterator([part.iterator for part in parts]))
        combined._concat_parts = parts
        return combined

    def take(self, count):
        count = _check_count("take", count)
        return Sequence(lambda: TakeIterator(self.iterator(), count))

    def limit(self, count):
        """Alias for take()"""
        return self.take(count)

    def skip(self, count):
        count = _check_count("skip", count)
        return Sequence(lambda: SkipIterator(self.iterator(), count))

    # --------- stateful adapters (lazy) ----------
    def distinct(self):
        return Sequence(lambda: DistinctIterator(self.iterator()))

    def without(self, other):
        """Drop every element that also appears in ``other``."""
        other = _as_sequence(other)
        return Sequence(lambda: WithoutIterator(self.iterator(), other.iterator))

    def group_by(self, key_fn):
        """
        Partition into Group sequences keyed by key_fn(element). Groups come
        out in order of first appearance of their key; members keep their
        original order. Only valid for finite sequences.
        """
        def build():
            buckets = {}
            for element in self:
                buckets.setdefault(key_fn(element), []).append(element)
            return [Group(key, members) for key, members in buckets.items()]

        return Sequence(lambda: MaterializingIterator(build, "group_by"))

    # --------- eager adapters (finite sequences only) ----------
    def sort(self, comparator=None):
        """
        Stable sort. ``comparator(left, right)`` returns a negative, zero or
        positive number; natural ordering is used when it is omitted.
        """
        key = cmp_to_key(comparator) if comparator is not None else None
        return self._sorted(key, False, "sort")

    def sort_by(self, key_fn):
        return self._sorted(key_fn, False, "sort_by")

    def sort_by_descending(self, key_fn):
        return self._sorted(key_fn, True, "sort_by_descending")

    # --------- terminal consumers ----------
    def to_list(self):
        return list(self)

    def to_set(self):
        return set(self)

    def to_map(self, key_fn, value_fn=None):
        """Build a dict keyed by key_fn(element). Later keys overwrite earlier ones."""
        mapping = {}
        for element in self:
            mapping[key_fn(element)] = value_fn(element) if value_fn is not None else element
        return mapping

    def first(self, default=None):
        """Return the first element, or default if empty"""
        it = self.iterator()
        return it.advance() if it.has_more() else default

    def last(self, default=None):
        """Return the last element, or default if empty"""
        last_item = default
        for item in self:
            last_item = item
        return last_item

    def length(self):
        count = 0
        for _ in self:
            count += 1
        return count

    def any(self, predicate=None):
        """Return True if any element is truthy (or satisfies predicate)"""
        it = self.iterator()
        while it.has_more():
            element = it.advance()
            if (predicate(element) if predicate is not None else element):
                return True
        return False

    def some(self, predicate=None):
        """Alias for any()"""
        return self.any(predicate)

    def all(self, predicate=None):
        """Return True if every element is truthy (or satisfies predicate)"""
        if predicate is None:
            return all(self)
        return all(predicate(element) for element in self)

    def join(self, delimiter):
        return delimiter.join(str(element) for element in self)

    # --------- helpers ----------
    def _sorted(self, key, reverse, label):
        # sorted() is stable, reverse=True included
        return Sequence(
            lambda: MaterializingIterator(lambda: sorted(self, key=key, reverse=reverse), label)
        )

    def __repr__(self):
        return f"<{type(self).__name__} (lazy)>"


class Group(Sequence):
    """A sequence of elements sharing the same ``key``."""

    def __init__(self, key, elements):
        members = list(elements)
        super().__init__(lambda: IterableIterator(members))
        self._key = key

    @property
    def key(self):
        return self._key

    def __repr__(self):
        return f"<Group key={self._key!r}>"
