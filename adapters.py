"""
Iterator adapters for lazy sequences.

Every adapter is a small SequenceIterator subclass that only knows how to
pull its next element from upstream (``_fetch``). The base class owns the
one-element lookahead, which is what makes ``has_more()`` safe to call any
number of times in a row.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)

# Returned by _fetch() when the adapter has nothing left to give
_END = object()


class InvalidArgumentError(ValueError):
    """Raised when a sequence is built from an invalid argument."""
    pass


class SequenceExhaustedError(LookupError):
    """Raised by advance() when the iterator has no elements left."""
    pass


class _State(Enum):
    NOT_FETCHED = "not_fetched"
    FETCHED = "fetched"
    DONE = "done"


class SequenceIterator:
    """
    Pull-based cursor with an explicit lookahead buffer.

    has_more() fills the buffer at most once; advance() empties it.
    Once exhausted the iterator never touches its upstream again.
    """

    def __init__(self):
        self._state = _State.NOT_FETCHED
        self._lookahead = None

    def has_more(self):
        if self._state is _State.NOT_FETCHED:
            element = self._fetch()
            if element is _END:
                self._state = _State.DONE
            else:
                self._lookahead = element
                self._state = _State.FETCHED
        return self._state is _State.FETCHED

    def advance(self):
        if not self.has_more():
            raise SequenceExhaustedError("No elements left in sequence")
        element = self._lookahead
        self._lookahead = None
        self._state = _State.NOT_FETCHED
        return element

    # --------- python iterator protocol ----------
    def __iter__(self):
        return self

    def __next__(self):
        if not self.has_more():
            raise StopIteration
        return self.advance()

    def _fetch(self):
        """Pull the next element from upstream, or return _END."""
        raise NotImplementedError


# --------- sources ----------

class EmptyIterator(SequenceIterator):
    def _fetch(self):
        return _END


class SingletonIterator(SequenceIterator):
    def __init__(self, element):
        super().__init__()
        self._element = element
        self._given = False

    def _fetch(self):
        if self._given:
            return _END
        self._given = True
        return self._element


class IterableIterator(SequenceIterator):
    """Wraps any Python iterable. iter() is deferred to the first pull."""

    def __init__(self, iterable):
        super().__init__()
        self._iterable = iterable
        self._it = None

    def _fetch(self):
        if self._it is None:
            self._it = iter(self._iterable)
        return next(self._it, _END)


class RepeatIterator(SequenceIterator):
    """Yields the same element forever."""

    def __init__(self, element):
        super().__init__()
        self._element = element

    def _fetch(self):
        return self._element


# --------- stateless adapters ----------

class FilterIterator(SequenceIterator):
    def __init__(self, upstream, predicate):
        super().__init__()
        self._upstream = upstream
        self._predicate = predicate

    def _fetch(self):
        while self._upstream.has_more():
            element = self._upstream.advance()
            if self._predicate(element):
                return element
        return _END


class MapIterator(SequenceIterator):
    def __init__(self, upstream, fn):
        super().__init__()
        self._upstream = upstream
        self._fn = fn

    def _fetch(self):
        if not self._upstream.has_more():
            return _END
        return self._fn(self._upstream.advance())


class ConcatIterator(SequenceIterator):
    """
    Drains one part after another. Each part's iterator is built from
    ``factories`` only once the previous part is exhausted.
    """

    def __init__(self, factories):
        super().__init__()
        self._factories = iter(factories)
        self._current = EmptyIterator()

    def _fetch(self):
        while not self._current.has_more():
            factory = next(self._factories, None)
            if factory is None:
                return _END
            self._current = factory()
        return self._current.advance()


class TakeIterator(SequenceIterator):
    def __init__(self, upstream, count):
        super().__init__()
        self._upstream = upstream
        self._remaining = count

    def _fetch(self):
        # never ask upstream once the quota is met; it may be unbounded
        if self._remaining <= 0 or not self._upstream.has_more():
            return _END
        self._remaining -= 1
        return self._upstream.advance()


class SkipIterator(SequenceIterator):
    def __init__(self, upstream, count):
        super().__init__()
        self._upstream = upstream
        self._to_skip = count

    def _fetch(self):
        while self._to_skip > 0 and self._upstream.has_more():
            self._upstream.advance()
            self._to_skip -= 1
        self._to_skip = 0
        if not self._upstream.has_more():
            return _END
        return self._upstream.advance()


class FlatMapIterator(SequenceIterator):
    """
    Keeps a current inner iterator. When it runs dry the next outer
    element is mapped to a new inner sequence, until the outer side ends.
    """

    def __init__(self, upstream, fn):
        super().__init__()
        self._upstream = upstream
        self._fn = fn
        self._inner = EmptyIterator()

    def _fetch(self):
        while not self._inner.has_more():
            if not self._upstream.has_more():
                return _END
            self._inner = _iterator_of(self._fn(self._upstream.advance()))
        return self._inner.advance()


# --------- stateful adapters ----------

class DistinctIterator(SequenceIterator):
    def __init__(self, upstream):
        super().__init__()
        self._upstream = upstream
        self._seen = set()

    def _fetch(self):
        while self._upstream.has_more():
            element = self._upstream.advance()
            if element not in self._seen:
                self._seen.add(element)
                return element
        return _END


class WithoutIterator(SequenceIterator):
    """Filters out members of ``excluded``, collected on the first pull."""

    def __init__(self, upstream, excluded_factory):
        super().__init__()
        self._upstream = upstream
        self._excluded_factory = excluded_factory
        self._excluded = None

    def _fetch(self):
        if self._excluded is None:
            self._excluded = set(self._excluded_factory())
            logger.debug(f"Built exclusion set of {len(self._excluded)} elements")
        while self._upstream.has_more():
            element = self._upstream.advance()
            if element not in self._excluded:
                return element
        return _END


# --------- eager adapters ----------

class MaterializingIterator(SequenceIterator):
    """
    Defers an eager computation (sorting, grouping) until the first pull,
    then streams its result.
    """

    def __init__(self, build, label="materialize"):
        super().__init__()
        self._build = build
        self._label = label
        self._items = None

    def _fetch(self):
        if self._items is None:
            items = self._build()
            logger.debug(f"{self._label}: materialized {len(items)} elements")
            self._items = iter(items)
        return next(self._items, _END)


def _iterator_of(source):
    """Fresh SequenceIterator for a Sequence or any plain iterable."""
    if hasattr(source, "iterator"):
        return source.iterator()
    return IterableIterator(source)
