"""
Chainable lazy adapter for any iterable value.

Wrap anything that implements ``__iter__`` and transform it with array-like
operations without materializing the source first. Each chain operation
returns a new ``LazyIterator`` whose source is a generator over the previous
one, so nothing is computed until a terminal operation or sink pulls.
"""

import logging
from collections.abc import Iterable
from typing import AbstractSet, Any, Callable, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

# Iterable, but never expanded by flat()
ATOMIC_TYPES = (str, bytes, bytearray)


class InvalidIterableError(TypeError):
    """Raised when a value without the iteration protocol is wrapped."""
    pass


def is_iterable(value: Any) -> bool:
    """Return True if value implements the iteration protocol"""
    return isinstance(value, Iterable)


def _identity(item):
    return item


def _keep_existing(existing, new_item):
    return existing


def _strictly_equal(item, value):
    # Identity first, so values unequal to themselves (nan) are still found
    return item is value or (type(item) is type(value) and item == value)


class LazyIterator(Generic[T]):
    """
    Wrapper around an iterable that provides map/filter/reduce style
    methods for any kind of iterable value. The wrapper itself is iterable
    and forwards to its source, so

        for a in x: ...

    behaves the same as

        for a in LazyIterator(x): ...

    The source is referenced, never copied. Wrapping a single-pass source
    (a generator, a file, another chained wrapper) means every terminal
    operation continues from wherever the previous one stopped.
    """

    __slots__ = ("_source",)

    def __init__(self, source: Iterable):
        if not is_iterable(source):
            logger.debug("Rejected non-iterable source of type %s", type(source).__name__)
            raise InvalidIterableError(
                f"value of type {type(source).__name__!r} does not implement the iterator protocol"
            )
        self._source = source

    @classmethod
    def new(cls, value: Iterable) -> "LazyIterator":
        return cls(value)

    @property
    def source(self) -> Iterable:
        return self._source

    def __iter__(self) -> Iterator[T]:
        return iter(self._source)

    def __repr__(self):
        return f"{type(self).__name__}({self._source!r})"

    # --------- chainable operators (lazy) ----------
    def map(self, fn: Callable[[T, int], U]) -> "LazyIterator[U]":
        """Map every item through fn(item, index)"""
        return LazyIterator(self.raw_map(fn))

    def filter(self, pred: Callable[[T, int], Any]) -> "LazyIterator[T]":
        """Keep items for which pred(item, index) is truthy.

        The index counts source items, including the ones dropped.
        """
        return LazyIterator(self.raw_filter(pred))

    def flat(self, depth: int = 1) -> "LazyIterator":
        """Flatten nested iterables up to ``depth`` levels"""
        _check_depth(depth)
        return LazyIterator(self.raw_flat(depth))

    def flat_map(self, fn: Callable[[T, int], Any], depth: int = 1) -> "LazyIterator":
        """Apply map(fn) followed by flat(depth)"""
        return self.map(fn).flat(depth)

    # --------- raw generators ----------
    def raw_map(self, fn):
        for index, item in enumerate(self._source):
            yield fn(item, index)

    def raw_filter(self, pred):
        for index, item in enumerate(self._source):
            if pred(item, index):
                yield item

    def raw_flat(self, depth=1):
        for item in self._source:
            if depth == 0 or isinstance(item, ATOMIC_TYPES) or not is_iterable(item):
                yield item
                continue

            yield from LazyIterator(item).raw_flat(depth - 1)

    # --------- terminal operations (eager) ----------
    def reduce(self, fn: Callable[[Any, T, int], Any], initial: Any = None) -> Any:
        """Fold items left to right with fn(accumulator, item, index)"""
        accumulator = initial
        for index, item in enumerate(self._source):
            accumulator = fn(accumulator, item, index)
        return accumulator

    def for_each(self, fn: Callable[[T, int], Any]) -> None:
        for index, item in enumerate(self._source):
            fn(item, index)

    def find(self, pred: Callable[[T, int], Any]) -> Optional[T]:
        """Return the first item satisfying pred(item, index), or None"""
        hit = self._scan(pred)
        return hit[1] if hit is not None else None

    def find_index(self, pred: Callable[[T, int], Any]) -> int:
        """Behaves like find() but returns the index, or -1"""
        hit = self._scan(pred)
        return hit[0] if hit is not None else -1

    def includes(self, value: Any, from_index: int = 0) -> bool:
        """Return True if value occurs at or after from_index.

        Equality is strict: 1, 1.0 and True are different values.
        """
        def matches(item, index):
            return index >= from_index and _strictly_equal(item, value)

        return self._scan(matches) is not None

    def some(self, pred: Callable[[T, int], Any]) -> bool:
        """Return True if find(pred) produces a value.

        A matching item that is itself None reads as no match.
        """
        return self.find(pred) is not None

    def every(self, pred: Callable[[T, int], Any]) -> bool:
        return self._scan(lambda item, index: not pred(item, index)) is None

    def count(self) -> int:
        total = 0
        for _ in self._source:
            total += 1
        return total

    def dedupe(
        self,
        identify: Callable[[T], Any] = _identity,
        merge: Callable[[T, T], Optional[T]] = _keep_existing,
    ) -> "LazyIterator[T]":
        """
        Remove duplicates, keyed by identify(item).

        The first item seen for a key is stored; later items with the same
        key are combined through merge(existing, item). A merge result of
        None keeps the existing value. This drains the source, then wraps
        the stored values in first-seen key order.
        """
        seen: Dict[Any, T] = {}
        pulled = 0
        for item in self._source:
            pulled += 1
            key = identify(item)
            if key not in seen:
                seen[key] = item
                continue

            merged = merge(seen[key], item)
            if merged is not None:
                seen[key] = merged

        logger.debug("dedupe kept %d of %d items", len(seen), pulled)
        return LazyIterator(seen.values())

    def _scan(self, pred) -> Optional[Tuple[int, T]]:
        # Shared single pass behind find/find_index/includes/some/every.
        for index, item in enumerate(self._source):
            if pred(item, index):
                return index, item
        return None

    # --------- sinks ----------
    def into_list(self) -> List[T]:
        return list(self._source)

    def into_set(self) -> AbstractSet[T]:
        """Collect unique items, iterating in order of first occurrence.

        Uniqueness follows hashing, so 1, 1.0 and True collapse into the
        first of them seen.
        """
        return dict.fromkeys(self._source).keys()

    def into_dict(self) -> Dict[Any, Any]:
        """Collect (key, value) pairs into a dict; the last duplicate key wins"""
        return dict(self._source)

    def into_record(self) -> Dict[str, Any]:
        """Like into_dict() but with every key coerced to str"""
        return {str(key): value for key, value in self._source}


def _check_depth(depth):
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise ValueError(f"depth must be an int, got {type(depth).__name__}")
    if depth < 0:
        raise ValueError("depth must be >= 0")


def wrap(value: Iterable) -> LazyIterator:
    """Wrap value in a LazyIterator, raising InvalidIterableError if it is not iterable"""
    return LazyIterator.new(value)
