"""
Closable, strictly lazy iterators.

Graph stores may hold cursors, open files or native memory while iterating, so
every iterator returned by a graph has to be closed. Use them as context managers:

    with graph.nodes() as nodes:
        for node in nodes:
            ...

has_next() never consumes an element the caller can not get back with next();
only filter, take_while, first_matching and terminate read ahead of next(), as far
as the next matching element.
"""
from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, Iterator, TypeVar

from .exceptions import Exhausted

T = TypeVar('T')
O = TypeVar('O')

_MISSING = object()


class AutoClosedIterator(ABC, Generic[T]):
    """
    A pull iterator with has_next, next and close.

    Also a Python iterator and a context manager; leaving the with block closes it and
    every iterator it was built from.
    """

    @abstractmethod
    def has_next(self) -> bool:
        pass

    @abstractmethod
    def next(self) -> T:
        pass

    def close(self) -> None:
        pass

    def __iter__(self) -> 'AutoClosedIterator[T]':
        return self

    def __next__(self) -> T:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def __enter__(self) -> 'AutoClosedIterator[T]':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.close()
        return False

    @staticmethod
    def empty() -> 'AutoClosedIterator[T]':
        return _EmptyIterator()

    @staticmethod
    def of(*items: T) -> 'AutoClosedIterator[T]':
        return _ItemsIterator(items)

    @staticmethod
    def from_iterator(iterable: Iterable[T]) -> 'AutoClosedIterator[T]':
        """Wrap a plain iterable; closing does nothing to it."""
        return _WrappingIterator(iter(iterable))

    @staticmethod
    def from_stream(stream) -> 'AutoClosedIterator[T]':
        """Wrap an iterable that owns a resource, such as a generator or an open file; closing closes the stream."""
        return _WrappingIterator(iter(stream), stream.close)

    @staticmethod
    def map(source, function: Callable[[T], O]) -> 'AutoClosedIterator[O]':
        """
        Lazily apply function to every element.
        :param source: an AutoClosedIterator, closed with the result, or any plain iterable such as a
        sequence of ids
        :param function: applied on next()
        """
        return _MappingIterator(_closable(source), function)

    @staticmethod
    def filter(source: 'AutoClosedIterator[T]', predicate: Callable[[T], bool]) -> 'AutoClosedIterator[T]':
        """Only the elements for which predicate is true."""
        return _FilteringIterator(source, predicate)

    @staticmethod
    def concat(first: 'AutoClosedIterator[T]', second: 'AutoClosedIterator[T]') -> 'AutoClosedIterator[T]':
        """All of first, then all of second. Closing closes both."""
        return _ConcatenatingIterator(_ItemsIterator((first, second)), owned=(first, second))

    @staticmethod
    def flat_map(iterators: 'AutoClosedIterator') -> 'AutoClosedIterator[T]':
        """
        Flatten an iterator of iterators. Each inner iterator is closed as soon as it is exhausted,
        before the next one is requested.
        """
        return _ConcatenatingIterator(_closable(iterators))

    @staticmethod
    def terminate(source: 'AutoClosedIterator[T]', predicate: Callable[[T], bool]) -> 'AutoClosedIterator[T]':
        """
        At most one element: the first element of source, if predicate holds for it. Nothing
        after the first element is read.
        """
        return _TerminatingIterator(source, predicate)

    @staticmethod
    def take_while(source: 'AutoClosedIterator[T]', predicate: Callable[[T], bool]) -> 'AutoClosedIterator[T]':
        """Elements of source up to, not including, the first for which predicate fails."""
        return _TakeWhileIterator(source, predicate)

    @staticmethod
    def first_matching(source: 'AutoClosedIterator[T]', predicate: Callable[[T], bool]) -> 'AutoClosedIterator[T]':
        """At most one element: the first of source for which predicate holds."""
        return _FirstMatchingIterator(source, predicate)


def _closable(source) -> AutoClosedIterator:
    if isinstance(source, AutoClosedIterator):
        return source
    return AutoClosedIterator.from_iterator(source)


class _EmptyIterator(AutoClosedIterator):

    def has_next(self) -> bool:
        return False

    def next(self):
        raise Exhausted('Empty iterator')


class _ItemsIterator(AutoClosedIterator):

    def __init__(self, items: tuple):
        self._items = items
        self._index = 0

    def has_next(self) -> bool:
        return self._index < len(self._items)

    def next(self):
        if not self.has_next():
            raise Exhausted(f'All {len(self._items)} items were returned')
        item = self._items[self._index]
        self._index += 1
        return item


class _WrappingIterator(AutoClosedIterator):
    """A plain iterator can not be asked whether it is done, so has_next buffers one element."""

    def __init__(self, iterator: Iterator, on_close: Callable[[], None] = None):
        self._iterator = iterator
        self._on_close = on_close
        self._next = _MISSING
        self._closed = False

    def has_next(self) -> bool:
        if self._next is _MISSING and not self._closed:
            self._next = next(self._iterator, _MISSING)
        return self._next is not _MISSING

    def next(self):
        if not self.has_next():
            raise Exhausted('Wrapped iterator is exhausted')
        item, self._next = self._next, _MISSING
        return item

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._next = _MISSING
        if self._on_close is not None:
            self._on_close()


class _MappingIterator(AutoClosedIterator):

    def __init__(self, source: AutoClosedIterator, function: Callable):
        self._source = source
        self._function = function

    def has_next(self) -> bool:
        return self._source.has_next()

    def next(self):
        if not self._source.has_next():
            raise Exhausted('Mapped iterator is exhausted')
        return self._function(self._source.next())

    def close(self) -> None:
        self._source.close()


class _FilteringIterator(AutoClosedIterator):

    def __init__(self, source: AutoClosedIterator, predicate: Callable):
        self._source = source
        self._predicate = predicate
        self._next = _MISSING

    def has_next(self) -> bool:
        while self._next is _MISSING and self._source.has_next():
            candidate = self._source.next()
            if self._predicate(candidate):
                self._next = candidate
        return self._next is not _MISSING

    def next(self):
        if not self.has_next():
            raise Exhausted('No more matching elements')
        item, self._next = self._next, _MISSING
        return item

    def close(self) -> None:
        self._source.close()


class _ConcatenatingIterator(AutoClosedIterator):

    def __init__(self, iterators: AutoClosedIterator, owned: tuple = ()):
        self._iterators = iterators
        self._owned = owned
        self._current = None

    def has_next(self) -> bool:
        if self._current is not None:
            if self._current.has_next():
                return True
            self._drop_current()
        # the exhausted inner iterator is closed before the outer one is asked for more
        while self._iterators.has_next():
            self._current = _closable(self._iterators.next())
            if self._current.has_next():
                return True
            self._drop_current()
        return False

    def _drop_current(self) -> None:
        current, self._current = self._current, None
        current.close()

    def next(self):
        if not self.has_next():
            raise Exhausted('All concatenated iterators are exhausted')
        return self._current.next()

    def close(self) -> None:
        if self._current is not None:
            self._current.close()
        self._iterators.close()
        for iterator in self._owned:
            iterator.close()


class _TerminatingIterator(AutoClosedIterator):

    def __init__(self, source: AutoClosedIterator, predicate: Callable):
        self._source = source
        self._predicate = predicate
        self._next = _MISSING
        self._checked = False

    def has_next(self) -> bool:
        if not self._checked:
            self._checked = True
            if self._source.has_next():
                candidate = self._source.next()
                if self._predicate(candidate):
                    self._next = candidate
        return self._next is not _MISSING

    def next(self):
        if not self.has_next():
            raise Exhausted('Terminated')
        item, self._next = self._next, _MISSING
        return item

    def close(self) -> None:
        self._source.close()


class _TakeWhileIterator(AutoClosedIterator):

    def __init__(self, source: AutoClosedIterator, predicate: Callable):
        self._source = source
        self._predicate = predicate
        self._next = _MISSING
        self._stopped = False

    def has_next(self) -> bool:
        if self._next is _MISSING and not self._stopped and self._source.has_next():
            candidate = self._source.next()
            if self._predicate(candidate):
                self._next = candidate
            else:
                self._stopped = True
        return self._next is not _MISSING

    def next(self):
        if not self.has_next():
            raise Exhausted('Predicate no longer holds')
        item, self._next = self._next, _MISSING
        return item

    def close(self) -> None:
        self._source.close()


class _FirstMatchingIterator(AutoClosedIterator):

    def __init__(self, source: AutoClosedIterator, predicate: Callable):
        self._source = source
        self._predicate = predicate
        self._next = _MISSING
        self._found = False

    def has_next(self) -> bool:
        while not self._found and self._source.has_next():
            candidate = self._source.next()
            if self._predicate(candidate):
                self._next = candidate
                self._found = True
        return self._next is not _MISSING

    def next(self):
        if not self.has_next():
            raise Exhausted('No matching element')
        item, self._next = self._next, _MISSING
        return item

    def close(self) -> None:
        self._source.close()
