from __future__ import annotations
from collections.abc import Hashable, Iterable, Mapping
from typing import Any, Callable, Generic, Iterator, TypeVar, cast

from ro_collections.containers.collection.criteria import Criteria, Order, read_field

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
R = TypeVar("R")


class ArrayCollection(Generic[K, V]):
    """
    A mutable, insertion-ordered mapping from keys to values with a collection-style API.

    Elements added without an explicit key receive the next free integer key, i.e. one more than
    the largest integer key the collection has ever held (0 if none). Removing entries does not
    lower that counter, so automatic keys are never reused.

    The collection also carries an internal cursor (`first`, `last`, `key`, `current`, `next`).
    The cursor is shared by everyone holding a reference to the collection; use `get_iterator()`
    or plain iteration for independent traversal.

    Implements the `MutableCollection` and `Queryable` protocols.

    Attributes:
        _elements (dict[K, V]):
            The stored entries, in insertion order.
        _next_index (int):
            Key assigned by the next `add()`.
        _cursor (int):
            Position of the internal cursor within the key order.
    """

    _elements: dict[K, V]
    _next_index: int
    _cursor: int

    def __init__(self, elements: Mapping[K, V] | Iterable[V] | None = None):
        if elements is None:
            self._elements = {}
        elif isinstance(elements, Mapping):
            self._elements = dict(cast(Mapping[K, V], elements))
        else:
            self._elements = cast(dict[K, V], dict(enumerate(elements)))
        self._next_index = 0
        for key in self._elements:
            self._track_index(key)
        self._cursor = 0

    def _track_index(self, key: K) -> None:
        if isinstance(key, int) and not isinstance(key, bool) and key >= self._next_index:
            self._next_index = key + 1

    def _create_from(self, elements: Mapping[K, Any]) -> ArrayCollection[K, Any]:
        return type(self)(elements)

    def add(self, element: V) -> bool:
        """
        Appends an element under the next free integer key.

        Args:
            element (V):
                The element to append.

        Returns:
            bool:
                Always True.
        """
        self.set(cast(K, self._next_index), element)
        return True

    def set(self, key: K, value: V) -> None:
        self._elements[key] = value
        self._track_index(key)

    def clear(self) -> None:
        self._elements.clear()
        self._cursor = 0

    def remove(self, key: K) -> V | None:
        """
        Removes the entry at `key`.

        Args:
            key (K):
                The key to remove.

        Returns:
            V | None:
                The removed value, or None if there was no entry at `key`.
        """
        if key not in self._elements:
            return None
        return self._pop_entry(key)

    def remove_element(self, element: object) -> bool:
        """
        Removes the first entry whose value equals `element`.

        Returns:
            bool:
                True if an entry was removed, False otherwise.
        """
        key = self.index_of(element)
        if key is None:
            return False
        self._pop_entry(key)
        return True

    def _pop_entry(self, key: K) -> V:
        # Keep the cursor on the same entry when an earlier one is removed
        if list(self._elements).index(key) < self._cursor:
            self._cursor -= 1
        return self._elements.pop(key)

    def contains(self, element: object) -> bool:
        return any(value == element for value in self._elements.values())

    def contains_key(self, key: K) -> bool:
        return key in self._elements

    def is_empty(self) -> bool:
        return not self._elements

    def count(self) -> int:
        return len(self._elements)

    def get(self, key: K, default: V | None = None) -> V | None:
        return self._elements.get(key, default)

    def get_keys(self) -> list[K]:
        return list(self._elements)

    def get_values(self) -> list[V]:
        return list(self._elements.values())

    def to_array(self) -> dict[K, V]:
        """
        Returns a shallow copy of the entries as a plain dict, preserving order.
        """
        return dict(self._elements)

    def _value_at_cursor(self) -> V | None:
        if 0 <= self._cursor < len(self._elements):
            return self.get_values()[self._cursor]
        return None

    def first(self) -> V | None:
        """
        Moves the internal cursor to the first entry and returns its value (None if empty).
        """
        self._cursor = 0
        return self._value_at_cursor()

    def last(self) -> V | None:
        """
        Moves the internal cursor to the last entry and returns its value (None if empty).
        """
        self._cursor = max(len(self._elements) - 1, 0)
        return self._value_at_cursor()

    def key(self) -> K | None:
        if 0 <= self._cursor < len(self._elements):
            return self.get_keys()[self._cursor]
        return None

    def current(self) -> V | None:
        return self._value_at_cursor()

    def next(self) -> V | None:
        """
        Advances the internal cursor and returns the new current value (None past the end).
        """
        if self._cursor < len(self._elements):
            self._cursor += 1
        return self._value_at_cursor()

    def index_of(self, element: object) -> K | None:
        """
        Returns the key of the first entry whose value equals `element`, or None.
        """
        for key, value in self._elements.items():
            if value == element:
                return key
        return None

    def slice(self, offset: int, length: int | None = None) -> dict[K, V]:
        """
        Extracts a range of entries, preserving their keys.

        Args:
            offset (int):
                Position of the first entry. Negative offsets count from the end.
            length (int | None):
                Number of entries to take. None takes everything up to the end; a negative
                length stops that many entries before the end.

        Returns:
            dict[K, V]:
                A new dict holding the selected entries.
        """
        entries = list(self._elements.items())
        size = len(entries)
        start = offset if offset >= 0 else max(size + offset, 0)
        if length is None:
            stop = size
        elif length < 0:
            stop = max(size + length, 0)
        else:
            stop = start + length
        return dict(entries[start:stop])

    def exists(self, predicate: Callable[[V], bool]) -> bool:
        return any(predicate(value) for value in self._elements.values())

    def for_all(self, predicate: Callable[[V], bool]) -> bool:
        return all(predicate(value) for value in self._elements.values())

    def filter(self, predicate: Callable[[V], bool]) -> ArrayCollection[K, V]:
        return self._create_from(
            {key: value for key, value in self._elements.items() if predicate(value)}
        )

    def map(self, func: Callable[[V], R]) -> ArrayCollection[K, R]:
        return self._create_from({key: func(value) for key, value in self._elements.items()})

    def partition(
        self, predicate: Callable[[V], bool]
    ) -> tuple[ArrayCollection[K, V], ArrayCollection[K, V]]:
        """
        Splits the entries in two new collections by a predicate, preserving keys.

        Returns:
            tuple[ArrayCollection[K, V], ArrayCollection[K, V]]:
                The entries satisfying the predicate, then those that do not.
        """
        matches: dict[K, V] = {}
        no_matches: dict[K, V] = {}
        for key, value in self._elements.items():
            if predicate(value):
                matches[key] = value
            else:
                no_matches[key] = value
        return self._create_from(matches), self._create_from(no_matches)

    def get_iterator(self) -> Iterator[V]:
        """
        Returns an iterator over a snapshot of the values; the collection may be modified while
        iterating.
        """
        return iter(self.get_values())

    def items(self) -> Iterator[tuple[K, V]]:
        return iter(list(self._elements.items()))

    def matching(self, criteria: Criteria) -> ArrayCollection[K, V]:
        """
        Selects the entries matching a `Criteria`, preserving keys.

        The filter expression is applied first, then the orderings (a stable sort, first
        ordering as the primary key), then the `first_result` / `max_results` window.

        Args:
            criteria (Criteria):
                The query specification.

        Returns:
            ArrayCollection[K, V]:
                A new collection with the selected entries.

        Raises:
            KeyError | AttributeError:
                If an element lacks a field referenced by the criteria.
        """
        entries = list(self._elements.items())

        if (where := criteria.where_expression) is not None:
            entries = [(key, value) for key, value in entries if where.evaluate(value)]

        for field, direction in reversed(list(criteria.orderings.items())):
            entries.sort(
                key=lambda entry, f=field: read_field(entry[1], f),
                reverse=direction is Order.DESC,
            )

        if criteria.first_result is not None or criteria.max_results is not None:
            start = criteria.first_result or 0
            stop = None if criteria.max_results is None else start + criteria.max_results
            entries = entries[start:stop]

        return self._create_from(dict(entries))

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[V]:
        return self.get_iterator()

    def __contains__(self, element: object) -> bool:
        return self.contains(element)

    def __getitem__(self, key: K) -> V | None:
        return self.get(key)

    def __setitem__(self, key: K, value: V) -> None:
        self.set(key, value)

    def __delitem__(self, key: K) -> None:
        self.remove(key)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ArrayCollection):
            # Order is part of the contents
            other_elements = cast(ArrayCollection[Any, Any], other)._elements
            return list(self._elements.items()) == list(other_elements.items())
        return NotImplemented

    def __repr__(self) -> str:
        return f"ArrayCollection({self._elements!r})"
