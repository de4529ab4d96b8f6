"""
Capability protocols for ordered-mapping collections.

A collection maps keys (integer positions or explicit keys) to values while keeping insertion
order. The capabilities are split so that wrappers can narrow what they expose:
  - `ReadableCollection`: membership, lookup, iteration, and predicate queries
  - `MutableCollection`: everything readable plus add/remove/replace
  - `Queryable`: criteria-based filtering through `matching()`

All protocols are runtime-checkable, so `isinstance(obj, Queryable)` performs a shallow
structural check on the presence of the methods.
"""

from __future__ import annotations
from collections.abc import Hashable
from typing import Any, Callable, Iterator, Protocol, TypeVar, runtime_checkable

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@runtime_checkable
class ReadableCollection(Protocol[K, V]):
    def contains(self, element: object) -> bool: ...
    def contains_key(self, key: K) -> bool: ...
    def is_empty(self) -> bool: ...
    def count(self) -> int: ...
    def get(self, key: K) -> V | None: ...
    def get_keys(self) -> list[K]: ...
    def get_values(self) -> list[V]: ...
    def to_array(self) -> dict[K, V]: ...
    def first(self) -> V | None: ...
    def last(self) -> V | None: ...
    def key(self) -> K | None: ...
    def current(self) -> V | None: ...
    def next(self) -> V | None: ...
    def index_of(self, element: object) -> K | None: ...
    def slice(self, offset: int, length: int | None = None) -> dict[K, V]: ...
    def exists(self, predicate: Callable[[V], bool]) -> bool: ...
    def for_all(self, predicate: Callable[[V], bool]) -> bool: ...
    def filter(self, predicate: Callable[[V], bool]) -> MutableCollection[K, V]: ...
    def map(self, func: Callable[[V], Any]) -> MutableCollection[K, Any]: ...
    def partition(
        self, predicate: Callable[[V], bool]
    ) -> tuple[MutableCollection[K, V], MutableCollection[K, V]]: ...
    def get_iterator(self) -> Iterator[V]: ...
    def items(self) -> Iterator[tuple[K, V]]: ...
    def __len__(self) -> int: ...
    def __iter__(self) -> Iterator[V]: ...
    def __contains__(self, element: object) -> bool: ...
    def __getitem__(self, key: K) -> V | None: ...


@runtime_checkable
class MutableCollection(ReadableCollection[K, V], Protocol[K, V]):
    def add(self, element: V) -> bool: ...
    def clear(self) -> None: ...
    def remove(self, key: K) -> V | None: ...
    def remove_element(self, element: object) -> bool: ...
    def set(self, key: K, value: V) -> None: ...
    def __setitem__(self, key: K, value: V) -> None: ...
    def __delitem__(self, key: K) -> None: ...


@runtime_checkable
class Queryable(Protocol[K, V]):
    def matching(self, criteria: Any) -> MutableCollection[K, V]: ...
