from __future__ import annotations
from collections.abc import Hashable
import logging as _logging
from typing import Any, Callable, Generic, Iterator, NoReturn, TypeVar, cast

from ro_collections.containers.collection.collection_protocols import (
    MutableCollection,
    Queryable,
    ReadableCollection,
)
from ro_collections.containers.read_only.read_only_errors import (
    ReadOnlyViolation,
    UnsupportedCapability,
)
from ro_collections.typeutils.capability import require_capability

_logger = _logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ReadOnlyCollectionView(Generic[K, V]):
    """
    A read-only view over a mutable collection. Forwards every read and rejects every write.

    The view holds a reference to the wrapped collection; it does not copy it. Changes made
    through other references to the collection are visible through the view. Elements are not
    frozen, so mutable elements can still be modified in place.

    Every mutating operation (`add`, `clear`, `remove`, `remove_element`, `set`, item assignment
    and item deletion) raises `ReadOnlyViolation` without touching the wrapped collection.
    Errors raised by the wrapped collection on the read path propagate unchanged.

    The cursor methods (`first`, `last`, `key`, `current`, `next`) drive the wrapped collection's
    own cursor, which is shared with every other holder of that collection. Iterate with
    `get_iterator()` / `for ... in view` for traversal that does not disturb anyone else.

    Attributes:
        _inner (ReadableCollection[K, V]):
            The wrapped collection. Bound once at construction and never rebound.
    """

    __slots__ = ("_inner",)

    _inner: ReadableCollection[K, V]

    def __init__(self, collection: ReadableCollection[K, V]):
        if collection is None:
            raise TypeError(f"{type(self).__name__} requires a collection to wrap, got None")
        object.__setattr__(self, "_inner", collection)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only, cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only, cannot delete '{name}'")

    def _reject(self, action: str) -> ReadOnlyViolation:
        _logger.debug(
            "Rejected attempt to %s read-only view over %s", action, type(self._inner).__name__
        )
        return ReadOnlyViolation.invalid_access(action)

    # Rejected operations

    def add(self, element: V) -> NoReturn:
        raise self._reject("add an element to")

    def clear(self) -> NoReturn:
        raise self._reject("clear")

    def remove(self, key: K) -> NoReturn:
        raise self._reject("remove an element from")

    def remove_element(self, element: object) -> NoReturn:
        raise self._reject("remove an element from")

    def set(self, key: K, value: V) -> NoReturn:
        raise self._reject("set an element in")

    def __setitem__(self, key: K, value: V) -> NoReturn:
        raise self._reject("set an element in")

    def __delitem__(self, key: K) -> NoReturn:
        raise self._reject("remove an element from")

    # Delegated read operations

    def contains(self, element: object) -> bool:
        return self._inner.contains(element)

    def contains_key(self, key: K) -> bool:
        return self._inner.contains_key(key)

    def is_empty(self) -> bool:
        return self._inner.is_empty()

    def count(self) -> int:
        return self._inner.count()

    def get(self, key: K) -> V | None:
        return self._inner.get(key)

    def get_keys(self) -> list[K]:
        return self._inner.get_keys()

    def get_values(self) -> list[V]:
        return self._inner.get_values()

    def to_array(self) -> dict[K, V]:
        return self._inner.to_array()

    def first(self) -> V | None:
        return self._inner.first()

    def last(self) -> V | None:
        return self._inner.last()

    def key(self) -> K | None:
        return self._inner.key()

    def current(self) -> V | None:
        return self._inner.current()

    def next(self) -> V | None:
        return self._inner.next()

    def index_of(self, element: object) -> K | None:
        return self._inner.index_of(element)

    def slice(self, offset: int, length: int | None = None) -> dict[K, V]:
        return self._inner.slice(offset, length)

    def exists(self, predicate: Callable[[V], bool]) -> bool:
        return self._inner.exists(predicate)

    def for_all(self, predicate: Callable[[V], bool]) -> bool:
        return self._inner.for_all(predicate)

    def filter(self, predicate: Callable[[V], bool]) -> MutableCollection[K, V]:
        """
        Returns the wrapped collection's own filtered result.

        The result is a new, fully mutable collection owned by the caller, not a read-only view.
        """
        return self._inner.filter(predicate)

    def map(self, func: Callable[[V], Any]) -> MutableCollection[K, Any]:
        return self._inner.map(func)

    def partition(
        self, predicate: Callable[[V], bool]
    ) -> tuple[MutableCollection[K, V], MutableCollection[K, V]]:
        return self._inner.partition(predicate)

    def get_iterator(self) -> Iterator[V]:
        return self._inner.get_iterator()

    def items(self) -> Iterator[tuple[K, V]]:
        return self._inner.items()

    def matching(self, criteria: Any) -> MutableCollection[K, V]:
        """
        Forwards a criteria query to the wrapped collection.

        Args:
            criteria (Any):
                A query specification understood by the wrapped collection, passed through
                unexamined.

        Returns:
            MutableCollection[K, V]:
                Exactly what the wrapped collection's `matching()` returns.

        Raises:
            UnsupportedCapability:
                If the wrapped collection does not implement `Queryable`.
        """
        try:
            queryable = require_capability(Queryable, self._inner, "matching")
        except UnsupportedCapability:
            _logger.debug(
                "Wrapped %s does not support matching()", type(self._inner).__name__
            )
            raise
        return cast(Queryable[K, V], queryable).matching(criteria)

    def __len__(self) -> int:
        return len(self._inner)

    def __iter__(self) -> Iterator[V]:
        return iter(self._inner)

    def __contains__(self, element: object) -> bool:
        return element in self._inner

    def __getitem__(self, key: K) -> V | None:
        return self._inner.get(key)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ReadOnlyCollectionView):
            # Cast is for the type checker only; attribute access is safe for comparison
            return self._inner == cast(ReadOnlyCollectionView[K, V], other)._inner
        return self._inner == other

    def __repr__(self) -> str:
        return f"ReadOnlyCollectionView({self._inner!r})"
