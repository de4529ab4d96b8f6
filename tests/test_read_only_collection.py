import logging
from typing import Any, Callable

import pytest
from ro_collections.containers.collection.array_collection import ArrayCollection
from ro_collections.containers.collection.collection_protocols import (
    MutableCollection,
    Queryable,
    ReadableCollection,
)
from ro_collections.containers.collection.criteria import Criteria, Order
from ro_collections.containers.read_only.read_only_collection import ReadOnlyCollectionView
from ro_collections.containers.read_only.read_only_errors import (
    ReadOnlyViolation,
    UnsupportedCapability,
)

# pylint: disable=protected-access
# pyright: reportPrivateUsage=false


class NonQueryableCollection(ArrayCollection[Any, Any]):
    # Hides the Queryable capability from runtime protocol checks
    matching = None  # type: ignore[assignment]


@pytest.fixture(name="inner")
def inner_impl() -> ArrayCollection[int, int]:
    return ArrayCollection([1, 2, 3])


@pytest.fixture(name="view")
def view_impl(inner: ArrayCollection[int, int]) -> ReadOnlyCollectionView[int, int]:
    return ReadOnlyCollectionView(inner)


@pytest.fixture(name="people")
def people_impl() -> ArrayCollection[str, dict[str, Any]]:
    return ArrayCollection({
        "alice": {"name": "Alice", "age": 31},
        "bob": {"name": "Bob", "age": 17},
        "carol": {"name": "Carol", "age": 45},
    })


def test_basic_scenario(view: ReadOnlyCollectionView[int, int]) -> None:
    assert view.count() == 3
    assert view.contains(2)

    with pytest.raises(ReadOnlyViolation):
        view.add(4)

    assert view.to_array() == {0: 1, 1: 2, 2: 3}


def test_empty_scenario() -> None:
    view: ReadOnlyCollectionView[int, int] = ReadOnlyCollectionView(ArrayCollection())
    assert view.is_empty()
    assert view.first() is None

    with pytest.raises(ReadOnlyViolation):
        view.remove(0)


def test_filter_returns_independent_mutable_collection() -> None:
    inner = ArrayCollection({"a": 1, "b": 2})
    view = ReadOnlyCollectionView(inner)

    filtered = view.filter(lambda v: v > 1)
    assert filtered.to_array() == {"b": 2}
    assert not isinstance(filtered, ReadOnlyCollectionView)

    filtered.set("c", 3)
    filtered.remove("b")
    assert inner.to_array() == {"a": 1, "b": 2}


MUTATORS: list[tuple[str, Callable[[ReadOnlyCollectionView[int, int]], object], str]] = [
    ("add", lambda v: v.add(4), "add an element to"),
    ("clear", lambda v: v.clear(), "clear"),
    ("remove", lambda v: v.remove(0), "remove an element from"),
    ("remove_element", lambda v: v.remove_element(1), "remove an element from"),
    ("set", lambda v: v.set(0, 9), "set an element in"),
    ("setitem", lambda v: v.__setitem__(0, 9), "set an element in"),
    ("delitem", lambda v: v.__delitem__(0), "remove an element from"),
]


@pytest.mark.parametrize(
    "mutate,action", [(m, a) for _, m, a in MUTATORS], ids=[name for name, _, _ in MUTATORS]
)
def test_mutators_are_rejected(
    inner: ArrayCollection[int, int],
    view: ReadOnlyCollectionView[int, int],
    mutate: Callable[[ReadOnlyCollectionView[int, int]], object],
    action: str,
) -> None:
    before = inner.to_array()

    with pytest.raises(ReadOnlyViolation, match=f"Could not {action} read-only collection") as exc:
        mutate(view)

    assert exc.value.action == action
    assert isinstance(exc.value, TypeError)
    assert inner.to_array() == before
    assert view.to_array() == before


def test_subscript_mutation_is_rejected(view: ReadOnlyCollectionView[int, int]) -> None:
    with pytest.raises(ReadOnlyViolation):
        view[0] = 10

    with pytest.raises(ReadOnlyViolation):
        del view[1]

    assert view.get_values() == [1, 2, 3]


def test_rejection_is_logged(
    view: ReadOnlyCollectionView[int, int], caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger="ro_collections"):
        with pytest.raises(ReadOnlyViolation):
            view.clear()

    assert "Rejected attempt to clear read-only view over ArrayCollection" in caplog.text


def test_reads_match_wrapped_collection(
    inner: ArrayCollection[int, int], view: ReadOnlyCollectionView[int, int]
) -> None:
    assert view.contains(3) == inner.contains(3)
    assert view.contains(7) == inner.contains(7)
    assert view.contains_key(0) == inner.contains_key(0)
    assert view.contains_key(5) == inner.contains_key(5)
    assert view.is_empty() == inner.is_empty()
    assert view.count() == inner.count() == len(view)
    assert view.get(1) == inner.get(1) == 2
    assert view.get(99) is None
    assert view.get_keys() == inner.get_keys() == [0, 1, 2]
    assert view.get_values() == inner.get_values() == [1, 2, 3]
    assert view.index_of(3) == inner.index_of(3) == 2
    assert view.index_of(42) is None
    assert view.slice(1) == inner.slice(1) == {1: 2, 2: 3}
    assert view.slice(0, 2) == {0: 1, 1: 2}
    assert view.exists(lambda v: v > 2)
    assert not view.exists(lambda v: v > 3)
    assert view.for_all(lambda v: v > 0)
    assert not view.for_all(lambda v: v > 1)
    assert view.map(lambda v: v * 10) == inner.map(lambda v: v * 10)
    assert list(view.items()) == [(0, 1), (1, 2), (2, 3)]


def test_slice_with_negative_offset_and_length(
    inner: ArrayCollection[int, int], view: ReadOnlyCollectionView[int, int]
) -> None:
    assert view.slice(0, -1) == inner.slice(0, -1) == {0: 1, 1: 2}
    assert view.slice(-2, -1) == inner.slice(-2, -1) == {1: 2}
    assert view.slice(1, -5) == {}
    assert view.slice(0, -4) == inner.slice(0, -4) == {}


def test_first_and_last(view: ReadOnlyCollectionView[int, int]) -> None:
    assert view.first() == 1
    assert view.last() == 3
    assert view.first() == 1


def test_reads_are_idempotent(view: ReadOnlyCollectionView[int, int]) -> None:
    assert view.to_array() == view.to_array()
    assert view.get_keys() == view.get_keys()
    assert view.slice(-2) == view.slice(-2)
    assert view.partition(lambda v: v % 2 == 0) == view.partition(lambda v: v % 2 == 0)


def test_partition(view: ReadOnlyCollectionView[int, int]) -> None:
    even, odd = view.partition(lambda v: v % 2 == 0)
    assert even.to_array() == {1: 2}
    assert odd.to_array() == {0: 1, 2: 3}


def test_iteration(view: ReadOnlyCollectionView[int, int]) -> None:
    assert list(view) == [1, 2, 3]
    assert list(view.get_iterator()) == [1, 2, 3]


def test_membership_and_subscript_read(view: ReadOnlyCollectionView[int, int]) -> None:
    assert 2 in view
    assert 5 not in view
    assert view[0] == 1


def test_subscript_read_agrees_with_get(view: ReadOnlyCollectionView[int, int]) -> None:
    assert view[10] is None
    assert view[10] == view.get(10)
    assert view[2] == view.get(2) == 3


def test_errors_from_wrapped_collection_propagate(
    people: ArrayCollection[str, dict[str, Any]]
) -> None:
    view = ReadOnlyCollectionView(people)

    with pytest.raises(KeyError):
        view.matching(Criteria(where=Criteria.expr().eq("email", "a@example.com")))


def test_view_reflects_changes_through_owner(
    inner: ArrayCollection[int, int], view: ReadOnlyCollectionView[int, int]
) -> None:
    inner.add(4)
    assert view.count() == 4
    assert view.last() == 4


def test_cursor_is_shared_with_wrapped_collection(
    inner: ArrayCollection[int, int], view: ReadOnlyCollectionView[int, int]
) -> None:
    assert view.first() == 1
    assert view.key() == 0
    assert view.next() == 2
    assert inner.current() == 2
    assert inner.key() == 1

    inner.next()
    assert view.current() == 3
    assert view.next() is None
    assert view.key() is None

    assert view.last() == 3
    assert inner.key() == 2


def test_matching_on_queryable_collection(people: ArrayCollection[str, dict[str, Any]]) -> None:
    view = ReadOnlyCollectionView(people)
    expr = Criteria.expr()
    criteria = Criteria().where(expr.gte("age", 18)).order_by({"age": Order.DESC})

    result = view.matching(criteria)

    assert result == people.matching(criteria)
    assert result.get_keys() == ["carol", "alice"]


def test_matching_on_non_queryable_collection() -> None:
    inner = NonQueryableCollection([1, 2, 3])
    view = ReadOnlyCollectionView(inner)

    assert not isinstance(inner, Queryable)
    with pytest.raises(
        UnsupportedCapability,
        match="Collection NonQueryableCollection does not implement Queryable",
    ) as exc:
        view.matching(Criteria())

    assert exc.value.collection_type is NonQueryableCollection
    assert exc.value.capability == "Queryable"
    assert exc.value.operation == "matching"


def test_view_satisfies_readable_protocol(view: ReadOnlyCollectionView[int, int]) -> None:
    assert isinstance(view, ReadableCollection)
    assert isinstance(view, Queryable)


def test_filter_result_is_mutable_collection(view: ReadOnlyCollectionView[int, int]) -> None:
    assert isinstance(view.filter(lambda v: True), MutableCollection)


def test_wrapped_reference_cannot_be_rebound(view: ReadOnlyCollectionView[int, int]) -> None:
    original = view._inner

    with pytest.raises(AttributeError):
        view._inner = ArrayCollection([9])  # type: ignore[misc]

    with pytest.raises(AttributeError):
        del view._inner

    assert view._inner is original


def test_view_does_not_copy(inner: ArrayCollection[int, int]) -> None:
    view = ReadOnlyCollectionView(inner)
    assert view._inner is inner


def test_create_requires_collection() -> None:
    with pytest.raises(TypeError, match="requires a collection to wrap"):
        ReadOnlyCollectionView(None)  # type: ignore[arg-type]

    with pytest.raises(TypeError):
        ReadOnlyCollectionView()  # type: ignore[call-arg]  # pylint: disable=no-value-for-parameter


def test_multiple_views_share_collection(inner: ArrayCollection[int, int]) -> None:
    first = ReadOnlyCollectionView(inner)
    second = ReadOnlyCollectionView(inner)
    assert first == second

    del first
    assert second.count() == 3
    assert inner.count() == 3


def test_eq(inner: ArrayCollection[int, int], view: ReadOnlyCollectionView[int, int]) -> None:
    assert view == inner
    assert inner == view
    assert view == ReadOnlyCollectionView(ArrayCollection([1, 2, 3]))
    assert view != ReadOnlyCollectionView(ArrayCollection([3, 2, 1]))
    assert view != 123


def test_repr(view: ReadOnlyCollectionView[int, int]) -> None:
    assert repr(view) == "ReadOnlyCollectionView(ArrayCollection({0: 1, 1: 2, 2: 3}))"
