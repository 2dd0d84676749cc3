"""
KeyedStore: point ops, ordered iteration, counter cell and restart durability.
"""

import pytest

from stockroom import KeyedStore, StorageFailure, U64_MAX


def test_get_missing_key_returns_none(store):
    assert store.get(42) is None


def test_insert_overwrites_and_returns_previous(store):
    assert store.insert(1, b"first") is None
    assert store.insert(1, b"second") == b"first"
    assert store.get(1) == b"second"
    assert len(store) == 1


def test_remove_returns_prior_record_or_none(store):
    store.insert(5, b"five")
    assert store.remove(5) == b"five"
    assert store.remove(5) is None
    assert store.get(5) is None


def test_iterate_is_ordered_by_numeric_key(store):
    # Big-endian packing keeps keys above 2**63 after small ones.
    for key in (2**63 + 5, 3, U64_MAX, 10, 1):
        store.insert(key, str(key).encode())
    keys = [key for key, _ in store.iterate()]
    assert keys == [1, 3, 10, 2**63 + 5, U64_MAX]


def test_iterate_restarts_and_sees_current_state(store):
    store.insert(1, b"a")
    first = list(store.iterate())
    store.insert(2, b"b")
    store.remove(1)
    second = list(store.iterate())
    assert first == [(1, b"a")]
    assert second == [(2, b"b")]


def test_iterate_sees_state_at_call_time(store):
    store.insert(1, b"a")
    scan = store.iterate()
    store.insert(2, b"b")
    store.remove(1)
    assert list(scan) == [(1, b"a")]
    assert list(store.iterate()) == [(2, b"b")]


def test_iterate_on_empty_store_keeps_its_snapshot(store):
    scan = store.iterate()
    store.insert(1, b"a")
    assert list(scan) == []


def test_counter_starts_at_zero_and_persists(db_path):
    store = KeyedStore(db_path)
    assert store.counter_get() == 0
    store.counter_set(7)
    reopened = KeyedStore(db_path)
    assert reopened.counter_get() == 7


def test_records_survive_reopen(db_path):
    KeyedStore(db_path).insert(3, b"kept")
    assert KeyedStore(db_path).get(3) == b"kept"


def test_counter_holds_full_u64_range(store):
    store.counter_set(U64_MAX)
    assert store.counter_get() == U64_MAX


@pytest.mark.parametrize("bad", [-1, U64_MAX + 1])
def test_keys_outside_u64_are_rejected(store, bad):
    with pytest.raises(StorageFailure):
        store.insert(bad, b"x")
    with pytest.raises(StorageFailure):
        store.counter_set(bad)
