"""
Record codec and error taxonomy.
"""

import pytest

from stockroom import (
    InvalidInput,
    InventoryItem,
    NotFound,
    StorageFailure,
    decode_item,
    encode_item,
)
from stockroom.config import MAX_RECORD_SIZE
from stockroom.models import ErrorResult


@pytest.mark.parametrize(
    "item",
    [
        InventoryItem(id=1, name="Widget", quantity=10, price=2.5, created_at=1, updated_at=None),
        InventoryItem(id=2**64 - 1, name="Ünïcødé ☕", quantity=2**32 - 1, price=0.1, created_at=2**64 - 1, updated_at=2**64 - 1),
        InventoryItem(id=9, name="tiny", quantity=1, price=5e-324, created_at=0, updated_at=3),
    ],
)
def test_decode_reverses_encode(item):
    assert decode_item(encode_item(item)) == item


def test_oversized_record_fails_loudly():
    item = InventoryItem(id=1, name="x" * MAX_RECORD_SIZE, quantity=1, price=1.0, created_at=1)
    with pytest.raises(StorageFailure, match="limit is 1024"):
        encode_item(item)


def test_record_at_limit_is_accepted():
    base = InventoryItem(id=1, name="", quantity=1, price=1.0, created_at=1)
    padding = MAX_RECORD_SIZE - len(encode_item(base))
    item = base.model_copy(update={"name": "x" * padding})
    assert len(encode_item(item)) == MAX_RECORD_SIZE


def test_unknown_record_version_is_rejected():
    raw = encode_item(InventoryItem(id=1, name="a", quantity=1, price=1.0, created_at=1))
    with pytest.raises(StorageFailure, match="version 2"):
        decode_item(b"\x02" + raw[1:])


@pytest.mark.parametrize("raw", [b"", b"\x01not json", b'\x01{"id": 1}'])
def test_corrupt_records_raise_storage_failure(raw):
    with pytest.raises(StorageFailure):
        decode_item(raw)


def test_error_messages_name_the_id_or_field():
    assert NotFound(1).msg == "An item with id=1 not found"
    assert NotFound(1, "update").msg == "couldn't update an item with id=1. item not found"
    assert NotFound(3, "delete").id == 3
    err = InvalidInput("name", "must not be empty")
    assert (err.kind, err.field, err.msg) == ("InvalidInput", "name", "invalid name: must not be empty")


def test_error_result_is_tagged_by_kind():
    body = ErrorResult.from_error(NotFound(4)).model_dump()
    assert body == {"Err": {"NotFound": {"msg": "An item with id=4 not found"}}}
