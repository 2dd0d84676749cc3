"""
InventoryService: validation, id allocation and CRUD over a KeyedStore.

The service is the only writer of the item map and the id counter. Mutating
operations run under one lock so the counter read/increment/write and the
insert that follows behave as a single step.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from typing import Any

from stockroom.errors import NotFound, StorageFailure
from stockroom.ids import U64_MAX, next_id
from stockroom.models import InventoryItem, InventoryPayload, decode_item, encode_item, parse_payload
from stockroom.storage import KeyedStore
from stockroom.timeutils import not_before, now_ns

Payload = InventoryPayload | Mapping[str, Any]


class InventoryService:
    """CRUD over inventory items; all persistence goes through ``store``."""

    def __init__(self, store: KeyedStore, clock: Callable[[], int] = now_ns) -> None:
        self._store = store
        self._clock = clock
        self._lock = threading.Lock()

    def get_item(self, id: int) -> InventoryItem:
        item = self._lookup(id)
        if item is None:
            raise NotFound(id, "get")
        return item

    def list_items(self) -> list[InventoryItem]:
        """All items in ascending id order."""
        return [self._decode(key, record) for key, record in self._store.iterate()]

    def add_item(self, payload: Payload) -> InventoryItem:
        """
        Validate, allocate the next id, persist and return the new item.
        Invalid payloads raise InvalidInput before the counter is touched.

        If the insert fails the counter is put back before the lock is
        released, so the id is never seen by anyone.
        """
        payload = parse_payload(payload)
        with self._lock:
            previous = self._store.counter_get()
            id = next_id(previous)
            self._store.counter_set(id)
            item = InventoryItem.from_payload(id, payload, created_at=self._clock())
            try:
                self._store.insert(id, encode_item(item))
            except StorageFailure:
                self._store.counter_set(previous)
                raise
        return item

    def update_item(self, id: int, payload: Payload) -> InventoryItem:
        """Replace name/quantity/price and stamp updated_at. id and created_at stay."""
        payload = parse_payload(payload)
        with self._lock:
            item = self._lookup(id)
            if item is None:
                raise NotFound(id, "update")
            updated_at = not_before(self._clock(), item.created_at, item.updated_at)
            updated = item.revised(payload, updated_at)
            self._store.insert(id, encode_item(updated))
        return updated

    def delete_item(self, id: int) -> InventoryItem:
        """Remove and return the item. Its id is never handed out again."""
        with self._lock:
            item = self._lookup(id)
            if item is None:
                raise NotFound(id, "delete")
            self._store.remove(id)
        return item

    def _lookup(self, id: int) -> InventoryItem | None:
        # Ids outside the u64 range cannot have been allocated.
        if not 0 <= id <= U64_MAX:
            return None
        record = self._store.get(id)
        if record is None:
            return None
        return self._decode(id, record)

    @staticmethod
    def _decode(key: int, record: bytes) -> InventoryItem:
        item = decode_item(record)
        if item.id != key:
            raise StorageFailure(f"record under key={key} carries id={item.id}")
        return item
