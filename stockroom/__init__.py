"""
Inventory record store: durable keyed storage plus the CRUD service on top.

Framework-agnostic; no FastAPI dependency. Uses Pydantic v2 for schemas.
"""

from stockroom.errors import InvalidInput, InventoryError, NotFound, StorageFailure
from stockroom.ids import U64_MAX, next_id
from stockroom.logging import setup_logging
from stockroom.models import (
    ErrorResult,
    InventoryItem,
    InventoryPayload,
    ItemListResult,
    ItemResult,
    decode_item,
    encode_item,
    parse_payload,
)
from stockroom.service import InventoryService
from stockroom.storage import KeyedStore
from stockroom.timeutils import not_before, now_ns, ns_to_iso

__all__ = [
    "InventoryError",
    "NotFound",
    "InvalidInput",
    "StorageFailure",
    "U64_MAX",
    "next_id",
    "setup_logging",
    "InventoryItem",
    "InventoryPayload",
    "ErrorResult",
    "ItemResult",
    "ItemListResult",
    "encode_item",
    "decode_item",
    "InventoryService",
    "parse_payload",
    "KeyedStore",
    "now_ns",
    "not_before",
    "ns_to_iso",
]
