"""
Pydantic v2 data models for inventory items, payloads and results,
plus the binary record codec used by the store.

Framework-agnostic; safe to use from FastAPI (request/response bodies) or
directly. All models forbid extra fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stockroom.config import MAX_RECORD_SIZE
from stockroom.errors import ErrorKind, InvalidInput, InventoryError, StorageFailure
from stockroom.ids import U32_MAX

RECORD_VERSION = 1

_LOC_PREFIXES = ("body", "path", "query")


# -----------------------------------------------------------------------------
# Domain models
# -----------------------------------------------------------------------------


class InventoryPayload(BaseModel):
    """Create/update body. Strict types: no bool-as-int, no numeric strings."""

    model_config = ConfigDict(extra="forbid", strict=True)

    name: str = Field(..., min_length=1, description="Name must not be empty")
    quantity: int = Field(..., gt=0, le=U32_MAX, description="Quantity must be positive")
    price: float = Field(..., gt=0, allow_inf_nan=False, description="Price must be positive")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value


def invalid_input(errors: list[dict[str, Any]]) -> InvalidInput:
    """
    Turn the first pydantic error into InvalidInput naming its field.
    Transport prefixes (body, path, query) are dropped from the location.
    """
    first = errors[0]
    field = ".".join(str(part) for part in first["loc"] if part not in _LOC_PREFIXES)
    return InvalidInput(field or "payload", first["msg"])


def parse_payload(data: InventoryPayload | Mapping[str, Any]) -> InventoryPayload:
    """
    Validate a payload (model or mapping) against InventoryPayload's rules.
    Models are re-checked so ``model_construct`` cannot skip validation.

    >>> parse_payload({"name": "Widget", "quantity": 0, "price": 1.0})
    Traceback (most recent call last):
    ...
    stockroom.errors.InvalidInput: invalid quantity: Input should be greater than 0
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return InventoryPayload.model_validate(data)
    except ValidationError as e:
        raise invalid_input(e.errors()) from e


class InventoryItem(BaseModel):
    """Persisted item. ``id`` is also its store key."""

    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    quantity: int
    price: float
    created_at: int
    updated_at: int | None = None

    @classmethod
    def from_payload(cls, id: int, payload: InventoryPayload, created_at: int) -> InventoryItem:
        """Build a fresh, never-updated item."""
        return cls(
            id=id,
            name=payload.name,
            quantity=payload.quantity,
            price=payload.price,
            created_at=created_at,
            updated_at=None,
        )

    def revised(self, payload: InventoryPayload, updated_at: int) -> InventoryItem:
        """Copy with payload fields replaced; id and created_at are kept."""
        return self.model_copy(
            update={
                "name": payload.name,
                "quantity": payload.quantity,
                "price": payload.price,
                "updated_at": updated_at,
            }
        )


# -----------------------------------------------------------------------------
# Tagged results (transport envelopes)
# -----------------------------------------------------------------------------


class ErrorMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    msg: str


class ErrorResult(BaseModel):
    """``{"Err": {"NotFound": {"msg": "..."}}}``"""

    model_config = ConfigDict(extra="forbid")

    Err: dict[ErrorKind, ErrorMessage]

    @classmethod
    def from_error(cls, err: InventoryError) -> ErrorResult:
        return cls(Err={err.kind: ErrorMessage(msg=err.msg)})


class ItemResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    Ok: InventoryItem


class ItemListResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    Ok: list[InventoryItem]


# -----------------------------------------------------------------------------
# Record codec
# -----------------------------------------------------------------------------


def encode_item(item: InventoryItem) -> bytes:
    """
    Encode an item as one version byte followed by its JSON form.
    Raises StorageFailure if the record would exceed MAX_RECORD_SIZE.

    >>> raw = encode_item(InventoryItem(id=1, name="Widget", quantity=10, price=2.5, created_at=7))
    >>> raw[:1]
    b'\\x01'
    >>> decode_item(raw).name
    'Widget'
    """
    try:
        body = item.model_dump_json().encode("utf-8")
    except ValueError as e:
        raise StorageFailure(f"cannot encode item id={item.id}: {e}") from e
    record = bytes([RECORD_VERSION]) + body
    if len(record) > MAX_RECORD_SIZE:
        raise StorageFailure(
            f"item id={item.id} encodes to {len(record)} bytes, limit is {MAX_RECORD_SIZE}"
        )
    return record


def decode_item(record: bytes) -> InventoryItem:
    """Inverse of encode_item. Unknown versions and bad bodies raise StorageFailure."""
    if not record:
        raise StorageFailure("empty item record")
    if record[0] != RECORD_VERSION:
        raise StorageFailure(f"unsupported item record version {record[0]}")
    try:
        return InventoryItem.model_validate_json(record[1:])
    except ValidationError as e:
        raise StorageFailure(f"corrupt item record: {e.error_count()} validation error(s)") from e
