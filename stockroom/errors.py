"""
Error taxonomy for the inventory store.

Every failure the service can raise is one of three kinds. Each carries a
``kind`` tag and a ``msg`` with enough context (id or field) to act on.
"""

from __future__ import annotations

from typing import Literal

ErrorKind = Literal["NotFound", "InvalidInput", "StorageFailure"]

_NOT_FOUND_MESSAGES = {
    "get": "An item with id={id} not found",
    "update": "couldn't update an item with id={id}. item not found",
    "delete": "couldn't delete an item with id={id}. item not found.",
}


class InventoryError(Exception):
    """Base class; subclasses set ``kind``."""

    kind: ErrorKind

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg


class NotFound(InventoryError):
    """
    The requested id is not in the store.

    >>> NotFound(7, "delete").msg
    "couldn't delete an item with id=7. item not found."
    """

    kind: ErrorKind = "NotFound"

    def __init__(self, id: int, action: str = "get") -> None:
        self.id = id
        self.action = action
        super().__init__(_NOT_FOUND_MESSAGES[action].format(id=id))


class InvalidInput(InventoryError):
    """
    A payload field failed validation. Raised before any mutation.

    >>> InvalidInput("price", "must be greater than 0").msg
    'invalid price: must be greater than 0'
    """

    kind: ErrorKind = "InvalidInput"

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"invalid {field}: {reason}")


class StorageFailure(InventoryError):
    """Encoding, size-bound, counter or SQLite failure. Fatal for the call."""

    kind: ErrorKind = "StorageFailure"
