"""Error kinds raised by the inventory store.

Every error records the logical operation that failed so callers can map
kinds to responses without matching on message text.
"""
from __future__ import annotations


class InventoryError(Exception):
    def __init__(self, operation: str, detail: str | None = None):
        self.operation = operation
        self.detail = detail
        msg = operation if not detail else f"{operation}: {detail}"
        super().__init__(msg)


class NotFound(InventoryError):
    """A username, inventory, line or color did not resolve."""


class DuplicateUser(InventoryError):
    pass


class DuplicateInventory(InventoryError):
    pass


class DuplicateAssociation(InventoryError):
    pass


class InvalidSortCriterion(InventoryError, ValueError):
    pass


class DataLoadError(InventoryError):
    pass


class StoreUnavailable(InventoryError):
    pass
