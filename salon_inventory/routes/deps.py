from __future__ import annotations

from typing import Iterator

from fastapi import HTTPException

from ..errors import (
    DataLoadError,
    DuplicateAssociation,
    DuplicateInventory,
    DuplicateUser,
    InventoryError,
    NotFound,
    StoreUnavailable,
)
from ..services.store import InventoryStore, init_store

_STATUS = {
    NotFound: 404,
    DuplicateUser: 409,
    DuplicateInventory: 409,
    DuplicateAssociation: 409,
    DataLoadError: 500,
    StoreUnavailable: 503,
}


def get_store() -> Iterator[InventoryStore]:
    """One store (one connection) per request, released when the response is done."""
    store = init_store()
    try:
        yield store
    finally:
        store.disconnect()


def to_http(e: Exception) -> HTTPException:
    if isinstance(e, InventoryError):
        status = _STATUS.get(type(e), 400)
        return HTTPException(status_code=status, detail={"error": type(e).__name__, "operation": e.operation})
    if isinstance(e, ValueError):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=500, detail="internal error")
