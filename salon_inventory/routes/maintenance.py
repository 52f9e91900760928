from __future__ import annotations

from fastapi import APIRouter, Depends

from ..logs import LogContext, search_logs
from ..services.store import InventoryStore
from .deps import get_store, to_http

router = APIRouter()


@router.post("/api/demo/reset")
def api_demo_reset(store: InventoryStore = Depends(get_store)):
    log = LogContext("RESET_DEMO_ACCOUNT", database=store.config.database)
    try:
        executed = store.reset_demo_account()
    except Exception as e:
        log.write("ERROR", str(e))
        raise to_http(e)
    log.set_after({"statements": executed})
    log.write("OK")
    return {"message": "ok", "statements": executed}


@router.get("/api/logs/search")
def api_logs_search(
    page: int = 1,
    size: int = 20,
    action: str | None = None,
    query: str | None = None,
    ts_from: str | None = None,
    ts_to: str | None = None,
    entity_type: str | None = None,
    user: str | None = None,
    store: InventoryStore = Depends(get_store),
):
    total, items = search_logs(
        query, action, ts_from, ts_to, page, size,
        database=store.config.database, entity_type=entity_type, user=user,
    )
    return {"total": total, "items": items}
