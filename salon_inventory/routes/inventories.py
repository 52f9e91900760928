from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ..domain.inventory import SortOrder
from ..logs import LogContext
from ..services.store import InventoryStore
from .deps import get_store, to_http

router = APIRouter()


class InventoryCreate(BaseModel):
    name: str


class LineAdd(BaseModel):
    line: str


class ColorAdd(BaseModel):
    line: str
    depth: str
    tone: str
    count: int = Field(1, ge=1)


class ColorUse(BaseModel):
    line: str
    depth: str
    tone: str


def _write(store: InventoryStore, action: str, username: str, payload: dict, fn, entity=None):
    log = LogContext(action, user=username, database=store.config.database)
    log.set_payload(payload)
    if entity:
        entity(log)
    try:
        fn()
        log.write("OK")
        return {"message": "ok"}
    except Exception as e:
        log.write("ERROR", type(e).__name__)
        raise to_http(e)


@router.post("/api/users/{username}/inventories", status_code=201)
def api_inventory_create(username: str, body: InventoryCreate, store: InventoryStore = Depends(get_store)):
    return _write(
        store, "CREATE_INVENTORY", username, body.model_dump(),
        lambda: store.create_new_inventory(body.name, username),
        entity=lambda log: log.set_inventory(body.name),
    )


@router.get("/api/users/{username}/inventories/{inv_name}")
def api_inventory_get(
    username: str,
    inv_name: str,
    sort: str | None = None,
    direction: str = "ascending",
    store: InventoryStore = Depends(get_store),
):
    try:
        inventory = store.retrieve_inventory(username, inv_name)
        if sort:
            inventory.sort_colors(sort, direction)
    except Exception as e:
        raise to_http(e)
    return {"name": inv_name, "lines": inventory.to_dict()}


@router.post("/api/users/{username}/inventories/{inv_name}/lines", status_code=201)
def api_line_add(username: str, inv_name: str, body: LineAdd, store: InventoryStore = Depends(get_store)):
    return _write(
        store, "ADD_LINE", username, {"inventory": inv_name, **body.model_dump()},
        lambda: store.add_new_color_line(body.line, inv_name, username),
        entity=lambda log: log.set_line(body.line, inv_name),
    )


@router.post("/api/users/{username}/inventories/{inv_name}/colors/add")
def api_color_add(username: str, inv_name: str, body: ColorAdd, store: InventoryStore = Depends(get_store)):
    return _write(
        store, "ADD_COLOR", username, {"inventory": inv_name, **body.model_dump()},
        lambda: store.add_color(body.line, body.depth, body.tone, body.count, inv_name, username),
        entity=lambda log: log.set_color(body.line, body.depth, body.tone, inv_name),
    )


@router.post("/api/users/{username}/inventories/{inv_name}/colors/use")
def api_color_use(username: str, inv_name: str, body: ColorUse, store: InventoryStore = Depends(get_store)):
    return _write(
        store, "USE_COLOR", username, {"inventory": inv_name, **body.model_dump()},
        lambda: store.use_color(username, inv_name, body.line, body.depth, body.tone),
        entity=lambda log: log.set_color(body.line, body.depth, body.tone, inv_name),
    )


@router.get("/api/users/{username}/inventories/{inv_name}/lines/{line}/colors")
def api_line_colors_page(
    username: str,
    inv_name: str,
    line: str,
    sort: str = "depth",
    direction: str = "ascending",
    page: int = Query(1, ge=1),
    store: InventoryStore = Depends(get_store),
):
    try:
        order = SortOrder.parse(sort, direction)
        total = store.count_line_colors(username, inv_name, line)
        colors = store.sorted_colors_page(username, inv_name, line, order, page)
    except Exception as e:
        raise to_http(e)
    return {
        "total": total,
        "page": page,
        "pages": store.line_page_count(username, inv_name, line),
        "items": [c.to_dict() for c in colors],
    }
