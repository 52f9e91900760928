from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..logs import LogContext
from ..services.store import InventoryStore
from .deps import get_store, to_http

router = APIRouter()


class UserCreate(BaseModel):
    username: str
    password: str
    name: str


class UserLogin(BaseModel):
    username: str
    password: str


@router.post("/api/users", status_code=201)
def api_user_create(body: UserCreate, store: InventoryStore = Depends(get_store)):
    log = LogContext("CREATE_USER", user=body.username, database=store.config.database)
    log.set_entity("USER", body.username)
    try:
        store.create_user(body.username, body.password, body.name)
        log.write("OK")
        return {"message": "ok"}
    except Exception as e:
        log.write("ERROR", type(e).__name__)
        raise to_http(e)


@router.post("/api/users/verify")
def api_user_verify(body: UserLogin, store: InventoryStore = Depends(get_store)):
    if not store.verify_user(body.username, body.password):
        raise HTTPException(status_code=401, detail="invalid credentials")
    return {"username": body.username, "first_name": store.user_first_name(body.username)}


@router.get("/api/users/{username}/inventories")
def api_user_inventories(username: str, store: InventoryStore = Depends(get_store)):
    if not store.user_exists(username):
        raise HTTPException(status_code=404, detail="user_not_found")
    return {"items": store.user_inventories(username)}
