"""
FastAPI app entry point aggregating the routers under salon_inventory/routes.
Keep as `uvicorn salon_inventory.api:app`.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from . import __version__
from .db import get_conn, load_config
from .repository import ensure_schema

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    config = load_config()
    with get_conn(config.database) as conn:
        ensure_schema(conn)
    logger.info("schema ready (%s, env=%s)", config.database, config.env)
    yield


app = FastAPI(title="salon-inventory-api", version=__version__, lifespan=lifespan)


# Include routers (split by resource)
from .routes import base as base_routes
from .routes import users as users_routes
from .routes import inventories as inventories_routes
from .routes import maintenance as maintenance_routes

app.include_router(base_routes.router)
app.include_router(users_routes.router)
app.include_router(inventories_routes.router)
app.include_router(maintenance_routes.router)
