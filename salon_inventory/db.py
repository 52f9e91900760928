from __future__ import annotations

# salon_inventory/db.py
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

import yaml

from .errors import StoreUnavailable

# Connection target resolution order:
# 1) SALON_DB_PATH env var (highest priority)
# 2) production: DATABASE_URL env var or config.yaml database_url
# 3) config.yaml test_db_path / db_path for the active environment
# 4) fixed per-environment database file under the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_CONFIG_YAML = os.path.join(_PROJECT_ROOT, "config.yaml")

DEV_DB_NAME = "salon_inventory_db.db"
TEST_DB_NAME = "salon_inventory_db_test.db"
SCHEMA_PATH = os.path.join(_PROJECT_ROOT, "schema.sql")
DEMO_FIXTURE_PATH = os.path.join(_PROJECT_ROOT, "data", "stylishowl.sql")

ENVIRONMENTS = ("production", "test", "development")


@dataclass(frozen=True)
class StoreConfig:
    """Everything the store needs, resolved once by the caller."""

    env: str
    database: str
    hash_passwords: bool
    demo_fixture: str = DEMO_FIXTURE_PATH


def _read_config_yaml(path: str = _CONFIG_YAML) -> dict:
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    out = {}
    for k in ("db_path", "test_db_path", "database_url", "demo_fixture"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def current_env() -> str:
    env = (os.environ.get("APP_ENV") or "").strip().lower()
    if env in ENVIRONMENTS:
        return env
    if os.environ.get("PYTEST_CURRENT_TEST") is not None:
        return "test"
    return "development"


def load_config(env: str | None = None, config_path: str = _CONFIG_YAML) -> StoreConfig:
    env = (env or current_env()).lower()
    if env not in ENVIRONMENTS:
        raise ValueError(f"unknown environment: {env}")
    cfg = _read_config_yaml(config_path)
    env_path = os.environ.get("SALON_DB_PATH")

    if env_path:
        database = env_path
    elif env == "production":
        database = os.environ.get("DATABASE_URL") or cfg.get("database_url") or ""
        if not database:
            raise StoreUnavailable("load_config", "DATABASE_URL is required in production")
    elif env == "test":
        database = cfg.get("test_db_path") or os.path.join(_PROJECT_ROOT, TEST_DB_NAME)
    else:
        database = cfg.get("db_path") or os.path.join(_PROJECT_ROOT, DEV_DB_NAME)

    return StoreConfig(
        env=env,
        database=database,
        hash_passwords=(env != "test"),
        demo_fixture=cfg.get("demo_fixture") or DEMO_FIXTURE_PATH,
    )


def resolve_db_path(database: str) -> str:
    """Accept either a bare path or a sqlite:/// URL."""
    if database.startswith("sqlite:///"):
        return database[len("sqlite:///"):]
    if "://" in database:
        raise StoreUnavailable("connect", f"unsupported database url: {database}")
    return database


def connect(database: str) -> sqlite3.Connection:
    path = resolve_db_path(database)
    if path != ":memory:":
        dirn = os.path.dirname(path) or "."
        os.makedirs(dirn, exist_ok=True)
    try:
        conn = sqlite3.connect(
            path,
            detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
            check_same_thread=False,
            isolation_level=None,
        )
    except sqlite3.OperationalError as e:
        raise StoreUnavailable("connect", str(e)) from e
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_conn(database: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection. Uses the explicit database when given,
    otherwise the target from load_config().
    """
    conn = connect(database or load_config().database)
    try:
        yield conn
    finally:
        conn.close()
