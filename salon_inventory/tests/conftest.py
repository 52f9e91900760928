import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

SEED_SQL = [
    """
    INSERT INTO users (id, username, password, first_name)
    VALUES (111111, 'admin', 'secret', 'Mr. Admin');
    """,
    """
    INSERT INTO inventories (id, user_id, name)
    VALUES (222222, 111111, 'Mr. Admin''s 1st Inventory'),
    (333333, 111111, 'Mr. Admin''s 2nd Inventory');
    """,
    """
    INSERT INTO lines (id, name)
    VALUES (444444, 'Wella'), (555555, 'Difiaba');
    """,
    """
    INSERT INTO inventories_lines (inventory_id, line_id)
    VALUES (222222, 444444), (222222, 555555),
    (333333, 444444), (333333, 555555);
    """,
    """
    INSERT INTO colors (id, inventory_id, line_id, depth, tone, count)
    VALUES (888880, 222222, 444444, '10', '2', 1),
    (888881, 222222, 555555, '8', '3', 4),
    (888882, 333333, 444444, '10', '2', 1),
    (888883, 333333, 555555, '8', '3', 4);
    """,
]

INV1 = "Mr. Admin's 1st Inventory"
INV2 = "Mr. Admin's 2nd Inventory"


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "salon_inventory_test.db"
    # Point the app at this temp DB
    os.environ["SALON_DB_PATH"] = str(path)
    os.environ["APP_ENV"] = "test"
    schema = Path(_PROJECT_ROOT / "schema.sql").read_text(encoding="utf-8")
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(schema)
        conn.commit()
    finally:
        conn.close()
    return str(path)


@pytest.fixture(autouse=True)
def _seed_db(tmp_db_path):
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("SALON_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    conn = sqlite3.connect(tmp_db_path)
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        for t in ("users", "lines", "operation_log"):
            conn.execute(f"DELETE FROM {t}")
        for sql in SEED_SQL:
            conn.execute(sql)
        conn.commit()
    finally:
        conn.close()
    yield


@pytest.fixture()
def store(tmp_db_path):
    from salon_inventory.db import load_config
    from salon_inventory.services.store import init_store
    s = init_store(load_config("test"))
    yield s
    s.disconnect()


@pytest.fixture()
def client(tmp_db_path):
    from salon_inventory.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)
