"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so the store avoids SQL strings.
Callers resolve entities by username / inventory name / line name;
numeric ids stay inside these queries.
"""
from __future__ import annotations

from sqlite3 import Connection

from ..db import SCHEMA_PATH


def ensure_schema(conn: Connection, schema_path: str = SCHEMA_PATH):
    with open(schema_path, "r", encoding="utf-8") as f:
        conn.executescript(f.read())


# Resolves an inventory id from (:username, :inv_name)
INVENTORY_ID_SQL = """
(SELECT i.id FROM inventories AS i
  INNER JOIN users AS u ON u.id = i.user_id
  WHERE u.username = :username AND i.name = :inv_name)
"""
