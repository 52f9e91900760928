from __future__ import annotations

from sqlite3 import Connection

from . import INVENTORY_ID_SQL


def exists(conn: Connection, line_name: str) -> bool:
    row = conn.execute("SELECT 1 FROM lines WHERE name = ?", (line_name,)).fetchone()
    return row is not None


def insert_if_missing(conn: Connection, line_name: str) -> bool:
    cur = conn.execute("INSERT OR IGNORE INTO lines (name) VALUES (?)", (line_name,))
    return cur.rowcount > 0


def attach_to_inventory(conn: Connection, line_name: str, username: str, inv_name: str):
    conn.execute(
        f"""
        INSERT INTO inventories_lines (inventory_id, line_id)
        VALUES ({INVENTORY_ID_SQL}, (SELECT id FROM lines WHERE name = :line_name))
        """,
        {"username": username, "inv_name": inv_name, "line_name": line_name},
    )

