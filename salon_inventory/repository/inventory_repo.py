from __future__ import annotations

from sqlite3 import Connection

from . import INVENTORY_ID_SQL


def list_names_for_user(conn: Connection, username: str) -> list[str]:
    rows = conn.execute(
        "SELECT i.name FROM inventories AS i "
        "INNER JOIN users AS u ON u.id = i.user_id "
        "WHERE u.username = ?",
        (username,),
    ).fetchall()
    return [r["name"] for r in rows]


def get_id(conn: Connection, username: str, inv_name: str):
    row = conn.execute(
        f"SELECT {INVENTORY_ID_SQL} AS id", {"username": username, "inv_name": inv_name}
    ).fetchone()
    return row["id"] if row else None


def insert_inventory(conn: Connection, username: str, inv_name: str) -> int:
    """Owner is resolved by username; an unknown user leaves user_id NULL."""
    cur = conn.execute(
        "INSERT INTO inventories (user_id, name) "
        "VALUES ((SELECT id FROM users WHERE username = ?), ?)",
        (username, inv_name),
    )
    return int(cur.lastrowid)


def line_names(conn: Connection, username: str, inv_name: str) -> list[str]:
    rows = conn.execute(
        """
        SELECT l.name FROM lines AS l
        INNER JOIN inventories_lines AS il ON l.id = il.line_id
        INNER JOIN inventories AS i ON i.id = il.inventory_id
        INNER JOIN users AS u ON u.id = i.user_id
        WHERE u.username = ? AND i.name = ?
        """,
        (username, inv_name),
    ).fetchall()
    return [r["name"] for r in rows]
