from __future__ import annotations

from sqlite3 import Connection

from ..domain.inventory import PAGE_SIZE, SortCriterion, SortDirection, SortOrder
from . import INVENTORY_ID_SQL

# Named params: :username, :inv_name, :line_name, :depth, :tone
_COLOR_TUPLE_WHERE = """
WHERE u.username = :username AND i.name = :inv_name AND l.name = :line_name
AND c.depth = :depth AND c.tone = :tone
"""

_COLOR_JOINS = """
FROM colors AS c
INNER JOIN inventories AS i ON i.id = c.inventory_id
INNER JOIN users AS u ON u.id = i.user_id
INNER JOIN lines AS l ON l.id = c.line_id
"""

# Colors may only be stocked under a line attached to the same inventory
_ATTACHED_LINE_ID_SQL = f"""
(SELECT il.line_id FROM inventories_lines AS il
  INNER JOIN lines AS l ON l.id = il.line_id
  WHERE il.inventory_id = {INVENTORY_ID_SQL} AND l.name = :line_name)
"""

# Ties on the sort key fall back to id so a descending page is the exact
# reverse of the ascending one.
ORDER_BY = {
    SortOrder(SortCriterion.DEPTH, SortDirection.ASCENDING): "CAST(c.depth AS INTEGER) ASC, c.id ASC",
    SortOrder(SortCriterion.DEPTH, SortDirection.DESCENDING): "CAST(c.depth AS INTEGER) DESC, c.id DESC",
    SortOrder(SortCriterion.TONE, SortDirection.ASCENDING): "c.tone COLLATE BINARY ASC, c.id ASC",
    SortOrder(SortCriterion.TONE, SortDirection.DESCENDING): "c.tone COLLATE BINARY DESC, c.id DESC",
}


def _tuple_params(username, inv_name, line_name, depth, tone) -> dict:
    return {
        "username": username,
        "inv_name": inv_name,
        "line_name": line_name,
        "depth": depth,
        "tone": tone,
    }


def list_in_inventory(conn: Connection, username: str, inv_name: str):
    return conn.execute(
        f"SELECT l.name AS line, c.depth, c.tone, c.count {_COLOR_JOINS} "
        "WHERE u.username = :username AND i.name = :inv_name ORDER BY c.id",
        {"username": username, "inv_name": inv_name},
    ).fetchall()


def get_stock(conn: Connection, username: str, inv_name: str, line_name: str, depth: str, tone: str):
    """Row with (id, count) for the color tuple, or None."""
    return conn.execute(
        f"SELECT c.id, c.count {_COLOR_JOINS} {_COLOR_TUPLE_WHERE}",
        _tuple_params(username, inv_name, line_name, depth, tone),
    ).fetchone()


def upsert_add(conn: Connection, username: str, inv_name: str, line_name: str, depth: str, tone: str, count: int):
    params = _tuple_params(username, inv_name, line_name, depth, tone)
    params["count"] = int(count)
    conn.execute(
        f"""
        INSERT INTO colors (inventory_id, line_id, depth, tone, count)
        VALUES ({INVENTORY_ID_SQL}, {_ATTACHED_LINE_ID_SQL}, :depth, :tone, :count)
        ON CONFLICT (inventory_id, line_id, depth, tone)
        DO UPDATE SET count = count + excluded.count
        """,
        params,
    )


def decrement(conn: Connection, color_id: int):
    conn.execute("UPDATE colors SET count = count - 1 WHERE id = ?", (color_id,))


def delete(conn: Connection, color_id: int):
    conn.execute("DELETE FROM colors WHERE id = ?", (color_id,))


def count_for_line(conn: Connection, username: str, inv_name: str, line_name: str) -> int:
    row = conn.execute(
        f"SELECT COUNT(1) AS n {_COLOR_JOINS} "
        "WHERE u.username = :username AND i.name = :inv_name AND l.name = :line_name",
        {"username": username, "inv_name": inv_name, "line_name": line_name},
    ).fetchone()
    return int(row["n"])


def list_line_page(conn: Connection, username: str, inv_name: str, line_name: str, order: SortOrder, offset: int):
    return conn.execute(
        f"SELECT l.name AS line, c.depth, c.tone, c.count {_COLOR_JOINS} "
        "WHERE u.username = :username AND i.name = :inv_name AND l.name = :line_name "
        f"ORDER BY {ORDER_BY[order]} LIMIT :limit OFFSET :offset",
        {
            "username": username,
            "inv_name": inv_name,
            "line_name": line_name,
            "limit": PAGE_SIZE,
            "offset": offset,
        },
    ).fetchall()
