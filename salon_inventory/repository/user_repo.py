from __future__ import annotations

from sqlite3 import Connection


def insert_user(conn: Connection, username: str, password: str, first_name: str) -> int:
    cur = conn.execute(
        "INSERT INTO users (username, password, first_name) VALUES (?, ?, ?)",
        (username, password, first_name),
    )
    return int(cur.lastrowid)


def get_password(conn: Connection, username: str):
    row = conn.execute("SELECT password FROM users WHERE username = ?", (username,)).fetchone()
    return row["password"] if row else None


def get_first_name(conn: Connection, username: str):
    row = conn.execute("SELECT first_name FROM users WHERE username = ?", (username,)).fetchone()
    return row["first_name"] if row else None


def exists(conn: Connection, username: str) -> bool:
    row = conn.execute("SELECT 1 FROM users WHERE username = ?", (username,)).fetchone()
    return row is not None
