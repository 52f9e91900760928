from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from werkzeug.security import check_password_hash, generate_password_hash

from ..db import StoreConfig, connect, load_config
from ..domain.inventory import Color, Inventory, SortOrder, count_pages, page_offset
from ..errors import (
    DataLoadError,
    DuplicateAssociation,
    DuplicateInventory,
    DuplicateUser,
    NotFound,
)
from ..repository import color_repo, ensure_schema, inventory_repo, line_repo, user_repo

logger = logging.getLogger(__name__)

# sqlite_errorname exists on Python 3.11+; older versions fall back to the message
_UNIQUE_ERRORS = ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY")


def _map_integrity_error(e: sqlite3.IntegrityError, operation: str, duplicate_cls):
    """UNIQUE violations become the operation's duplicate kind; NOT NULL means a
    username/inventory/line subquery resolved to nothing."""
    msg = str(e)
    name = getattr(e, "sqlite_errorname", None)
    if name is not None:
        unique = name in _UNIQUE_ERRORS
        not_null = name == "SQLITE_CONSTRAINT_NOTNULL"
    else:
        unique = "UNIQUE constraint failed" in msg
        not_null = "NOT NULL constraint failed" in msg
    if unique and duplicate_cls is not None:
        return duplicate_cls(operation, msg)
    if not_null:
        return NotFound(operation, msg)
    return None


class InventoryStore:
    """Inventory data access keyed by username / inventory name / line name.

    One store wraps one connection. Mutations that read before they write run
    inside a single IMMEDIATE transaction so one writer wins per color tuple.
    """

    def __init__(self, connection: sqlite3.Connection, config: StoreConfig):
        self.connection = connection
        self.config = config

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self.connection
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        else:
            conn.execute("COMMIT")

    @contextmanager
    def _operation(self, name: str, duplicate_cls=None):
        try:
            yield
        except sqlite3.IntegrityError as e:
            mapped = _map_integrity_error(e, name, duplicate_cls)
            if mapped is None:
                raise
            raise mapped from e

    # ---------------- users ----------------

    def create_user(self, username: str, password: str, name: str):
        if self.config.hash_passwords:
            password = generate_password_hash(password)
        with self._operation("create_user", DuplicateUser):
            user_repo.insert_user(self.connection, username, password, name)
        logger.info("created user %s", username)

    def user_password(self, username: str) -> str:
        password = user_repo.get_password(self.connection, username)
        if password is None:
            raise NotFound("user_password", username)
        return password

    def user_first_name(self, username: str) -> str:
        first_name = user_repo.get_first_name(self.connection, username)
        if first_name is None:
            raise NotFound("user_first_name", username)
        return first_name

    def user_exists(self, username: str) -> bool:
        return user_repo.exists(self.connection, username)

    def verify_user(self, username: str, password: str) -> bool:
        stored = user_repo.get_password(self.connection, username)
        if stored is None:
            return False
        if self.config.hash_passwords:
            return check_password_hash(stored, password)
        return stored == password

    # ---------------- inventories ----------------

    def user_inventories(self, username: str) -> list[str]:
        return inventory_repo.list_names_for_user(self.connection, username)

    def create_new_inventory(self, inv_name: str, username: str):
        with self._operation("create_new_inventory", DuplicateInventory):
            inventory_repo.insert_inventory(self.connection, username, inv_name)
        logger.info("created inventory %r for %s", inv_name, username)

    def line_names(self, username: str, inv_name: str) -> list[str]:
        return inventory_repo.line_names(self.connection, username, inv_name)

    def colors_in_inventory(self, username: str, inv_name: str) -> list[Color]:
        rows = color_repo.list_in_inventory(self.connection, username, inv_name)
        return [Color(r["line"], r["depth"], r["tone"], r["count"]) for r in rows]

    def retrieve_inventory(self, username: str, inv_name: str) -> Inventory:
        self._require_inventory("retrieve_inventory", username, inv_name)

        lines: dict[str, list[Color]] = {}
        for line_name in self.line_names(username, inv_name):
            lines[line_name] = []
        for color in self.colors_in_inventory(username, inv_name):
            lines.setdefault(color.line, []).append(color)
        return Inventory(lines)

    # ---------------- lines ----------------

    def line_exists(self, line_name: str) -> bool:
        return line_repo.exists(self.connection, line_name)

    def add_new_color_line(self, line_name: str, inv_name: str, username: str):
        """Attach a line to an inventory, creating the line first if it is new."""
        with self._operation("add_new_color_line", DuplicateAssociation), self._transaction() as conn:
            if line_repo.insert_if_missing(conn, line_name):
                logger.info("created line %r", line_name)
            line_repo.attach_to_inventory(conn, line_name, username, inv_name)

    # ---------------- colors ----------------

    def color_in_stock(self, line_name: str, depth: str, tone: str, inv_name: str, username: str) -> bool:
        return color_repo.get_stock(self.connection, username, inv_name, line_name, depth, tone) is not None

    def count_colors_in_stock(self, username: str, inv_name: str, line: str, depth: str, tone: str) -> int:
        row = color_repo.get_stock(self.connection, username, inv_name, line, depth, tone)
        return int(row["count"]) if row else 0

    def add_color(self, line_name: str, depth: str, tone: str, count: int, inv_name: str, username: str):
        """If the color is in stock already, adds `count` more. If not, creates it
        with a count of `count`."""
        count = int(count)
        if count < 1:
            raise ValueError("count must be a positive integer")
        with self._operation("add_color"), self._transaction() as conn:
            color_repo.upsert_add(conn, username, inv_name, line_name, depth, tone, count)
        logger.debug("added %d of %s_%s_%s to %s/%s", count, line_name, depth, tone, username, inv_name)

    def use_color(self, username: str, inv_name: str, line: str, depth: str, tone: str):
        """Subtracts 1 from the count. If count is 1, deletes the color instead."""
        with self._transaction() as conn:
            row = color_repo.get_stock(conn, username, inv_name, line, depth, tone)
            if row is None:
                raise NotFound("use_color", f"{line}_{depth}_{tone}")
            if int(row["count"]) > 1:
                color_repo.decrement(conn, row["id"])
            else:
                color_repo.delete(conn, row["id"])
        logger.debug("used one of %s_%s_%s from %s/%s", line, depth, tone, username, inv_name)

    # ---------------- sorted pages ----------------

    def _require_inventory(self, operation: str, username: str, inv_name: str):
        if inventory_repo.get_id(self.connection, username, inv_name) is None:
            raise NotFound(operation, f"{username}/{inv_name}")

    def count_line_colors(self, username: str, inv_name: str, line: str) -> int:
        self._require_inventory("count_line_colors", username, inv_name)
        return color_repo.count_for_line(self.connection, username, inv_name, line)

    def line_page_count(self, username: str, inv_name: str, line: str) -> int:
        return count_pages(self.count_line_colors(username, inv_name, line))

    def sorted_colors_page(self, username: str, inv_name: str, line: str, order: SortOrder, page: int = 1) -> list[Color]:
        offset = page_offset(page)
        self._require_inventory("sorted_colors_page", username, inv_name)
        rows = color_repo.list_line_page(self.connection, username, inv_name, line, order, offset)
        return [Color(r["line"], r["depth"], r["tone"], r["count"]) for r in rows]

    # ---------------- maintenance ----------------

    def ensure_schema(self):
        ensure_schema(self.connection)

    def reset_demo_account(self):
        """Replay the demo fixture: SQL statements separated by blank lines."""
        path = self.config.demo_fixture
        try:
            with open(path, "r", encoding="utf-8") as f:
                statements = f.read().split("\n\n")
        except OSError as e:
            raise DataLoadError("reset_demo_account", str(e)) from e

        executed = 0
        try:
            with self._transaction() as conn:
                for sql in statements:
                    if not sql.strip():
                        continue
                    conn.execute(sql)
                    executed += 1
        except (sqlite3.Error, sqlite3.Warning) as e:
            raise DataLoadError("reset_demo_account", f"statement {executed + 1}: {e}") from e
        logger.info("demo account reset from %s (%d statements)", path, executed)
        return executed

    def disconnect(self):
        self.connection.close()


def init_store(config: StoreConfig | None = None) -> InventoryStore:
    config = config or load_config()
    return InventoryStore(connect(config.database), config)
