"""Operation log: one operation_log row (created by schema.sql) per mutating call."""
import json, time, uuid, datetime as dt
from typing import Optional

from .db import get_conn
from .domain.inventory import Color

_JSON_FIELDS = ("before", "after", "payload")


def _dump(obj):
    return json.dumps(obj, ensure_ascii=False) if obj is not None else None


class LogContext:
    def __init__(self, action: str, user: str = "system", database: Optional[str] = None):
        self.action = action
        self.user = user
        self.database = database
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.before = None
        self.after = None
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid: str):
        self.entity_type = etype
        self.entity_id = eid

    def set_inventory(self, inv_name: str):
        self.set_entity("INVENTORY", f"{self.user}/{inv_name}")

    def set_line(self, line_name: str, inv_name: str):
        self.set_entity("LINE", f"{self.user}/{inv_name}/{line_name}")

    def set_color(self, line: str, depth: str, tone: str, inv_name: str):
        # entity id reads like the color's own display form, scoped to the inventory
        self.set_entity("COLOR", f"{self.user}/{inv_name}/{Color(line, depth, tone, 0)}")

    def set_before(self, obj): self.before = obj
    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = obj

    def to_record(self, result: str, err: Optional[str]) -> dict:
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }
        for f in _JSON_FIELDS:
            rec[f"{f}_json"] = _dump(getattr(self, f))
        return rec

    def write(self, result: str = "OK", err: Optional[str] = None):
        rec = self.to_record(result, err)
        cols = ",".join(rec)
        with get_conn(self.database) as conn:
            conn.execute(
                f"INSERT INTO operation_log ({cols}) VALUES ({','.join(':' + k for k in rec)})",
                rec,
            )


def search_logs(q: str | None, action: str | None, ts_from: str | None, ts_to: str | None, page: int, size: int,
                database: Optional[str] = None, entity_type: str | None = None, user: str | None = None):
    filters = {
        "action": ("action = :action", action),
        "entity_type": ("entity_type = :entity_type", entity_type),
        "user": ("user = :user", user),
        "from": ("ts >= :from", ts_from),
        "to": ("ts <= :to", ts_to),
    }
    where = []
    params = {}
    if q:
        where.append("(payload_json LIKE :q OR before_json LIKE :q OR after_json LIKE :q OR entity_id LIKE :q)")
        params["q"] = f"%{q}%"
    for key, (clause, value) in filters.items():
        if value:
            where.append(clause)
            params[key] = value
    wh = " WHERE " + " AND ".join(where) if where else ""
    with get_conn(database) as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM operation_log{wh}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM operation_log{wh} ORDER BY ts DESC, id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (page - 1) * size},
        ).fetchall()
        return total, [dict(r) for r in rows]
