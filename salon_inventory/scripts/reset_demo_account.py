"""
Restore the canned demo account (user `stylishowl`) from data/stylishowl.sql.

WARNING: This DELETES the demo user and everything it owns (inventories,
line attachments, colors), then replays the fixture. Other users are untouched;
lines are shared and only created when missing.

Usage:
  python -m salon_inventory.scripts.reset_demo_account [--env development] \
      [--fixture data/stylishowl.sql] [--init-schema]
"""
from __future__ import annotations

import argparse
import dataclasses
import logging

from salon_inventory.db import ENVIRONMENTS, load_config
from salon_inventory.logs import LogContext
from salon_inventory.services.store import init_store


def main(argv: list[str] | None = None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--env", choices=ENVIRONMENTS, default=None)
    ap.add_argument("--fixture", default=None)
    ap.add_argument("--init-schema", action="store_true", help="create tables before loading")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = load_config(args.env)
    if args.fixture:
        config = dataclasses.replace(config, demo_fixture=args.fixture)

    store = init_store(config)
    try:
        if args.init_schema:
            store.ensure_schema()
        log = LogContext("RESET_DEMO_ACCOUNT", database=config.database)
        executed = store.reset_demo_account()
        log.set_after({"statements": executed})
        log.write("OK")
    finally:
        store.disconnect()
    print({"message": "ok", "statements": executed})


if __name__ == "__main__":
    main()
