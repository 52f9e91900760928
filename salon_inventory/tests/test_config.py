from __future__ import annotations

import pytest

from salon_inventory import db
from salon_inventory.errors import StoreUnavailable


@pytest.fixture()
def clean_env(monkeypatch):
    for k in ("SALON_DB_PATH", "DATABASE_URL", "APP_ENV"):
        monkeypatch.delenv(k, raising=False)
    return monkeypatch


def test_env_selects_fixed_database_names(clean_env, tmp_path):
    cfg_path = str(tmp_path / "none.yaml")
    test_cfg = db.load_config("test", cfg_path)
    dev_cfg = db.load_config("development", cfg_path)
    assert test_cfg.database.endswith(db.TEST_DB_NAME)
    assert dev_cfg.database.endswith(db.DEV_DB_NAME)
    assert test_cfg.hash_passwords is False
    assert dev_cfg.hash_passwords is True


def test_production_requires_url(clean_env, tmp_path):
    with pytest.raises(StoreUnavailable):
        db.load_config("production", str(tmp_path / "none.yaml"))
    clean_env.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'prod.db'}")
    cfg = db.load_config("production", str(tmp_path / "none.yaml"))
    assert cfg.hash_passwords is True
    assert db.resolve_db_path(cfg.database) == str(tmp_path / "prod.db")


def test_config_yaml_paths(clean_env, tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(
        "db_path: /srv/salon/dev.db\ntest_db_path: /srv/salon/test.db\n", encoding="utf-8"
    )
    assert db.load_config("development", str(cfg_file)).database == "/srv/salon/dev.db"
    assert db.load_config("test", str(cfg_file)).database == "/srv/salon/test.db"


def test_env_path_wins(clean_env, tmp_path):
    clean_env.setenv("SALON_DB_PATH", str(tmp_path / "x.db"))
    assert db.load_config("production", str(tmp_path / "none.yaml")).database == str(tmp_path / "x.db")


def test_current_env(clean_env):
    clean_env.setenv("APP_ENV", "production")
    assert db.current_env() == "production"
    clean_env.delenv("APP_ENV")
    # running under pytest
    assert db.current_env() == "test"


def test_unknown_env_and_url(clean_env):
    with pytest.raises(ValueError):
        db.load_config("staging")
    with pytest.raises(StoreUnavailable):
        db.resolve_db_path("postgres://localhost/salon")
