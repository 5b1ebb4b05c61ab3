"""Alembic migration tests.

File named test_zzz_alembic.py to sort LAST in pytest collection order.
The baseline revision is applied to a fresh SQLite file and compared with
the ORM metadata, so the hand-written migration cannot drift from
``batshit.db.models``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import command
from alembic.autogenerate import compare_metadata
from alembic.config import Config
from alembic.migration import MigrationContext
from batshit.config import get_settings
from batshit.db.base import Base

ROOT = Path(__file__).resolve().parents[1]

# Diff kinds that mean a table, column, index or unique constraint is missing or extra.
_STRUCTURAL = {
    "add_table",
    "remove_table",
    "add_column",
    "remove_column",
    "add_index",
    "remove_index",
    "add_constraint",
    "remove_constraint",
}


@pytest.fixture
def migration_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("BATSHIT_DATABASE_URL", url)
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


def _config() -> Config:
    config = Config()
    config.set_main_option("script_location", str(ROOT / "alembic"))
    return config


def _inspect(url: str, fn):  # noqa: ANN001, ANN202
    async def _run():  # noqa: ANN202
        engine = create_async_engine(url)
        try:
            async with engine.connect() as conn:
                return await conn.run_sync(fn)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


def test_alembic_upgrade_head_matches_models(migration_url: str) -> None:
    """alembic upgrade head builds every table, column, index and unique constraint the models declare."""
    command.upgrade(_config(), "head")

    diff = _inspect(migration_url, lambda conn: compare_metadata(MigrationContext.configure(conn), Base.metadata))
    structural = [d for d in diff if isinstance(d, tuple) and d[0] in _STRUCTURAL]
    assert structural == []

    tables = _inspect(migration_url, lambda conn: set(inspect(conn).get_table_names()))
    assert set(Base.metadata.tables) <= tables


def test_alembic_downgrade_base(migration_url: str) -> None:
    """Downgrading to base drops every application table."""
    command.upgrade(_config(), "head")
    command.downgrade(_config(), "base")

    tables = _inspect(migration_url, lambda conn: set(inspect(conn).get_table_names()))
    assert tables.isdisjoint(Base.metadata.tables)
