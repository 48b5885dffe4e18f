from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError

ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def migration(monkeypatch, tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("ALEMBIC_DATABASE_URL", url)

    # no ini file: keeps fileConfig from replacing the app's logging setup
    alembic_config = Config()
    alembic_config.set_main_option("script_location", str(ROOT / "alembic"))

    engine = create_engine(url)
    yield alembic_config, engine
    engine.dispose()


def insert_book(connection, book_id, deleted_at=None):
    connection.execute(
        text(
            "INSERT INTO books (id, title, author, isbn, published_year, "
            "availability_status, created_at, updated_at, deleted_at) "
            "VALUES (:id, 'Solaris', 'Stanislaw Lem', '9780156027601', 1961, "
            "'AVAILABLE', '2026-01-01', '2026-01-01', :deleted_at)"
        ),
        {"id": book_id, "deleted_at": deleted_at},
    )


def test_upgrade_creates_schema(migration):
    alembic_config, engine = migration

    command.upgrade(alembic_config, "head")

    inspector = inspect(engine)
    assert {"books", "users", "wishlist", "alembic_version"} <= set(inspector.get_table_names())
    index_names = {index["name"] for index in inspector.get_indexes("users")}
    assert {"uq_users_user_id_active", "uq_users_email_active"} <= index_names


def test_isbn_unique_only_among_active_books(migration):
    alembic_config, engine = migration
    command.upgrade(alembic_config, "head")

    with engine.begin() as connection:
        insert_book(connection, "b1", deleted_at="2026-02-01")
        insert_book(connection, "b2")

    with pytest.raises(IntegrityError):
        with engine.begin() as connection:
            insert_book(connection, "b3")


def test_downgrade_drops_tables(migration):
    alembic_config, engine = migration
    command.upgrade(alembic_config, "head")

    command.downgrade(alembic_config, "base")

    assert set(inspect(engine).get_table_names()) == {"alembic_version"}


def test_missing_url_is_reported(monkeypatch, migration):
    alembic_config, _ = migration
    monkeypatch.delenv("ALEMBIC_DATABASE_URL")

    with pytest.raises(ValueError, match="ALEMBIC_DATABASE_URL"):
        command.upgrade(alembic_config, "head")
