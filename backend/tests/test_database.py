"""Tests for database bootstrap helpers."""
import os

from ultrasense.database import sqlite_directory


def test_sqlite_directory_follows_database_url(tmp_path):
    db_file = tmp_path / "nested" / "readings.db"

    directory = sqlite_directory(f"sqlite+aiosqlite:///{db_file}")

    assert directory == os.path.dirname(str(db_file))


def test_sqlite_directory_relative_path():
    assert sqlite_directory("sqlite+aiosqlite:///var/ultrasense.db") == os.path.abspath("var")


def test_sqlite_directory_ignores_memory_and_postgres():
    assert sqlite_directory("sqlite+aiosqlite:///:memory:") is None
    assert sqlite_directory("sqlite+aiosqlite://") is None
    assert sqlite_directory("postgresql+asyncpg://user:pw@db:5432/ultrasense") is None
