import os
import sys

# Add the parent directory (backend) to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import sqlite3
import tempfile
from sqlalchemy import create_engine

from config import settings

DDL = [
    "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, email TEXT UNIQUE, "
    "created_at TIMESTAMP, updated_at TIMESTAMP);",
    "CREATE TABLE posts (id INTEGER PRIMARY KEY, title TEXT, published TINYINT(1), published_at DATETIME);",
    "CREATE TABLE migrations (id INTEGER PRIMARY KEY, migration TEXT, batch INTEGER);",
]


@pytest.fixture
def temp_sqlite_db():
    fd, path = tempfile.mkstemp(suffix=".db")
    try:
        conn = sqlite3.connect(path)
        cur = conn.cursor()
        for stmt in DDL:
            cur.execute(stmt)
        cur.execute("INSERT INTO users (name, email) VALUES ('Test User', 'test@example.com');")
        conn.commit()
        conn.close()
        yield path
    finally:
        os.close(fd)
        os.remove(path)


@pytest.fixture
def sqlite_engine(temp_sqlite_db):
    engine = create_engine(f"sqlite:///{temp_sqlite_db}")
    yield engine
    engine.dispose()


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """A throwaway BASE_PATH with the conventional app/ folder already present."""
    monkeypatch.setattr(settings, "BASE_PATH", str(tmp_path))
    monkeypatch.setattr(settings, "MODELS_FOLDER", "app")
    monkeypatch.setattr(settings, "MODELS_NAMESPACE", "App")
    (tmp_path / "app").mkdir()
    return tmp_path
