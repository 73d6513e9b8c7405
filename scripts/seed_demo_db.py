#!/usr/bin/env python3
"""
Seed a local SQLite database with a demo schema for the model generator.
Usage (from the repository root):
    python scripts/seed_demo_db.py
    DATABASE_URL=sqlite:///scripts/demo.db modelfromtable --all --folder=scripts/models
Creates: scripts/demo.db
"""
import sqlite3
from pathlib import Path

DB_PATH = Path(__file__).parent / "demo.db"

DDL = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        name        TEXT    NOT NULL,
        email       TEXT    UNIQUE NOT NULL,
        created_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )""",
    """
    CREATE TABLE IF NOT EXISTS posts (
        id           INTEGER PRIMARY KEY AUTOINCREMENT,
        title        TEXT NOT NULL,
        published    TINYINT(1) DEFAULT 0,
        published_at DATETIME
    )""",
    """
    CREATE TABLE IF NOT EXISTS blog_categories (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        label       TEXT NOT NULL,
        is_visible  BOOLEAN DEFAULT 1,
        starts_on   DATE
    )""",
    """
    CREATE TABLE IF NOT EXISTS order_line_items (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        order_id    INTEGER NOT NULL,
        quantity    INTEGER NOT NULL,
        unit_price  REAL    NOT NULL,
        created_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at  TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )""",
    """
    CREATE TABLE IF NOT EXISTS migrations (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        migration   TEXT NOT NULL,
        batch       INTEGER NOT NULL
    )""",
]


def seed():
    conn = sqlite3.connect(DB_PATH)
    cur = conn.cursor()

    for stmt in DDL:
        cur.execute(stmt)

    cur.execute("INSERT INTO users(name, email) VALUES (?, ?)", ("Demo User", "demo@example.com"))
    cur.execute("INSERT INTO posts(title, published) VALUES (?, ?)", ("Hello world", 1))
    cur.execute("INSERT INTO migrations(migration, batch) VALUES (?, ?)", ("create_users_table", 1))

    conn.commit()
    conn.close()
    print(f"Demo database seeded: {DB_PATH}")
    print("   Tables: users, posts, blog_categories, order_line_items (+ migrations, skipped by --all)")


if __name__ == "__main__":
    seed()
