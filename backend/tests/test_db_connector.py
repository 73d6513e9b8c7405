import logging

import pytest
from unittest.mock import MagicMock, patch

from config import settings
from core.db_connector import SchemaIntrospector, create_engine_for, default_schema_for
from core.exceptions import QueryError, SchemaResolutionError


def _fake_engine(dialect_name: str, database: str = "shop"):
    engine = MagicMock()
    engine.dialect.name = dialect_name
    engine.dialect.identifier_preparer.quote_identifier.side_effect = lambda s: f"`{s}`"
    engine.url.database = database
    return engine


# ── Schema resolution ─────────────────────────────────────────────────────────

def test_default_schema_for():
    assert default_schema_for("postgresql", None) == "public"
    assert default_schema_for("mysql", "shop") == "shop"
    with pytest.raises(SchemaResolutionError):
        default_schema_for("mysql", None)


def test_resolve_schema_sqlite(sqlite_engine):
    insp = SchemaIntrospector(sqlite_engine)
    assert insp.resolve_active_schema() == "main"
    assert insp.default_schema == "main"


def test_resolve_schema_explicit_has_no_default(sqlite_engine):
    insp = SchemaIntrospector(sqlite_engine, "main")
    assert insp.resolve_active_schema() == "main"
    assert insp.default_schema is None


def test_resolve_schema_postgres_runs_once():
    insp = SchemaIntrospector(_fake_engine("postgresql"))
    with patch.object(SchemaIntrospector, "_fetch") as fetch:
        assert insp.resolve_active_schema() == "public"
        assert insp.resolve_active_schema() == "public"
        fetch.assert_not_called()


def test_resolve_schema_mysql_uses_database_name():
    insp = SchemaIntrospector(_fake_engine("mysql"))
    with patch.object(SchemaIntrospector, "_fetch", return_value=[{"db": "shop"}]) as fetch:
        assert insp.resolve_active_schema() == "shop"
        assert "DATABASE()" in fetch.call_args[0][0]


def test_create_engine_for_unknown_connection(monkeypatch):
    monkeypatch.setattr(settings, "DB_CONNECTIONS", {})
    with pytest.raises(SchemaResolutionError):
        create_engine_for("reporting")


def test_create_engine_for_named_connection(monkeypatch, temp_sqlite_db):
    monkeypatch.setattr(settings, "DB_CONNECTIONS", {"reporting": f"sqlite:///{temp_sqlite_db}"})
    engine = create_engine_for("reporting")
    assert engine.dialect.name == "sqlite"
    engine.dispose()


# ── Tables ────────────────────────────────────────────────────────────────────

def test_list_tables_sqlite_default_schema(sqlite_engine):
    insp = SchemaIntrospector(sqlite_engine)
    schema = insp.resolve_active_schema()
    # migrations and sqlite_sequence are skipped
    assert insp.list_tables(schema) == ["posts", "users"]


def test_list_tables_sqlite_explicit_schema(sqlite_engine):
    insp = SchemaIntrospector(sqlite_engine, "main")
    schema = insp.resolve_active_schema()
    assert insp.list_tables(schema) == ["main.posts", "main.users"]


def test_list_tables_empty_schema(sqlite_engine):
    assert SchemaIntrospector(sqlite_engine).list_tables("") == []


def test_list_tables_postgres_query():
    insp = SchemaIntrospector(_fake_engine("postgresql"), "billing")
    insp.resolve_active_schema()
    rows = [{"table_name": "invoices"}, {"table_name": "migrations"}, {"table_name": "accounts"}]
    with patch.object(SchemaIntrospector, "_fetch", return_value=rows) as fetch:
        assert insp.list_tables("billing") == ["billing.accounts", "billing.invoices"]
    sql, params = fetch.call_args[0][0], fetch.call_args[0][1]
    assert "information_schema.columns" in sql
    assert params == {"schema": "billing"}


def test_list_tables_unknown_schema_raises(sqlite_engine):
    insp = SchemaIntrospector(sqlite_engine, "nope")
    with pytest.raises(QueryError) as exc:
        insp.list_tables("nope")
    assert "nope" in str(exc.value)


# ── Columns ───────────────────────────────────────────────────────────────────

def test_describe_columns_sqlite(sqlite_engine):
    insp = SchemaIntrospector(sqlite_engine)
    insp.resolve_active_schema()
    cols = insp.describe_columns("posts")
    assert [(c.name, c.raw_type) for c in cols] == [
        ("id", "INTEGER"),
        ("title", "TEXT"),
        ("published", "TINYINT(1)"),
        ("published_at", "DATETIME"),
    ]


def test_describe_columns_qualified_identifier(sqlite_engine):
    insp = SchemaIntrospector(sqlite_engine)
    insp.resolve_active_schema()
    assert [c.name for c in insp.describe_columns("main.users")][:3] == ["id", "name", "email"]


def test_describe_columns_postgres_uses_qualifier():
    insp = SchemaIntrospector(_fake_engine("postgresql"))
    insp.resolve_active_schema()
    rows = [{"column_name": "id", "data_type": "integer"}, {"column_name": "total", "data_type": "numeric"}]
    with patch.object(SchemaIntrospector, "_fetch", return_value=rows) as fetch:
        cols = insp.describe_columns("billing.invoices")
    assert [c.name for c in cols] == ["id", "total"]
    assert fetch.call_args[0][1] == {"schema": "billing", "table": "invoices"}


def test_describe_columns_mysql_describe_shape():
    insp = SchemaIntrospector(_fake_engine("mysql"))
    rows = [{"Field": "id", "Type": "int unsigned"}, {"Field": "published", "Type": "tinyint(1)"}]
    with patch.object(SchemaIntrospector, "_fetch", side_effect=[[{"db": "shop"}], rows]) as fetch:
        insp.resolve_active_schema()
        cols = insp.describe_columns("posts")
    assert [(c.name, c.raw_type) for c in cols] == [("id", "int unsigned"), ("published", "tinyint(1)")]
    assert fetch.call_args[0][0] == "SHOW COLUMNS FROM `shop`.`posts`"


def test_describe_columns_skips_unrecognized_rows(caplog):
    insp = SchemaIntrospector(_fake_engine("postgresql"))
    insp.resolve_active_schema()
    rows = [{"column_name": "title", "data_type": "text"}, {"attname": "ghost"}]
    with patch.object(SchemaIntrospector, "_fetch", return_value=rows):
        with caplog.at_level(logging.WARNING):
            cols = insp.describe_columns("posts")
    assert [c.name for c in cols] == ["title"]
    assert "Unknown column format in 'posts'" in caplog.text


def test_resolve_schema_mysql_without_database_selected():
    insp = SchemaIntrospector(_fake_engine("mysql"))
    with patch.object(SchemaIntrospector, "_fetch", return_value=[{"db": None}]):
        with pytest.raises(SchemaResolutionError):
            insp.resolve_active_schema()
    assert insp.default_schema is None
