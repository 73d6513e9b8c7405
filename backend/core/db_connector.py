"""
Database connector — SQLAlchemy engine factory and catalog introspection.
Supports PostgreSQL, MySQL/MariaDB and SQLite; anything else falls back to
information_schema. Lists tables and describes columns (name + declared type).
"""
import logging
from typing import Any, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from config import settings
from core.exceptions import QueryError, SchemaResolutionError, UnrecognizedColumnShapeError
from models.table import Column, TableSpec, UnrecognizedRow, parse_column_row

logger = logging.getLogger(__name__)

POSTGRES_DRIVERS = {"postgresql", "postgres", "pgsql"}
MYSQL_DRIVERS = {"mysql", "mariadb"}


def create_engine_for(connection: Optional[str] = None) -> Engine:
    """Build and test an engine for the named connection, or DATABASE_URL when unnamed."""
    if connection:
        url = settings.DB_CONNECTIONS.get(connection)
        if not url:
            raise SchemaResolutionError(f"Connection '{connection}' is not configured in DB_CONNECTIONS")
    else:
        url = settings.DATABASE_URL
    try:
        engine = create_engine(url, pool_pre_ping=True)
    except (ArgumentError, ImportError) as e:
        raise SchemaResolutionError(f"Invalid database URL for {connection or 'default'} connection: {e}") from e
    # Validate the connection immediately
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        engine.dispose()
        raise SchemaResolutionError(f"Could not connect to database: {e}") from e
    return engine


def default_schema_for(driver: str, database_name: Optional[str]) -> str:
    if driver in POSTGRES_DRIVERS:
        return "public"
    if not database_name:
        raise SchemaResolutionError(f"Could not determine the database name for driver '{driver}'")
    return database_name


class SchemaIntrospector:
    """Catalog queries for one session; every query runs on the same engine."""

    def __init__(self, engine: Engine, schema_name: str = ""):
        self.engine = engine
        self.requested_schema = schema_name
        self.default_schema: Optional[str] = None
        self._active_schema: Optional[str] = None

    @property
    def driver(self) -> str:
        return self.engine.dialect.name

    # ── Schema resolution ────────────────────────────────────────────────────

    def resolve_active_schema(self) -> str:
        if self._active_schema is not None:
            return self._active_schema
        if self.requested_schema:
            self._active_schema = self.requested_schema
        else:
            self.default_schema = default_schema_for(self.driver, self._database_name())
            self._active_schema = self.default_schema
        logger.info("Using schema '%s' on %s", self._active_schema, self.driver)
        return self._active_schema

    def _database_name(self) -> Optional[str]:
        if self.driver in POSTGRES_DRIVERS:
            return None
        if self.driver == "sqlite":
            return "main"
        if self.driver in MYSQL_DRIVERS:
            try:
                rows = self._fetch("SELECT DATABASE() AS db", {}, subject="the active database")
            except QueryError as e:
                raise SchemaResolutionError(str(e)) from e
            return next(iter(rows[0].values()), None) if rows else None
        return self.engine.url.database

    # ── Tables ───────────────────────────────────────────────────────────────

    def list_tables(self, schema: str) -> list[str]:
        """Distinct table names in `schema`, qualified as schema.table unless it is the session default."""
        if not schema:
            return []
        if self.driver == "sqlite":
            sql = (
                f"SELECT name AS table_name FROM {self._quote(schema)}.sqlite_master "
                "WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
            )
            params: dict[str, Any] = {}
        else:
            sql = (
                "SELECT DISTINCT table_name AS table_name FROM information_schema.columns "
                "WHERE table_schema = :schema"
            )
            params = {"schema": schema}

        rows = self._fetch(sql, params, subject=f"schema '{schema}'")
        names = sorted({str(next(iter(r.values()))) for r in rows})
        names = [n for n in names if n != settings.MIGRATIONS_TABLE]
        logger.info("Discovered %d tables in schema %s", len(names), schema)
        if self.default_schema is not None:
            return names
        return [f"{schema}.{n}" for n in names]

    # ── Columns ──────────────────────────────────────────────────────────────

    def describe_columns(self, identifier: str) -> list[Column]:
        spec = TableSpec.parse(identifier, self.default_schema or self.resolve_active_schema())
        logger.debug("Retrieving column information for: %s", identifier)
        sql, params = self._columns_query(spec)
        rows = self._fetch(sql, params, subject=f"table '{identifier}'")

        columns: list[Column] = []
        for raw in rows:
            row = parse_column_row(raw)
            if isinstance(row, UnrecognizedRow):
                logger.warning("%s", UnrecognizedColumnShapeError(identifier, row.fields))
                continue
            columns.append(row.to_column())
        return columns

    def _columns_query(self, spec: TableSpec) -> tuple[str, dict[str, Any]]:
        if self.driver == "sqlite":
            return (
                "SELECT name AS column_name, type AS data_type "
                "FROM pragma_table_info(:table, :schema) ORDER BY cid",
                {"table": spec.bare_name, "schema": spec.schema_name},
            )
        if self.driver in MYSQL_DRIVERS:
            # SHOW COLUMNS keeps the full column type, e.g. tinyint(1)
            return f"SHOW COLUMNS FROM {self._quote(spec.schema_name)}.{self._quote(spec.bare_name)}", {}
        return (
            "SELECT column_name, data_type FROM information_schema.columns "
            "WHERE table_schema = :schema AND table_name = :table ORDER BY ordinal_position",
            {"schema": spec.schema_name, "table": spec.bare_name},
        )

    # ── Execution ────────────────────────────────────────────────────────────

    def _quote(self, identifier: str) -> str:
        return self.engine.dialect.identifier_preparer.quote_identifier(identifier)

    def _fetch(self, sql: str, params: dict[str, Any], subject: str) -> list[dict[str, Any]]:
        logger.debug("%s %s", sql, params)
        try:
            with self.engine.connect() as conn:
                return [dict(r._mapping) for r in conn.execute(text(sql), params)]
        except SQLAlchemyError as e:
            raise QueryError(subject, str(e)) from e
