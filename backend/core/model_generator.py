"""
Model generator — resolves schema and tables, then renders one model file per table.
A failure on one table is recorded and the remaining tables are still generated.
"""
import logging
import time
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy.engine import Engine

from config import settings
from core.classifier import classify, collect_fields
from core.db_connector import SchemaIntrospector, create_engine_for
from core.exceptions import (
    FilesystemError,
    NameCollisionError,
    QueryError,
    TemplateError,
    UsageError,
)
from core.naming import is_default_folder, normalize_namespace, output_path, resolve_folder, to_class_name
from core.renderer import build_placeholders, load_stub, render
from models.options import GenerateOptions, GenerationContext
from models.report import GenerationReport, TableResult

logger = logging.getLogger(__name__)

TABLE_ERRORS = (QueryError, FilesystemError, NameCollisionError, TemplateError)


def validate_options(options: GenerateOptions) -> None:
    if not options.table_list and not options.all:
        raise UsageError("No --table specified or --all")


def ensure_output_dir(path: Path) -> None:
    """Create a non-default output folder once; the default folder is expected to exist."""
    if is_default_folder(path) or path.is_dir():
        return
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(path, str(e)) from e
    logger.info("Created output folder %s", path)


def write_model(path: Path, source: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(source)
    except OSError as e:
        raise FilesystemError(path, str(e)) from e


class ModelGenerator:
    """
    Init → ResolveSchema → ResolveTableList → per table
    {Introspect → Classify → BuildPlaceholders → Render → Write} → Done.
    """

    def __init__(
        self,
        options: GenerateOptions,
        engine: Optional[Engine] = None,
        stub_text: Optional[str] = None,
        on_progress: Optional[Callable[[str], None]] = None,
    ):
        self.options = options
        self._engine = engine
        self._stub_text = stub_text
        self._notify = on_progress or (lambda message: None)

    def run(self) -> GenerationReport:
        validate_options(self.options)
        t0 = time.time()

        stub = self._stub_text if self._stub_text is not None else load_stub()
        owns_engine = self._engine is None
        engine = self._engine or create_engine_for(self.options.connection)
        try:
            introspector = SchemaIntrospector(engine, self.options.schema_name)
            context = self._build_context(introspector)
            tables = self._resolve_tables(introspector, context)
            try:
                ensure_output_dir(context.output_dir)
            except FilesystemError as e:
                logger.error("Cannot prepare output folder: %s", e)
                results = [self._failed(context, table, e) for table in tables]
            else:
                results = self._generate_all(introspector, context, stub, tables)
        finally:
            if owns_engine:
                engine.dispose()

        return GenerationReport(
            schema_name=context.schema_name,
            duration_seconds=round(time.time() - t0, 2),
            results=results,
        )

    def _build_context(self, introspector: SchemaIntrospector) -> GenerationContext:
        schema = introspector.resolve_active_schema()
        return GenerationContext(
            schema_name=schema,
            connection=self.options.connection or None,
            output_dir=resolve_folder(self.options.folder),
            namespace=normalize_namespace(self.options.namespace),
            extension=settings.MODEL_FILE_EXTENSION,
            singular_class_names=settings.SINGULAR_CLASS_NAMES,
        )

    def _resolve_tables(self, introspector: SchemaIntrospector, context: GenerationContext) -> list[str]:
        if self.options.all:
            return introspector.list_tables(context.schema_name)
        return self.options.table_list

    def _generate_all(self, introspector, context, stub, tables) -> list[TableResult]:
        claimed: dict[str, str] = {}   # casefolded class name → table identifier that produced it
        results: list[TableResult] = []
        for table in tables:
            class_name = to_class_name(table, singular=context.singular_class_names)
            path = output_path(context.output_dir, class_name, context.extension)
            try:
                key = class_name.casefold()
                if key in claimed and claimed[key] != table:
                    raise NameCollisionError(class_name, claimed[key], table)
                self._notify(f"Generating file: {path.name} {table}")
                source = self.generate_table(introspector, context, stub, table, class_name)
                self._notify(f"Writing model: {path}")
                write_model(path, source)
            except TABLE_ERRORS as e:
                logger.error("Model generation failed for table %s: %s", table, e)
                results.append(self._failed(context, table, e))
                continue
            claimed[class_name.casefold()] = table
            results.append(TableResult(table_name=table, class_name=class_name, path=str(path), status="success"))
        return results

    @staticmethod
    def _failed(context: GenerationContext, table: str, error: Exception) -> TableResult:
        class_name = to_class_name(table, singular=context.singular_class_names)
        return TableResult(table_name=table, class_name=class_name, status="failed", error=str(error))

    def generate_table(
        self,
        introspector: SchemaIntrospector,
        context: GenerationContext,
        stub: str,
        table: str,
        class_name: str,
    ) -> str:
        columns = introspector.describe_columns(table)
        classified = [classify(c) for c in columns]
        for c in classified:
            logger.debug("Checking field: %s (%s) → %s", c.column.name, c.column.raw_type, c.category.value)
        fields = collect_fields(classified)
        placeholders = build_placeholders(table, class_name, fields, context)
        return render(stub, placeholders.to_context())
