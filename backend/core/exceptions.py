"""Errors raised while generating models. Pure transforms never raise these."""
from typing import Optional


class ModelGenerationError(Exception):
    """Base class for every failure surfaced by the generator."""


class UsageError(ModelGenerationError):
    """Neither a table list nor --all was requested."""


class SchemaResolutionError(ModelGenerationError):
    """The active connection, driver or database name could not be determined."""


class QueryError(ModelGenerationError):
    def __init__(self, subject: str, reason: str):
        self.subject = subject
        super().__init__(f"Metadata query failed for {subject}: {reason}")


class UnrecognizedColumnShapeError(ModelGenerationError):
    def __init__(self, table: str, fields: list[str]):
        self.table = table
        self.fields = fields
        super().__init__(f"Unknown column format in '{table}': fields {sorted(fields)}")


class NameCollisionError(ModelGenerationError):
    def __init__(self, class_name: str, existing: str, incoming: str):
        self.class_name = class_name
        super().__init__(
            f"Table '{incoming}' maps to class {class_name}, already generated from '{existing}'"
        )


class FilesystemError(ModelGenerationError):
    def __init__(self, path, reason: Optional[str] = None):
        self.path = path
        msg = f"Filesystem error at {path}"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class TemplateError(ModelGenerationError):
    """The model template could not be parsed or rendered."""
