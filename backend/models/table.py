"""Pydantic schemas for table and column metadata."""
from enum import Enum
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Column(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    raw_type: str


class ColumnCategory(str, Enum):
    FILLABLE = "fillable"
    TIMESTAMP = "timestamp"
    DATE_TYPED = "date"
    BOOLEAN_CAST = "boolean"
    EXCLUDED = "excluded"


class ClassifiedColumn(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: Column
    category: ColumnCategory                                       # excluded | timestamp | fillable
    tags: frozenset[ColumnCategory] = Field(default_factory=frozenset)  # date / boolean, fillable only

    @property
    def categories(self) -> frozenset[ColumnCategory]:
        return frozenset({self.category}) | self.tags


class ModelFields(BaseModel):
    """Ordered, typed entries collected from the classified columns of one table."""
    model_config = ConfigDict(frozen=True)

    fillable: tuple[str, ...] = ()
    hidden: tuple[str, ...] = ()              # intentionally never populated
    casts: tuple[tuple[str, str], ...] = ()   # (column, cast type)
    dates: tuple[str, ...] = ()
    timestamps: bool = False


class TableSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    qualified_name: str
    schema_name: str
    bare_name: str

    @classmethod
    def parse(cls, identifier: str, default_schema: str) -> "TableSpec":
        """Split "schema.table"; the qualifier overrides the default schema for this table only."""
        if "." in identifier:
            schema, bare = identifier.split(".", 1)
            if schema:
                return cls(qualified_name=identifier, schema_name=schema, bare_name=bare)
            identifier = bare
        return cls(qualified_name=identifier, schema_name=default_schema, bare_name=identifier)


# ── Raw metadata rows ────────────────────────────────────────────────────────

class CatalogRow(BaseModel):
    """information_schema-style row (lower-case labels)."""
    kind: Literal["catalog"] = "catalog"
    column_name: str
    data_type: str

    def to_column(self) -> Column:
        return Column(name=self.column_name, raw_type=self.data_type)


class DescribeRow(BaseModel):
    """DESCRIBE / SHOW COLUMNS-style row (capitalised labels)."""
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["describe"] = "describe"
    field_name: str = Field(alias="Field")
    field_type: str = Field(alias="Type")

    def to_column(self) -> Column:
        return Column(name=self.field_name, raw_type=self.field_type)


class UnrecognizedRow(BaseModel):
    kind: Literal["unrecognized"] = "unrecognized"
    fields: list[str]

    def to_column(self) -> Optional[Column]:
        return None


ColumnRow = Union[CatalogRow, DescribeRow, UnrecognizedRow]


def _as_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return str(value)


def parse_column_row(row: Mapping[str, Any]) -> ColumnRow:
    if row.get("column_name") is not None and row.get("data_type") is not None:
        return CatalogRow(column_name=_as_text(row["column_name"]), data_type=_as_text(row["data_type"]))
    if row.get("Field") is not None and row.get("Type") is not None:
        return DescribeRow(field_name=_as_text(row["Field"]), field_type=_as_text(row["Type"]))
    return UnrecognizedRow(fields=[str(k) for k in row.keys()])
