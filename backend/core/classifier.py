"""
Column classifier — maps a column's name and declared type to its model category.
Rules apply in priority order: identifier > audit timestamp > fillable (+ date / boolean tags).
"""
import re
from typing import Iterable

from models.table import ClassifiedColumn, Column, ColumnCategory, ModelFields

PRIMARY_KEY_COLUMN = "id"
TIMESTAMP_COLUMNS = ("created_at", "updated_at")

# timestamp, datetime(6), date, timestamp without time zone ...
_DATE_TYPE = re.compile(r"^(date|datetime|timestamp)(\(\d+\))?( with(out)? time zone)?$")
# tinyint(1), tinyint(1) unsigned, bit, bit(1), bool, boolean
_BOOLEAN_TYPE = re.compile(r"^(tinyint\(1\)|bit(\(1\))?|bool|boolean)( unsigned)?$")


def _normalized_type(raw_type: str) -> str:
    return " ".join(raw_type.strip().lower().split())


def is_date_type(raw_type: str) -> bool:
    return bool(_DATE_TYPE.match(_normalized_type(raw_type)))


def is_boolean_type(raw_type: str) -> bool:
    return bool(_BOOLEAN_TYPE.match(_normalized_type(raw_type)))


def classify(column: Column) -> ClassifiedColumn:
    if column.name == PRIMARY_KEY_COLUMN:
        return ClassifiedColumn(column=column, category=ColumnCategory.EXCLUDED)
    if column.name in TIMESTAMP_COLUMNS:
        return ClassifiedColumn(column=column, category=ColumnCategory.TIMESTAMP)

    tags = set()
    if is_date_type(column.raw_type):
        tags.add(ColumnCategory.DATE_TYPED)
    if is_boolean_type(column.raw_type):
        tags.add(ColumnCategory.BOOLEAN_CAST)
    return ClassifiedColumn(column=column, category=ColumnCategory.FILLABLE, tags=frozenset(tags))


def uses_timestamps(classified: Iterable[ClassifiedColumn]) -> bool:
    return any(c.category == ColumnCategory.TIMESTAMP for c in classified)


def collect_fields(classified: Iterable[ClassifiedColumn]) -> ModelFields:
    """Aggregate classified columns, in column order, into the lists a model declares."""
    classified = list(classified)
    fillable = [c.column.name for c in classified if c.category == ColumnCategory.FILLABLE]
    dates = [c.column.name for c in classified if ColumnCategory.DATE_TYPED in c.tags]
    casts = [(c.column.name, "boolean") for c in classified if ColumnCategory.BOOLEAN_CAST in c.tags]
    return ModelFields(
        fillable=tuple(fillable),
        casts=tuple(casts),
        dates=tuple(dates),
        timestamps=uses_timestamps(classified),
    )
