from models.table import Column, ColumnCategory, ClassifiedColumn, ModelFields, TableSpec, parse_column_row  # noqa: F401
from models.options import GenerateOptions, GenerationContext  # noqa: F401
from models.report import TableResult, GenerationReport  # noqa: F401
