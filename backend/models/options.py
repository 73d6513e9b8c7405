"""Pydantic schemas for run options and the resolved generation context."""
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerateOptions(BaseModel):
    """Command-line options, fully resolved before any generation logic runs."""
    model_config = ConfigDict(frozen=True)

    table: str = Field("", description="A single table or a comma-separated list of tables")
    schema_name: str = Field("", description="Schema to read; empty means the connection default")
    connection: Optional[str] = Field(None, description="Named connection; None uses DATABASE_URL")
    debug: bool = False
    folder: Optional[str] = Field(None, description="Output folder relative to BASE_PATH")
    namespace: Optional[str] = Field(None, description="Namespace for the generated models")
    all: bool = Field(False, description="Generate a model for every table in the schema")

    @property
    def table_list(self) -> list[str]:
        """Requested identifiers, trimmed, blanks dropped, duplicates removed in order."""
        seen: list[str] = []
        for name in self.table.split(","):
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


class GenerationContext(BaseModel):
    """Per-run configuration shared read-only by every table generation."""
    model_config = ConfigDict(frozen=True)

    schema_name: str
    connection: Optional[str] = None
    output_dir: Path
    namespace: str
    extension: str = ".php"
    singular_class_names: bool = True
