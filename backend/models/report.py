"""Pydantic schemas for per-table outcomes and the run summary."""
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TableResult(BaseModel):
    table_name: str
    class_name: Optional[str] = None
    path: Optional[str] = None
    status: Literal["success", "failed"]
    error: Optional[str] = None


class GenerationReport(BaseModel):
    schema_name: str
    duration_seconds: float = 0.0
    results: list[TableResult] = Field(default_factory=list)

    @property
    def generated_count(self) -> int:
        return sum(1 for r in self.results if r.status == "success")

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.status == "failed")
