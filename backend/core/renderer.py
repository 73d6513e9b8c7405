"""
Template renderer — turns a model stub plus per-table placeholders into source text.
Stub tokens use the {{name}} syntax, rendered with Jinja2.
"""
import logging
import re
from collections import defaultdict
from pathlib import Path
from typing import Mapping, Optional

import jinja2
from pydantic import BaseModel, ConfigDict

from config import settings
from core.exceptions import FilesystemError, TemplateError
from models.options import GenerationContext
from models.table import ModelFields

logger = logging.getLogger(__name__)

PLACEHOLDER_TOKENS = (
    "class", "table", "fillable", "hidden", "casts", "dates",
    "modelnamespace", "timestamps", "connection",
)

# whole placeholder tokens only; {{ $x }} or {{ a.b }} are left as stub text
TOKEN_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")

TIMESTAMPS_DISABLED = "public $timestamps = false;"

CONNECTION_BLOCK = """/**
     * The connection name for the model.
     *
     * @var string
     */
    protected $connection = '{name}';"""

# Stub text reaches this environment only as values, never as template source.
_env = jinja2.Environment(
    undefined=jinja2.Undefined,
    autoescape=False,
    keep_trailing_newline=True,
)


class RenderPlaceholders(BaseModel):
    model_config = ConfigDict(frozen=True)

    class_name: str
    table_name: str
    fillable: str = ""
    hidden: str = ""
    casts: str = ""
    dates: str = ""
    connection: str = ""
    timestamps: str = ""
    namespace: str = ""

    def to_context(self) -> dict[str, str]:
        return {
            "class": self.class_name,
            "table": self.table_name,
            "fillable": self.fillable,
            "hidden": self.hidden,
            "casts": self.casts,
            "dates": self.dates,
            "modelnamespace": self.namespace,
            "timestamps": self.timestamps,
            "connection": self.connection,
        }


# ── Serialization of typed entries ───────────────────────────────────────────

def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def serialize_names(names) -> str:
    return ", ".join(_quote(n) for n in names)


def serialize_casts(casts) -> str:
    return ", ".join(f"{_quote(name)} => {_quote(cast)}" for name, cast in casts)


def connection_block(name: Optional[str]) -> str:
    return CONNECTION_BLOCK.format(name=name) if name else ""


def timestamps_directive(uses_timestamps: bool) -> str:
    return "" if uses_timestamps else TIMESTAMPS_DISABLED


def build_placeholders(
    table_name: str, class_name: str, fields: ModelFields, context: GenerationContext
) -> RenderPlaceholders:
    return RenderPlaceholders(
        class_name=class_name,
        table_name=table_name,
        fillable=serialize_names(fields.fillable),
        hidden=serialize_names(fields.hidden),
        casts=serialize_casts(fields.casts),
        dates=serialize_names(fields.dates),
        connection=connection_block(context.connection),
        timestamps=timestamps_directive(fields.timestamps),
        namespace=context.namespace,
    )


# ── Rendering ────────────────────────────────────────────────────────────────

def _compile_stub(template_text: str) -> tuple[str, list[str]]:
    """
    Rewrite a stub so Jinja only sees lookups for the {{token}} placeholders.

    Everything between tokens is emitted through the `_stub_text` list, so
    braces, `{%`, `{#` or Blade-style `{{ $x }}` in the stub stay literal.
    """
    parts: list[str] = []
    literals: list[str] = []
    pos = 0
    for match in TOKEN_PATTERN.finditer(template_text):
        if match.start() > pos:
            parts.append("{{ _stub_text[%d] }}" % len(literals))
            literals.append(template_text[pos:match.start()])
        parts.append('{{ _placeholders["%s"] }}' % match.group(1))
        pos = match.end()
    if pos < len(template_text):
        parts.append("{{ _stub_text[%d] }}" % len(literals))
        literals.append(template_text[pos:])
    return "".join(parts), literals


def render(template_text: str, placeholders: Mapping[str, str]) -> str:
    """Substitute every {{token}}; tokens absent from `placeholders` become empty strings."""
    source, literals = _compile_stub(template_text)
    try:
        template = _env.from_string(source)
        # defaultdict: every key resolves, so Jinja never falls back to dict attributes
        values = defaultdict(str, placeholders)
        return template.render(_placeholders=values, _stub_text=literals)
    except jinja2.TemplateError as e:
        raise TemplateError(f"Failed to render model template: {e}") from e


def load_stub(path: Optional[Path] = None) -> str:
    stub_path = Path(path) if path else settings.stub_path
    logger.debug("Loading model stub from %s", stub_path)
    try:
        return stub_path.read_text(encoding="utf-8")
    except OSError as e:
        raise FilesystemError(stub_path, str(e)) from e
