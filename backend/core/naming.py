"""
Naming helpers: table identifier → model class name, output paths and namespaces.

Singularization is a lexical heuristic. Irregular plurals (people, children,
data) and Latin endings are not handled.
"""
import re
from pathlib import Path
from typing import Optional

from config import settings

_WORD_BREAK = re.compile(r"[._\s]+")


def singularize(word: str) -> str:
    """Best-effort singularization of the trailing word."""
    lower = word.lower()
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + ("Y" if word[-3].isupper() else "y")
    if lower.endswith(("sses", "xes", "ches", "shes")):
        return word[:-2]
    if lower.endswith("s") and not lower.endswith(("ss", "us", "is")) and len(word) > 1:
        return word[:-1]
    return word


def to_class_name(identifier: str, singular: bool = True) -> str:
    """blog_posts → BlogPost, order.line_items → LineItem (schema qualifier dropped)."""
    bare = identifier.split(".", 1)[1] if "." in identifier else identifier
    words = [w for w in _WORD_BREAK.split(bare) if w]
    # upper-case the first letter only, so an existing PascalCase name survives
    name = "".join(w[:1].upper() + w[1:] for w in words)
    return singularize(name) if singular else name


def output_path(directory, class_name: str, extension: str = ".php") -> Path:
    return Path(directory) / f"{class_name}{extension}"


def normalize_namespace(raw: Optional[str]) -> str:
    """app/Models → App\\Models; trailing separators stripped."""
    if not raw:
        return settings.MODELS_NAMESPACE
    segments = [s for s in re.split(r"[/\\.]+", raw.strip()) if s]
    if not segments:
        return settings.MODELS_NAMESPACE
    if segments[0] == "app":
        segments[0] = "App"
    return "\\".join(segments)


def resolve_folder(folder: Optional[str]) -> Path:
    """Output folder relative to BASE_PATH; None selects the conventional default."""
    if not folder:
        return settings.default_folder
    trimmed = folder.rstrip("/") or "/"
    return Path(settings.BASE_PATH) / trimmed


def is_default_folder(path: Path) -> bool:
    return Path(path) == settings.default_folder
