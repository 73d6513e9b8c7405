from core.db_connector import SchemaIntrospector, create_engine_for  # noqa: F401
from core.classifier import classify, collect_fields  # noqa: F401
from core.naming import to_class_name, output_path, normalize_namespace  # noqa: F401
from core.renderer import render, build_placeholders, load_stub  # noqa: F401
from core.model_generator import ModelGenerator, validate_options  # noqa: F401
