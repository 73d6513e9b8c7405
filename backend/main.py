"""
Model-from-table generator — command-line entry point.
Generate models for the given tables based on their columns.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from rich.console import Console

from config import settings
from core.exceptions import ModelGenerationError, UsageError
from core.model_generator import ModelGenerator
from models.options import GenerateOptions

logger = logging.getLogger("modelfromtable")
console = Console()


def configure_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modelfromtable",
        description="Generate models for the given tables based on their columns",
    )
    parser.add_argument("--table", default="", help="a single table or a list of tables separated by a comma (,)")
    parser.add_argument("--schema", default="", help="the default schema to use for processing")
    parser.add_argument("--connection", default=None,
                        help="database connection to use, leave off and it will use DATABASE_URL")
    parser.add_argument("--debug", action="store_true", help="turns on debugging")
    parser.add_argument("--folder", default=None, help=f"by default models are stored in {settings.MODELS_FOLDER}")
    parser.add_argument("--namespace", default=None,
                        help=f"by default the namespace applied to all models is {settings.MODELS_NAMESPACE}")
    parser.add_argument("--all", action="store_true", help="run for all tables")
    return parser


def parse_options(argv: Optional[Sequence[str]] = None) -> GenerateOptions:
    args = build_parser().parse_args(argv)
    return GenerateOptions(
        table=args.table,
        schema_name=args.schema,
        connection=args.connection,
        debug=args.debug,
        folder=args.folder,
        namespace=args.namespace,
        all=args.all,
    )


def cli(argv: Optional[Sequence[str]] = None) -> int:
    options = parse_options(argv)
    configure_logging(options.debug)
    console.print("[cyan]Starting Model Generate Command[/cyan]")

    generator = ModelGenerator(options, on_progress=lambda msg: console.print(f"[yellow]{msg}[/yellow]"))
    try:
        report = generator.run()
    except UsageError as e:
        console.print(f"[red]{e}[/red]")
        return 2
    except ModelGenerationError as e:
        logger.error("Model generation aborted: %s", e)
        console.print(f"[red]{e}[/red]")
        return 1

    for result in report.results:
        if result.status == "failed":
            console.print(f"[red]✗ {result.table_name}: {result.error}[/red]")
    if report.failed_count:
        console.print(
            f"[red]{report.failed_count} of {len(report.results)} tables failed[/red] "
            f"({report.duration_seconds}s)"
        )
        return 1
    console.print(f"[green]Complete[/green]: {report.generated_count} models in {report.duration_seconds}s")
    return 0


if __name__ == "__main__":
    sys.exit(cli())
