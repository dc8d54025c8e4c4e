"""
Command-line interface for the catalog pipeline.

Usage:
    catalog-pipeline transform --input <file_path> [options]
    catalog-pipeline schema --input <file_path>
    catalog-pipeline suggest --input <file_path>
    catalog-pipeline apply --input <file_path> (--auto | --map SOURCE=CATALOG ...)
"""

import argparse
import json
import mimetypes
import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from catalog_pipeline.catalog import generate_catalog_summary
from catalog_pipeline.config import PipelineSettings, load_settings
from catalog_pipeline.core.exceptions import CatalogError
from catalog_pipeline.core.models import DataSource, FileRef, SourceConfiguration
from catalog_pipeline.core.schema import analyze_schema
from catalog_pipeline.observability.logger import configure_logging, get_logger
from catalog_pipeline.observability.metrics import write_metrics_file
from catalog_pipeline.pipeline import CatalogPipeline
from catalog_pipeline.storage import InMemoryCatalogRepository

logger = get_logger(__name__)


def build_data_source(paths: list[str], source_id: str, name: str | None = None) -> DataSource:
    """
    Describe local files as a filesystem data source.

    Args:
        paths: Files to attach; content is read as UTF-8 text
        source_id: Data source id
        name: Display name (defaults to the first file name)

    Returns:
        DataSource

    Raises:
        FileNotFoundError: If a file does not exist
    """
    files = []
    for path_str in paths:
        path = Path(path_str)
        if not path.is_file():
            raise FileNotFoundError(f"Input file not found: {path_str}")
        content = path.read_text(encoding="utf-8", errors="replace")
        mime_type, _ = mimetypes.guess_type(path.name)
        files.append(
            FileRef(name=path.name, type=mime_type or "", size=path.stat().st_size, content=content)
        )

    return DataSource(
        id=source_id,
        name=name or Path(paths[0]).name,
        type="filesystem",
        configuration=SourceConfiguration(files=files),
    )


def create_pipeline(settings: PipelineSettings, source: DataSource) -> CatalogPipeline:
    """Build a pipeline over an in-memory store seeded with the standard catalog."""
    repository = InMemoryCatalogRepository()
    pipeline = CatalogPipeline(repository, settings)
    pipeline.catalog_service.seed_standard_catalog()
    pipeline.catalog_service.register_source(source)
    return pipeline


def emit(payload) -> None:
    print(json.dumps(payload, indent=2))


def transform_command(args, settings: PipelineSettings) -> None:
    """Print the unified catalog (or its summary) for the input files."""
    source = build_data_source(args.input, args.source, args.name)
    pipeline = create_pipeline(settings, source)
    catalog = pipeline.transform_data_source(source, max_records=args.max_records)

    if args.summary:
        print(generate_catalog_summary(catalog))
    else:
        print(catalog.to_json())


def schema_command(args, settings: PipelineSettings) -> None:
    """Print the inferred schema of the input files."""
    source = build_data_source(args.input, args.source, args.name)
    pipeline = create_pipeline(settings, source)
    extraction = pipeline.extract(source)
    emit(analyze_schema(extraction.records).to_wire())


def suggest_command(args, settings: PipelineSettings) -> None:
    """Print catalog mapping suggestions for the input files' fields."""
    source = build_data_source(args.input, args.source, args.name)
    pipeline = create_pipeline(settings, source)
    fields = pipeline.load_source_fields(source)
    emit([s.to_wire() for s in pipeline.suggest_mappings(fields)])


def apply_command(args, settings: PipelineSettings) -> None:
    """Map the input files onto catalog fields and print the mapped catalog."""
    source = build_data_source(args.input, args.source, args.name)
    pipeline = create_pipeline(settings, source)
    service = pipeline.catalog_service

    if args.auto:
        created = service.auto_map_fields(source.id, pipeline.load_source_fields(source))
        logger.info("Auto-mapping complete", extra={"mappings_created": len(created)})

    for pair in args.map or []:
        source_field, sep, catalog_name = pair.partition("=")
        if not sep or not source_field or not catalog_name:
            raise CatalogError(f"Invalid --map value '{pair}', expected SOURCE_FIELD=CATALOG_FIELD")
        field = service.repository.get_field_by_name(catalog_name)
        if field is None:
            raise CatalogError(f"Unknown catalog field '{catalog_name}'")
        service.create_mapping(source.id, source_field, field.id)

    catalog = pipeline.transform_mapped_source(source, max_records=args.max_records)
    print(catalog.to_json())


COMMANDS = {
    "transform": transform_command,
    "schema": schema_command,
    "suggest": suggest_command,
    "apply": apply_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-pipeline",
        description="Data catalog transformation and field-mapping pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Transform a CSV file into a unified catalog
  catalog-pipeline transform --input data/customers.csv

  # Show only a summary, keeping every record
  catalog-pipeline transform --input data/customers.csv --max-records 0 --summary

  # Inspect the inferred schema of several files as one source
  catalog-pipeline schema --input data/a.json --input data/b.json

  # Suggest standard catalog fields for each source field
  catalog-pipeline suggest --input data/customers.csv

  # Auto-map confident suggestions and add one manual mapping
  catalog-pipeline apply --input data/customers.csv --auto \\
      --map account_id=account_number

  # Keep run metrics for a node_exporter textfile collector
  catalog-pipeline --metrics-file /var/lib/node_exporter/catalog.prom transform --input data/customers.csv
        """,
    )
    parser.add_argument(
        "--env-file",
        help="Optional .env file with LOG_LEVEL, CATALOG_* settings",
    )
    parser.add_argument(
        "--metrics-file",
        help="Write Prometheus metrics to this file when the command finishes",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for command, help_text in (
        ("transform", "Transform files into a unified catalog"),
        ("schema", "Print the inferred schema"),
        ("suggest", "Suggest catalog field mappings"),
        ("apply", "Apply field mappings and print the mapped catalog"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--input",
            required=True,
            action="append",
            help="Path to an input file (repeat for multiple files)",
        )
        sub.add_argument("--source", default="cli_source", help="Data source ID (default: cli_source)")
        sub.add_argument("--name", help="Data source name (default: first file name)")

        if command in ("transform", "apply"):
            sub.add_argument(
                "--max-records",
                type=int,
                default=None,
                help="Records to include in the catalog (0 = all; default from CATALOG_DEFAULT_MAX_RECORDS)",
            )

    subparsers.choices["transform"].add_argument(
        "--summary", action="store_true", help="Print a text summary instead of JSON"
    )
    apply_parser = subparsers.choices["apply"]
    apply_parser.add_argument(
        "--auto", action="store_true", help="Create mappings for confident suggestions"
    )
    apply_parser.add_argument(
        "--map",
        action="append",
        metavar="SOURCE=CATALOG",
        help="Map a source field to a catalog field by name (repeatable)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = load_settings(args.env_file)
    configure_logging(level=settings.log_level, format_type=settings.log_format)

    try:
        COMMANDS[args.command](args, settings)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except (CatalogError, PydanticValidationError) as e:
        logger.error(f"Error during {args.command}: {e}", exc_info=True)
        return 1
    finally:
        if args.metrics_file:
            write_metrics_file(args.metrics_file)
            logger.info("Metrics written", extra={"path": args.metrics_file})

    return 0


if __name__ == "__main__":
    sys.exit(main())
