"""CLI entry point for mongo-jsonschema."""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from bson import json_util
from jsonschema.exceptions import SchemaError
from pymongo import MongoClient

from .config import Config
from .fetchers import MongoSchemaFetcher
from .logging_setup import configure_logging
from .schema_gen import bson_schema_to_json_schema
from .validation import (
    DocumentValidationError,
    MongoJSONSchemaError,
    NoSchemaAvailableError,
    SchemaValidator,
)

EXIT_NO_SCHEMA = 2


@click.group()
@click.option(
    "--config-file", "-c",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="Path to a JSON configuration file.",
    envvar="MONGO_JSONSCHEMA_CONFIG_FILE"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override the logging level (e.g., DEBUG, INFO)."
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default=None,
    help="Override logging format."
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], log_level: Optional[str], log_format: Optional[str]) -> None:
    """mongo-jsonschema - converts MongoDB $jsonSchema validators and validates documents."""
    try:
        if config_file:
            cfg = Config.from_file(Path(config_file))
        else:
            # Environment variables (and .env file if present)
            cfg = Config()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    if log_level:
        cfg.logging.level = log_level.upper()
    if log_format:
        cfg.logging.format = log_format.lower()

    configure_logging(cfg)
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command()
@click.argument("schema_file", type=click.File("r"), default="-")
@click.option("--indent", type=int, default=2, show_default=True, help="Indentation of the printed schema.")
def convert(schema_file, indent: int) -> None:
    """Converts a MongoDB $jsonSchema (file or stdin) to standard JSON Schema."""
    try:
        bson_schema = json.load(schema_file)
    except json.JSONDecodeError as e:
        click.echo(f"Invalid JSON schema input: {e}", err=True)
        sys.exit(1)

    # Accept a whole collection validator as well as the bare schema
    if isinstance(bson_schema, dict) and set(bson_schema) == {"$jsonSchema"}:
        bson_schema = bson_schema["$jsonSchema"]

    click.echo(json.dumps(bson_schema_to_json_schema(bson_schema), indent=indent))


@cli.command()
@click.argument("collection")
@click.argument("document_file", type=click.File("r"))
@click.option("--allow-missing-schema", is_flag=True, help="Exit successfully when the collection has no $jsonSchema.")
@click.pass_context
def validate(ctx: click.Context, collection: str, document_file, allow_missing_schema: bool) -> None:
    """Validates an Extended JSON document against COLLECTION's $jsonSchema."""
    config: Config = ctx.obj["config"]

    try:
        document = json_util.loads(document_file.read())
    except (ValueError, TypeError) as e:
        click.echo(f"Invalid Extended JSON document: {e}", err=True)
        sys.exit(1)

    with MongoClient(config.mongo.uri, serverSelectionTimeoutMS=config.mongo.server_selection_timeout_ms) as client:
        fetcher = MongoSchemaFetcher.from_database(client[config.mongo.database])
        validator = SchemaValidator(fetcher, app_config=config)
        try:
            validator.validate(collection, document)
        except NoSchemaAvailableError as e:
            click.echo(str(e), err=True)
            sys.exit(0 if allow_missing_schema else EXIT_NO_SCHEMA)
        except DocumentValidationError as e:
            click.echo(f"Document is not valid for collection {collection!r}:")
            for violation in e.violations:
                click.echo(f"  - {violation.describe()}")
            sys.exit(1)
        except MongoJSONSchemaError as e:
            click.echo(f"Validation failed: {e}", err=True)
            sys.exit(1)
        except SchemaError as e:
            click.echo(f"Converted schema of {collection!r} is not valid JSON Schema: {e.message}", err=True)
            sys.exit(1)

    click.echo(f"Document is valid for collection {collection!r}.")


@cli.command()
def version() -> None:
    """Show version information."""
    from . import __version__
    click.echo(f"mongo-jsonschema v{__version__}")


@cli.command()
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    config = ctx.obj["config"]
    click.echo(json.dumps(config.model_dump(), indent=2))


if __name__ == "__main__":
    cli()
