"""CLI entry point for maestro-k."""

import click

from maestro_k import __version__
from maestro_k.config import load_env_file
from maestro_k.errors import MaestroError, SchemaViolation
from maestro_k.mcp.client import McpClient
from maestro_k.mcp.models import DatabaseInfo
from maestro_k.validation.pipeline import validate_files

VECTOR_DB_RESOURCES = ("vector-database", "vector-db")


def common_options(func):
    """Options shared by every command."""
    func = click.option("--dry-run", is_flag=True, help="Show what would be done without doing it.")(func)
    func = click.option("--silent", is_flag=True, help="Suppress normal output.")(func)
    func = click.option("--verbose", is_flag=True, help="Show detailed progress.")(func)
    return func


@click.group()
@click.version_option(__version__, prog_name="maestro-k")
def main():
    """Maestro Knowledge CLI: manage vector databases and validate configuration."""
    load_env_file()


@main.command("list")
@click.argument("resource")
@click.option("--mcp-server-uri", default=None, help="MCP server URI (overrides MAESTRO_KNOWLEDGE_MCP_SERVER_URI).")
@common_options
def list_resources(resource: str, mcp_server_uri: str | None, verbose: bool, silent: bool, dry_run: bool):
    """List vector database resources.

    \b
    Usage:
      maestro-k list vector-database [options]
      maestro-k list vector-db [options]

    \b
    Examples:
      maestro-k list vector-db
      maestro-k list vector-database --verbose
      maestro-k list vector-db --mcp-server-uri=http://localhost:8000
    """
    if resource not in VECTOR_DB_RESOURCES:
        raise click.ClickException(
            f"unsupported resource type: {resource}. Use 'vector-database' or 'vector-db'"
        )

    if verbose:
        click.echo("Listing vector databases...")

    if dry_run:
        click.echo("[DRY RUN] Would list vector databases")
        return

    client = McpClient.from_env(mcp_server_uri)
    if verbose:
        click.echo(f"Connecting to MCP server at: {client.base_url}")

    try:
        databases = client.list_databases()
    except MaestroError as e:
        raise click.ClickException(f"failed to list vector databases: {e}") from e

    if not silent:
        _print_databases(databases)

    if verbose:
        click.echo("Vector database listing completed successfully")


def _print_databases(databases: list[DatabaseInfo]):
    if not databases:
        click.echo("No vector databases found")
        return

    click.echo(f"Found {len(databases)} vector database(s):\n")
    for i, db in enumerate(databases, start=1):
        click.echo(f"{i}. {db.name} ({db.kind})")
        click.echo(f"   Collection: {db.collection}")
        click.echo(f"   Documents: {db.document_count}")
        click.echo()


@main.command()
@click.argument("files", nargs=-1, required=True, metavar="[SCHEMA_FILE] YAML_FILE")
@common_options
def validate(files: tuple[str, ...], verbose: bool, silent: bool, dry_run: bool):
    """Validate YAML files against schemas.

    With a single argument only the YAML syntax is checked.

    \b
    Examples:
      maestro-k validate config.yaml
      maestro-k validate schema.json config.yaml
    """
    if len(files) > 2:
        raise click.UsageError("validate accepts at most two arguments: [SCHEMA_FILE] YAML_FILE")

    if len(files) == 1:
        schema_file, yaml_file = None, files[0]
    else:
        schema_file, yaml_file = files

    if verbose:
        click.echo(f"Validating YAML file: {yaml_file}")
        if schema_file:
            click.echo(f"Using schema file: {schema_file}")
        else:
            click.echo("No schema provided, only validating YAML syntax")

    if dry_run:
        click.echo("[DRY RUN] Would validate files")
        return

    try:
        validate_files(yaml_file, schema_file)
    except SchemaViolation as e:
        for finding in e.findings:
            click.echo(f"- {finding.field}: {finding.description}", err=True)
        raise click.ClickException(str(e)) from e
    except MaestroError as e:
        raise click.ClickException(f"validation failed: {e}") from e

    if verbose and schema_file:
        click.echo("Schema validation passed")

    if not silent:
        click.echo("Validation successful")
