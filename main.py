#!/usr/bin/env python3
"""Grist API Sync - Entry point."""
import functools
import logging
from pathlib import Path
from typing import Optional

import click
from colorama import Fore, Style, init

from config import GristConfig, SourceApiConfig
from gristsync import __version__
from gristsync.api.data_importer import DataImporter
from gristsync.api.grist_client import GristClient, parse_grist_url
from gristsync.api.source_client import SourceApiClient
from gristsync.errors.classifier import format_error_long
from gristsync.errors.exceptions import GristSyncError
from gristsync.exporter.json_exporter import JsonExporter
from gristsync.mapper.heuristic import generate_mappings_from_api_data, suggest_api_fields

# Initialize colorama
init(autoreset=True)

LEVEL_COLORS = {
    "info": Fore.CYAN,
    "success": Fore.GREEN,
    "warning": Fore.YELLOW,
    "error": Fore.RED,
}


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}Grist API Sync{Fore.CYAN}                       ║")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}JSON API -> Grist table importer{Fore.CYAN}     ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    click.echo()


def echo_log(message: str, level: str = "info") -> None:
    """Progress sink for GristClient."""
    click.echo(f"{LEVEL_COLORS.get(level, '')}{message}")


def echo_failure(error: GristSyncError) -> None:
    """Print a failure, with its diagnosis when there is one."""
    if error.diagnosis is not None:
        click.echo(f"{Fore.RED}{format_error_long(error.diagnosis)}")
        if error.diagnosis.technical_detail:
            logging.getLogger(__name__).debug(error.diagnosis.technical_detail)
    else:
        click.echo(f"{Fore.RED}❌ {error}")


def grist_options(command):
    """Options selecting the destination table."""

    @click.option("--grist-url", help="Grist document URL (sets doc id and API URL)")
    @click.option("--doc-id", help="Grist document id [env: GRIST_DOC_ID]")
    @click.option("--table-id", help="Grist table id [env: GRIST_TABLE_ID]")
    @click.option("--api-url", help="Grist server URL [env: GRIST_API_URL]")
    @click.option("--token", help="Grist API token [env: GRIST_API_KEY]")
    @click.option(
        "--auto-columns/--no-auto-columns",
        default=None,
        help="Create missing columns before inserting",
    )
    @functools.wraps(command)
    def wrapper(*args, grist_url, doc_id, table_id, api_url, token, auto_columns, **kwargs):
        config = build_grist_config(grist_url, doc_id, table_id, api_url, token, auto_columns)
        return command(*args, grist_config=config, **kwargs)

    return wrapper


def source_options(command):
    """Options selecting the source API."""

    @click.option("--source-url", help="Source JSON API URL [env: SOURCE_API_URL]")
    @click.option("--source-header", help="Auth header name [env: SOURCE_API_HEADER]")
    @click.option("--source-token", help="Auth header value [env: SOURCE_API_TOKEN]")
    @functools.wraps(command)
    def wrapper(*args, source_url, source_header, source_token, **kwargs):
        config = SourceApiConfig.from_env()
        if source_url:
            config.url = source_url
        if source_header:
            config.auth_header = source_header
        if source_token:
            config.auth_token = source_token
        if not config.url:
            raise click.UsageError("A source URL is required (--source-url or SOURCE_API_URL)")
        return command(*args, source_config=config, **kwargs)

    return wrapper


def build_grist_config(
    grist_url: Optional[str],
    doc_id: Optional[str],
    table_id: Optional[str],
    api_url: Optional[str],
    token: Optional[str],
    auto_columns: Optional[bool],
) -> GristConfig:
    """Environment config overridden by command-line options."""
    config = GristConfig.from_env()

    if grist_url:
        parsed = parse_grist_url(grist_url)
        if not parsed.is_valid:
            raise click.BadParameter(f"No document id found in {grist_url}", param_hint="--grist-url")
        config.doc_id = parsed.doc_id
        config.api_base_url = parsed.api_base_url
    if doc_id:
        config.doc_id = doc_id
    if table_id:
        config.table_id = table_id
    if api_url:
        config.api_base_url = api_url
    if token:
        config.api_token = token
    if auto_columns is not None:
        config.auto_create_columns = auto_columns

    if not config.doc_id or not config.table_id:
        raise click.UsageError("A Grist document id and table id are required")
    return config


def fetch_source_records(source_config: SourceApiConfig) -> list:
    """Fetch source records, printing progress."""
    click.echo(f"{Fore.CYAN}Fetching {source_config.url}...")
    records = SourceApiClient(source_config).fetch_records()
    click.echo(f"{Fore.GREEN}✓ {len(records)} record(s) fetched")
    return records


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs")
def cli(verbose):
    """Grist API Sync - Push records from any JSON API into a Grist table."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@source_options
@grist_options
@click.option(
    "--mappings",
    "mappings_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Mapping file written by generate-mappings (default: map every field)",
)
@click.option("--dry-run", is_flag=True, help="Show transformed records without sending them")
def sync(source_config, grist_config, mappings_file, dry_run):
    """Fetch, map and insert records into Grist."""
    print_banner()

    try:
        records = fetch_source_records(source_config)

        if mappings_file:
            mappings = JsonExporter().load_mappings(mappings_file)
        else:
            mappings = generate_mappings_from_api_data(records[0] if records else None)
        enabled = [m for m in mappings if m.enabled]
        click.echo(f"{Fore.GREEN}✓ {len(enabled)}/{len(mappings)} mapping(s) enabled")

        importer = DataImporter(GristClient(grist_config, on_log=echo_log))

        if dry_run:
            for record in importer.preview(records, mappings):
                click.echo(f"   [DRY RUN] {record}")
            return

        result = importer.sync(records, mappings)
    except GristSyncError as e:
        echo_failure(e)
        raise SystemExit(1)

    click.echo(f"\n{Fore.GREEN}✅ {result.inserted_count} record(s) inserted into {grist_config.table_id}")


@cli.command("generate-mappings")
@source_options
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("mappings.json"),
    show_default=True,
    help="Mapping file to write",
)
@click.option("--disabled", is_flag=True, help="Write every mapping disabled")
def generate_mappings(source_config, output, disabled):
    """Build a mapping file from the first source record."""
    try:
        records = fetch_source_records(source_config)
    except GristSyncError as e:
        echo_failure(e)
        raise SystemExit(1)

    mappings = generate_mappings_from_api_data(records[0] if records else None, default_enabled=not disabled)
    for mapping in mappings:
        click.echo(f"   {mapping.api_field:40s} → {mapping.grist_column}")

    JsonExporter().export(output, mappings, source_url=source_config.url)
    click.echo(f"{Fore.GREEN}✅ {len(mappings)} mapping(s) written to {output}")


@cli.command()
@source_options
@click.argument("query")
@click.option("--limit", type=int, default=5, show_default=True)
def suggest(source_config, query, limit):
    """Suggest source field paths matching QUERY."""
    try:
        records = fetch_source_records(source_config)
    except GristSyncError as e:
        echo_failure(e)
        raise SystemExit(1)

    suggestions = suggest_api_fields(query, records[0] if records else None, limit=limit)
    if not suggestions:
        click.echo(f"{Fore.YELLOW}No matching field")
    for path in suggestions:
        click.echo(f"   {path}")


@cli.command("test-connection")
@grist_options
def test_connection(grist_config):
    """Check that the Grist table can be read."""
    if GristClient(grist_config).test_connection():
        click.echo(f"{Fore.GREEN}✅ Connected to {grist_config.doc_id}/{grist_config.table_id}")
    else:
        click.echo(f"{Fore.RED}❌ Cannot read {grist_config.doc_id}/{grist_config.table_id}")
        raise SystemExit(1)


@cli.command("validate-token")
@grist_options
def validate_token(grist_config):
    """Check the Grist API token."""
    result = GristClient(grist_config).validate_api_token()
    color = Fore.GREEN if result.valid else Fore.RED
    click.echo(f"{color}{result.message}")
    if result.needs_auth:
        click.echo(f"{Fore.YELLOW}💡 Pass a token with --token or GRIST_API_KEY")
    if not result.valid:
        raise SystemExit(1)


@cli.command()
@grist_options
def columns(grist_config):
    """List the columns of the Grist table."""
    try:
        table_columns = GristClient(grist_config).get_columns()
    except GristSyncError as e:
        echo_failure(e)
        raise SystemExit(1)

    for column in table_columns:
        click.echo(f"   {column.id:30s} {column.type:10s} {column.label or ''}")


@cli.command("parse-url")
@click.argument("url")
def parse_url(url):
    """Show the document id and API URL of a Grist URL."""
    parsed = parse_grist_url(url)
    if not parsed.is_valid:
        click.echo(f"{Fore.RED}❌ Not a Grist document URL")
        raise SystemExit(1)
    click.echo(f"doc_id:  {parsed.doc_id}")
    click.echo(f"api_url: {parsed.api_base_url}")


if __name__ == "__main__":
    cli()
