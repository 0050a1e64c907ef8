# sass_importer/cli/interface.py
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click
from click_option_group import optgroup
from rich.console import Console as RichConsole
from rich.table import Table
import structlog

from sass_importer import __version__ as app_version
from sass_importer.config.loader import load_importer_options
from sass_importer.config.settings import DEFAULT_EXTENSIONS, DEFAULT_MAIN_FIELDS, DEFAULT_PACKAGE_PREFIX, ImporterOptions
from sass_importer.core.candidates import candidate_requests
from sass_importer.core.entry import main_field_requests
from sass_importer.core.importer import resolve_specifier
from sass_importer.core.resolution.node_resolver import resolve_package_sync
from sass_importer.core.specifier import CURRENT_DIR_MARKER, parse_specifier
from sass_importer.exceptions import ResolutionError, SassImporterError
from sass_importer.logging_setup import configure_logging

log = structlog.get_logger(__name__)

EXIT_UNRESOLVED = 2


def _build_options(
    config_profile: Optional[str],
    extensions: Tuple[str, ...],
    main_fields: Tuple[str, ...],
    package_prefix: Optional[str],
    basedir: Optional[Path],
) -> ImporterOptions:
    # config files first, then CLI flags; empty tuples from click mean "not given".
    options = load_importer_options(
        profile_name=config_profile,
        extensions=list(extensions) or None,
        main_fields=list(main_fields) or None,
        package_prefix=package_prefix,
    )
    if basedir is not None:
        options = options.with_resolver_options(basedir=str(basedir))
    log.debug("effective_importer_options", extensions=options.extensions, main_fields=options.main_fields,
              package_prefix=options.package_prefix, resolver_options=dict(options.resolver_options))
    return options


async def _resolve_all(urls: Tuple[str, ...], options: ImporterOptions, containing_file: Optional[str]) -> List[Dict[str, Any]]:
    results = await asyncio.gather(*(resolve_specifier(u, options, containing_file=containing_file) for u in urls))
    rows: List[Dict[str, Any]] = []
    for url, result in zip(urls, results):
        rows.append({
            "specifier": url,
            "file": str(result.file) if result.file is not None else None,
            "error": str(result.error) if result.error is not None else None,
        })
    return rows


def _importer_option_group(cmd):
    # shared importer options, applied to each subcommand.
    decorators = [
        optgroup.group("Importer Options", help="Override values from configuration files."),
        optgroup.option("-x", "--extension", "extensions", multiple=True, help=f"Stylesheet extension to try, in order. Default: {', '.join(DEFAULT_EXTENSIONS)}."),
        optgroup.option("-m", "--main-field", "main_fields", multiple=True, help=f"package.json field holding a stylesheet entry, in order. Default: {', '.join(DEFAULT_MAIN_FIELDS)}."),
        optgroup.option("--prefix", "package_prefix", default=None, help=f"Legacy prefix stripped from specifiers; '' disables. Default: '{DEFAULT_PACKAGE_PREFIX}'."),
        optgroup.option("--basedir", "basedir", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None, help="Directory to resolve packages from."),
        optgroup.option("--config-profile", "config_profile", default=None, help="Load a profile from config file(s)."),
    ]
    for decorator in reversed(decorators):
        cmd = decorator(cmd)
    return cmd


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@click.option("--force-json-logs", "force_json_logs", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="sass-importer", prog_name="sass-importer", help="Show version and exit.")
@click.pass_context
def main_cli_group(ctx: click.Context, verbosity_level: int, force_json_logs: bool):
    """sass-importer: resolve package imports in stylesheet @use/@import/@forward
    rules to files inside node_modules."""
    configure_logging(verbosity=verbosity_level, force_json_logs=force_json_logs)


@main_cli_group.command("resolve")
@click.argument("specifiers", nargs=-1, required=True)
@click.option("--from", "containing_file", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Stylesheet containing the import; packages resolve relative to it.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print results as JSON.")
@_importer_option_group
def resolve_command(specifiers: Tuple[str, ...], containing_file: Optional[Path], as_json: bool, **importer_params: Any):
    """Resolve SPECIFIERS to stylesheet files."""
    try:
        options = _build_options(**importer_params)
        prev = str(containing_file.resolve()) if containing_file else None
        rows = asyncio.run(_resolve_all(specifiers, options, prev))
    except SassImporterError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(rows, indent=2))
    else:
        for row in rows:
            if row["file"]:
                click.echo(f"{row['specifier']} -> {row['file']}")
            else:
                click.secho(f"{row['specifier']} -> not found", fg="yellow", err=True)

    if any(row["file"] is None for row in rows):
        sys.exit(EXIT_UNRESOLVED)


@main_cli_group.command("candidates")
@click.argument("specifier")
@_importer_option_group
def candidates_command(specifier: str, **importer_params: Any):
    """Show how SPECIFIER is parsed and which requests are tried, in priority order."""
    console = RichConsole()
    try:
        options = _build_options(**importer_params)
    except SassImporterError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    parsed = parse_specifier(specifier, options.package_prefix)
    if parsed.id is None:
        click.secho(f"'{specifier}' does not name a package.", fg="yellow", err=True)
        sys.exit(EXIT_UNRESOLVED)

    console.print(f"package: [bold]{parsed.id}[/bold]  sub-path: {parsed.path_name or '-'}")
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right")

    if parsed.path_name and parsed.path_name != CURRENT_DIR_MARKER:
        table.add_column("request")
        for index, request in enumerate(candidate_requests(parsed.id, parsed.path_name, options.extensions), start=1):
            table.add_row(str(index), request)
    else:
        table.add_column("field")
        table.add_column("request")
        try:
            manifest = resolve_package_sync(parsed.id, options.resolver_options).manifest
        except ResolutionError as e:
            log.info("package_not_resolved_for_candidates", package=parsed.id, error=str(e))
            manifest = None
        table.add_row("0", "(entry)", parsed.id)
        requests = main_field_requests(parsed.id, manifest, options.main_fields)
        for index, (field_name, request) in enumerate(zip(options.main_fields, requests), start=1):
            table.add_row(str(index), field_name, request or "-")
    console.print(table)
