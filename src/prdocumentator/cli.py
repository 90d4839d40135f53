"""
PR Documentator Command Line Interface.

Runs analyses from diff files and webhook payloads, and exposes the offline
collection operations (route extraction and reconciliation) for inspection.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from prdocumentator.collection import extract_routes, reconcile
from prdocumentator.config import (
    ConfigurationError,
    DocumentatorConfig,
    LogFormat,
    LogLevel,
    load_config,
)
from prdocumentator.errors import DocumentatorError
from prdocumentator.models import (
    AnalysisResult,
    CollectionTree,
    MutationSummary,
    PullRequestEvent,
    RouteChangeSet,
)
from prdocumentator.services import AnalyzerService
from prdocumentator.utils.logging import configure_logging
from prdocumentator.version import __version__

console = Console()


def run_async(coro):
    """Run an async coroutine in a new event loop."""
    return asyncio.run(coro)


def _read_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path} is not valid JSON: {e}") from e


def _load_config(ctx: click.Context) -> DocumentatorConfig:
    """Load configuration once per invocation and set up logging."""
    if "config" not in ctx.obj:
        try:
            cfg = load_config(ctx.obj.get("config_path"))
        except (ConfigurationError, FileNotFoundError) as e:
            console.print(f"[red]Configuration error:[/red] {e}")
            sys.exit(1)

        if ctx.obj.get("verbose"):
            cfg.logging.level = LogLevel.DEBUG
        if ctx.obj.get("log_format"):
            cfg.logging.format = LogFormat(ctx.obj["log_format"])
        configure_logging(cfg.logging)
        ctx.obj["config"] = cfg
    return ctx.obj["config"]


def _fail(error: Exception, verbose: bool = False) -> None:
    console.print(f"[red]Error:[/red] {error}")
    if verbose:
        console.print_exception()
    sys.exit(1)


def _display_summary(summary: MutationSummary) -> None:
    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Status", summary.status.value)
    if summary.collection_id:
        table.add_row("Collection", summary.collection_id)
    table.add_row("Items added", str(summary.items_added))
    table.add_row("Items modified", str(summary.items_modified))
    table.add_row("Items deleted", str(summary.items_deleted))
    if summary.error_message:
        table.add_row("Error", f"[red]{summary.error_message}[/red]")
    console.print(table)


def _display_result(result: AnalysisResult) -> None:
    console.print(Panel(result.summary or "No summary", title="Analysis"))

    routes = Table(show_header=True)
    routes.add_column("Change", style="magenta")
    routes.add_column("Method", style="cyan")
    routes.add_column("Path", style="green")
    routes.add_column("Description")
    for label, group in (
        ("new", result.new_routes),
        ("modified", result.modified_routes),
        ("deleted", result.deleted_routes),
    ):
        for route in group:
            routes.add_row(label, route.method, route.path, route.description)
    if routes.row_count:
        console.print(routes)

    console.print(f"Confidence: [bold]{result.confidence}[/bold]")
    _display_summary(result.postman_update)


def _emit(result: AnalysisResult, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_json(), indent=2))
    else:
        _display_result(result)


@click.group()
@click.version_option(version=__version__, prog_name="prdoc")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Path to configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-format",
    type=click.Choice([f.value for f in LogFormat]),
    default=None,
    help="Log output format",
)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool, log_format: Optional[str]) -> None:
    """PR Documentator: keep a Postman collection in sync with pull requests.

    Sends a pull request diff to Claude, which reports the API routes that
    were added, changed or removed, and applies those changes to a Postman
    collection.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose
    ctx.obj["log_format"] = log_format


@main.command()
@click.argument("diff_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def analyze(ctx: click.Context, diff_file: str, as_json: bool) -> None:
    """Analyze a diff and update the collection.

    DIFF_FILE is a unified diff, e.g. the output of ``git diff``.
    """
    cfg = _load_config(ctx)
    diff = Path(diff_file).read_text()

    async def _run() -> AnalysisResult:
        async with AnalyzerService.from_config(cfg) as analyzer:
            return await analyzer.analyze_diff(diff)

    try:
        result = run_async(_run())
    except DocumentatorError as e:
        _fail(e, ctx.obj.get("verbose", False))
    _emit(result, as_json)


@main.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def webhook(ctx: click.Context, payload_file: str, as_json: bool) -> None:
    """Process a GitHub ``pull_request`` webhook payload.

    PAYLOAD_FILE is the JSON body GitHub delivered. The diff is fetched from
    the pull request's diff_url unless the payload carries a "diff" field.
    """
    cfg = _load_config(ctx)
    try:
        event = PullRequestEvent.model_validate(_read_json(payload_file))
    except PydanticValidationError as e:
        _fail(e)

    async def _run() -> AnalysisResult:
        async with AnalyzerService.from_config(cfg) as analyzer:
            return await analyzer.analyze_pull_request(event)

    try:
        result = run_async(_run())
    except DocumentatorError as e:
        _fail(e, ctx.obj.get("verbose", False))
    _emit(result, as_json)


@main.command()
@click.argument("collection_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print routes as JSON")
def extract(collection_file: str, as_json: bool) -> None:
    """List the routes documented in a collection export.

    COLLECTION_FILE is a Postman v2.1 collection JSON file.
    """
    try:
        tree = CollectionTree.from_wire(_read_json(collection_file))
    except PydanticValidationError as e:
        _fail(e)
    routes = extract_routes(tree)

    if as_json:
        click.echo(json.dumps([r.model_dump() for r in routes], indent=2))
        return

    table = Table(title=tree.name or "Collection", show_header=True)
    table.add_column("Method", style="cyan")
    table.add_column("Path", style="green")
    table.add_column("Name")
    table.add_column("Folder", style="dim")
    for route in routes:
        table.add_row(route.method, route.path, route.name, route.folder_label)
    console.print(table)
    console.print(f"[bold]{len(routes)}[/bold] routes")


@main.command("reconcile")
@click.argument("collection_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("changes_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the updated collection here")
@click.option("--folder", default=None, help="Folder new requests are added to")
def reconcile_command(
    collection_file: str,
    changes_file: str,
    output: Optional[str],
    folder: Optional[str],
) -> None:
    """Apply route changes to a collection export, offline.

    COLLECTION_FILE is a Postman v2.1 collection JSON file and CHANGES_FILE
    a JSON object with new_routes, modified_routes and deleted_routes.
    """
    try:
        tree = CollectionTree.from_wire(_read_json(collection_file))
        change_set = RouteChangeSet.model_validate(_read_json(changes_file))
    except PydanticValidationError as e:
        _fail(e)

    updated, summary = reconcile(tree, change_set, target_folder=folder)

    wire = json.dumps({"collection": updated.to_wire()}, indent=2)
    if output:
        Path(output).write_text(wire)
        console.print(f"[green]Updated collection saved to:[/green] {output}")
        _display_summary(summary)
    else:
        click.echo(wire)


@main.command("config-check")
@click.pass_context
def config_check(ctx: click.Context) -> None:
    """Show the effective configuration and any missing credentials."""
    cfg = _load_config(ctx)

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Claude model", cfg.claude.model)
    table.add_row("Claude API", cfg.claude.base_url)
    table.add_row("Postman API", cfg.postman.base_url)
    table.add_row("Collection", cfg.postman.collection_id or "[yellow]unset[/yellow]")
    table.add_row("Target folder", cfg.postman.target_folder or "(root)")
    table.add_row("Actions", ", ".join(cfg.analysis.processable_actions))
    table.add_row("Session TTL", f"{cfg.sessions.ttl:g}s")
    table.add_row("Log level", cfg.logging.level.value)
    console.print(Panel(f"[bold blue]PR Documentator v{__version__}[/bold blue]", title="Configuration"))
    console.print(table)

    missing = cfg.missing_credentials()
    if missing:
        console.print(f"[red]Missing:[/red] {', '.join(missing)}")
        sys.exit(1)
    console.print("[green]Configuration OK[/green]")


if __name__ == "__main__":
    main()
