from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from route_action_gen.config import get_settings
from route_action_gen.domain.models import HTTP_METHODS
from route_action_gen.errors import RouteGenError
from route_action_gen.extractors.descriptor import extract_descriptor_from_file
from route_action_gen.orchestrator.create import create_config_file
from route_action_gen.orchestrator.pipeline import run_generate
from route_action_gen.repo.scanner import scan_config_files
from route_action_gen.targets.registry import AUTO, default_registry

app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


def _package_version() -> str:
    try:
        return version("route-action-gen")
    except PackageNotFoundError:
        return "0.0.0"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _fail(exc: RouteGenError) -> typer.Exit:
    err_console.print(f"[bold red]Error:[/bold red] {escape(exc.message)}")
    return typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"route-action-gen {_package_version()}")
        raise typer.Exit()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="DEBUG|INFO|WARNING|ERROR (default from settings)"),
    version_: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
) -> None:
    """Generate framework route handlers, clients and hooks from route.<method>.config.py files."""
    _configure_logging((log_level or get_settings().log_level).upper())


@app.command()
def generate(
    root: str = typer.Argument(".", help="Directory to scan for route.<method>.config.py files"),
    framework: Optional[str] = typer.Option(None, help="auto | fastapi-router | flask-views"),
) -> None:
    root_path = Path(root).expanduser().resolve()
    if not root_path.is_dir():
        raise typer.BadParameter(f"Root path is not a directory: {root_path}")

    try:
        result = run_generate(root_path, framework=framework)
    except RouteGenError as exc:
        raise _fail(exc)

    console.print(f"[bold green]route-action-gen[/bold green] generate: {escape(str(root_path))}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("ROUTE")
    table.add_column("TARGET", no_wrap=True)
    table.add_column("FILES", justify="right")
    table.add_column("WRITTEN", justify="right")
    table.add_column("ENTRY POINT")

    for g in result.groups:
        entry = Path(g.entry_point_file).name + (" (created)" if g.entry_point_created else "")
        table.add_row(escape(g.route_path), g.framework, str(len(g.files)), str(len(g.written)), escape(entry))

    console.print(table)
    console.print(f"Generated {result.total_files} files for {len(result.groups)} route(s).")


@app.command()
def create(
    method: str = typer.Argument(..., help=f"HTTP method: {', '.join(HTTP_METHODS)}"),
    directory: str = typer.Argument(".", help="Directory for the new descriptor"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    try:
        path = create_config_file(method.lower(), directory, force=force)
    except RouteGenError as exc:
        raise _fail(exc)
    console.print(f"[green]Created[/green] {escape(str(path))}")


@app.command("list")
def list_routes(
    root: str = typer.Argument(".", help="Directory to scan"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    """Show every descriptor with its declared facets and extracted fields."""
    root_path = Path(root).expanduser().resolve()
    settings = get_settings()
    registry = default_registry(settings.generated_dir_name)

    rows = []
    for group in scan_config_files(root_path, ignore_dirs=frozenset({settings.generated_dir_name})):
        adapter = registry.resolve(AUTO, group.directory)
        for cfg in group.configs:
            summary = extract_descriptor_from_file(Path(cfg.absolute_path), cfg.method)
            rows.append(
                {
                    "method": cfg.method.upper(),
                    "route": adapter.resolve_route_path(group.directory),
                    "target": adapter.name,
                    "facets": sorted(f.value for f in summary.facets),
                    "body": [f.name for f in summary.body_fields],
                    "params": [f.name for f in summary.param_fields],
                    "query": [f.name for f in summary.query_fields],
                    "file": cfg.absolute_path,
                }
            )

    if format.lower() == "json":
        console.print_json(data=rows)
        return

    console.print(f"[bold]Descriptors:[/bold] {len(rows)}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("ROUTE")
    table.add_column("TARGET", no_wrap=True)
    table.add_column("FACETS")
    table.add_column("FIELDS")

    for r in rows:
        fields = "; ".join(f"{k}: {', '.join(r[k])}" for k in ("body", "params", "query") if r[k])
        table.add_row(r["method"], escape(r["route"]), r["target"], ", ".join(r["facets"]), escape(fields))

    console.print(table)


@app.command()
def frameworks() -> None:
    """List the available target frameworks."""
    registry = default_registry()
    for name in registry.names():
        marker = " (default)" if name == registry.default else ""
        console.print(f"  {name}{marker}")
    console.print(f"  {AUTO}: pick per directory (views/ -> flask-views)")
