"""Typer-based CLI for IncludeGraph."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .churn import apply_churn, collect_churn, heat_level
from .config_manager import load_engine_config, reset_engine_config, save_engine_config
from .errors import ChurnError, ConfigError
from .graph import build_graph, top_hubs, unresolved_includes, unresolved_map
from .graph_export import export_dot, export_html, export_json
from .loader import load_directory
from .models import DependencyGraph, Direction, SourceFile
from .parser import extract_comments
from .reachability import reachability
from .sandbox import predict_breakage

console = Console()

app = typer.Typer(
    help="🕸️  IncludeGraph — C/C++ include graphs, impact analysis and refactoring sandbox.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration — engine defaults stored in config.toml.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(config_app, name="config")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"IncludeGraph v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    """IncludeGraph: static include analysis for C/C++ code bases."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _engine_config() -> Dict[str, Any]:
    try:
        return load_engine_config()
    except ConfigError as exc:
        raise typer.BadParameter(f"Invalid configuration: {exc}")


def _load_files(project_path: Path, settings: Dict[str, Any], scope: str = "", churn: bool = False) -> List[SourceFile]:
    files = load_directory(
        project_path,
        extensions=settings["extensions"],
        max_files=settings["max_files"],
        scope=scope,
    )
    if not files:
        typer.echo(f"❌ No C/C++ files found in '{project_path}'.")
        raise typer.Exit(1)
    if churn:
        try:
            counts = collect_churn(project_path, max_commits=settings["churn_commits"])
        except ChurnError as exc:
            typer.echo(f"⚠️  Churn unavailable: {exc}")
        else:
            files = apply_churn(files, counts)
    return files


def _resolve_file_arg(graph: DependencyGraph, name: str) -> str:
    """Accept an exact repository path or an unambiguous path suffix."""
    if name in graph.nodes:
        return name
    matches = sorted(p for p in graph.nodes if p.endswith("/" + name) or p == name)
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise typer.BadParameter(f"File '{name}' is not part of the analysed file set.")
    raise typer.BadParameter(
        f"'{name}' is ambiguous: {', '.join(matches[:5])}{' ...' if len(matches) > 5 else ''}"
    )


def _parse_direction(value: Optional[str], settings: Dict[str, Any]) -> Direction:
    try:
        return Direction(value or settings["direction"])
    except ValueError:
        raise typer.BadParameter(f"Direction must be one of: {', '.join(d.value for d in Direction)}")


# ------------------------------------------------------------------
# Analysis commands
# ------------------------------------------------------------------

@app.command("graph")
def graph_summary(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Path to source tree."),
    scope: str = typer.Option("", "--scope", "-s", help="Only analyse files under this subfolder."),
    churn: bool = typer.Option(False, "--churn", help="Collect churn from recent git history."),
    json_out: Optional[Path] = typer.Option(None, "--json", help="Also write the graph as JSON."),
    top: int = typer.Option(10, "--top", help="Number of most-included files to list."),
):
    """📊 Build the include graph and summarise it."""
    settings = _engine_config()
    files = _load_files(project_path, settings, scope=scope, churn=churn)
    graph = build_graph(files, tie_break=settings["tie_break"])

    unresolved = sum(len(t) for t in unresolved_map(graph, settings["tie_break"]).values())
    console.print(Panel(
        f"Files: [bold]{len(graph.nodes)}[/bold] | Edges: [bold]{len(graph.edges)}[/bold] | "
        f"Unresolved includes: [bold]{unresolved}[/bold]",
        title="Include Graph",
    ))

    hubs = top_hubs(graph, limit=top)
    if hubs:
        table = Table(title="Most included files")
        table.add_column("File", style="cyan")
        table.add_column("Dependents", justify="right")
        if churn:
            table.add_column("Churn", justify="right")
        for path, count in hubs:
            row = [path, str(count)]
            if churn:
                node = graph.nodes[path]
                row.append(f"{node.churn or 0} (heat {heat_level(node.churn)})")
            table.add_row(*row)
        console.print(table)

    if json_out:
        export_json(graph, json_out)
        typer.echo(f"Graph written to {json_out}")


@app.command("impact")
def impact(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Path to source tree."),
    file: str = typer.Argument(..., help="File to analyse (path or unique suffix)."),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", min=0, help="Maximum traversal hops."),
    direction: Optional[str] = typer.Option(None, "--direction", help="out, in or all."),
    scope: str = typer.Option("", "--scope", "-s", help="Only analyse files under this subfolder."),
):
    """🎯 Show files reachable from FILE within a number of include hops."""
    settings = _engine_config()
    policy = _parse_direction(direction, settings)
    hops = settings["depth"] if depth is None else depth

    files = _load_files(project_path, settings, scope=scope)
    graph = build_graph(files, tie_break=settings["tie_break"])
    start = _resolve_file_arg(graph, file)
    result = reachability(graph, start, policy, hops)

    outbound = set(graph.dependencies(start))
    inbound = set(graph.dependents(start))

    table = Table(title=f"Impact of {start} (depth {hops}, {policy.value})")
    table.add_column("File", style="cyan")
    table.add_column("Relation")
    for path in sorted(result.nodes - {start}):
        if path in outbound:
            relation = "includes directly"
        elif path in inbound:
            relation = "included by directly"
        else:
            relation = "transitive"
        table.add_row(path, relation)
    console.print(table)
    typer.echo(f"Reachable files: {len(result.nodes) - 1} | Edges traversed: {len(result.edges)}")


@app.command("simulate-move")
def simulate_move_cmd(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Path to source tree."),
    old_path: str = typer.Argument(..., help="Current repository path of the file."),
    new_path: str = typer.Argument(..., help="Hypothetical new repository path."),
    scope: str = typer.Option("", "--scope", "-s", help="Only analyse files under this subfolder."),
):
    """🧪 Predict which includes break if a file is moved."""
    settings = _engine_config()
    files = _load_files(project_path, settings, scope=scope)
    report = predict_breakage(files, old_path, new_path, tie_break=settings["tie_break"])

    if not report.moved:
        typer.echo(f"Nothing to simulate: '{report.old_path}' is not in the file set or the path is unchanged.")
        return

    if not report.broken:
        typer.echo(f"✅ Moving {report.old_path} -> {report.new_path} breaks no includes.")
        return

    table = Table(title=f"Predicted breakage: {report.old_path} -> {report.new_path}")
    table.add_column("File", style="cyan")
    table.add_column("Broken includes", style="red")
    for path, directives in sorted(report.broken.items()):
        table.add_row(path, ", ".join(f"{d} (line {d.line})" for d in directives))
    console.print(table)
    typer.echo(f"Broken inbound files: {report.broken_inbound}")
    typer.echo(f"Broken outbound includes: {report.broken_outbound}")


@app.command("docs")
def docs(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Path to source tree."),
    file: str = typer.Argument(..., help="File to document (path or unique suffix)."),
):
    """📖 List a file's includes and its documentation comments."""
    settings = _engine_config()
    files = _load_files(project_path, settings)
    graph = build_graph(files, tie_break=settings["tie_break"])
    path = _resolve_file_arg(graph, file)
    source = graph.files[path]

    missing = set(unresolved_includes(graph, path, settings["tie_break"]))
    table = Table(title=f"Includes of {path}")
    table.add_column("Line", justify="right")
    table.add_column("Include")
    table.add_column("Status")
    for directive in source.directives:
        status = "[yellow]unresolved[/yellow]" if directive.target in missing else "[green]resolved[/green]"
        table.add_row(str(directive.line), str(directive), status)
    console.print(table)
    typer.echo(f"Dependencies: {len(graph.dependencies(path))} | Dependents: {len(graph.dependents(path))}")

    comments = extract_comments(source.content)
    if comments:
        console.print(Panel("\n\n".join(comments), title="Documentation"))
    else:
        typer.echo("No documentation comments found.")


@app.command("export")
def export(
    project_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Path to source tree."),
    output: Path = typer.Argument(..., help="Output file."),
    fmt: str = typer.Option("json", "--format", "-f", help="json, dot or html."),
    focus: str = typer.Option("", "--focus", help="Only export the neighbourhood of this file."),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", min=0, help="Neighbourhood depth for --focus."),
    churn: bool = typer.Option(False, "--churn", help="Collect churn from recent git history."),
):
    """📤 Export the include graph for external visualisation."""
    exporters = {"json": export_json, "dot": export_dot, "html": export_html}
    if fmt not in exporters:
        raise typer.BadParameter(f"Format must be one of: {', '.join(exporters)}")

    settings = _engine_config()
    files = _load_files(project_path, settings, churn=churn)
    graph = build_graph(files, tie_break=settings["tie_break"])
    hops = settings["depth"] if depth is None else depth
    focus_id = _resolve_file_arg(graph, focus) if focus else ""
    exporters[fmt](graph, output, focus=focus_id, depth=hops)
    typer.echo(f"Exported {fmt} graph to {output}")


# ------------------------------------------------------------------
# Configuration commands
# ------------------------------------------------------------------

@config_app.command("show")
def config_show():
    """Show the effective engine settings."""
    settings = _engine_config()
    table = Table(title="Engine settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in settings.items():
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(key, str(value))
    console.print(table)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Setting name, e.g. depth or tie_break."),
    value: str = typer.Argument(..., help="New value."),
):
    """Persist one engine setting."""
    try:
        save_engine_config(**{key: value})
    except ConfigError as exc:
        typer.echo(f"❌ {exc}")
        raise typer.Exit(1)
    typer.echo(f"✅ {key} = {value}")


@config_app.command("reset")
def config_reset():
    """Restore default engine settings."""
    reset_engine_config()
    typer.echo("Engine settings reset to defaults.")


if __name__ == "__main__":
    app()
