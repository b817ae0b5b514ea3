"""Diagnostic CLI for inspecting resolution cache dumps."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from .cache import ResolutionCache
from .config import load_tracer_settings
from .display import console
from .display import format_import_stack
from .logging_setup import init_json_logging
from .models import ResolutionContext
from .tracer import tracer_for_cache


@click.group(invoke_without_command=True)
@click.version_option(package_name="resolver-chain")
@click.pass_context
def cli(ctx: click.Context):
    """Resolver chain diagnostics."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("cache_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--origin", "-o", required=True, help="File whose importers should be traced")
@click.option("--platform", "-p", required=True, help="Platform the cache was built for (e.g. ios, web)")
@click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Directory paths are shown relative to",
)
@click.option("--options", "options_json", default="{}", help="Custom resolver options as JSON")
@click.option("--depth-limit", type=click.IntRange(min=0), default=None, help="Maximum import chain depth")
@click.option("--max-nodes", type=click.IntRange(min=1), default=None, help="Maximum nodes in the traced tree")
@click.option("--json", "as_json", is_flag=True, help="Print the tree as JSON")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Write JSONL debug log")
def trace(
    cache_file: Path,
    origin: str,
    platform: str,
    root: Path,
    options_json: str,
    depth_limit: int | None,
    max_nodes: int | None,
    as_json: bool,
    log_file: Path | None,
):
    """Show which files imported ORIGIN, according to a resolution cache dump."""
    if log_file:
        init_json_logging(log_file, "DEBUG")

    try:
        options = json.loads(options_json)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] --options is not valid JSON: {e}")
        sys.exit(1)
    if not isinstance(options, dict):
        console.print("[red]Error:[/red] --options must be a JSON object")
        sys.exit(1)

    try:
        cache = ResolutionCache.from_file(cache_file)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] Failed to load {cache_file}: {e}")
        sys.exit(1)

    settings = load_tracer_settings()
    tracer = tracer_for_cache(
        cache,
        str(root.resolve()),
        depth_limit=depth_limit if depth_limit is not None else settings.depth_limit,
        max_nodes=max_nodes if max_nodes is not None else settings.max_nodes,
    )

    tree = tracer.trace(ResolutionContext(origin_module_path=origin, custom_resolver_options=options), platform)
    if tree is None:
        console.print(f"[yellow]No inverse dependencies found for {origin} ({platform})[/yellow]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(tree.to_dict(), indent=2))
        return

    console.print(format_import_stack(tracer.render(tree)))
    console.print(f"\n[dim]{tree.count()} files[/dim]")


def main():
    cli()


if __name__ == "__main__":
    main()
