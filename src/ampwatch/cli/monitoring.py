"""
Monitoring commands: status, doctor.
"""

import json
from typing import Annotated

import typer
from rich import print as rprint

from ._shared import app, console, resolve_config, PrefixOption


@app.command()
def status(
    prefix: PrefixOption = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the snapshot as JSON")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log probe failures")
    ] = False,
):
    """Run one refresh cycle and print the fleet."""
    from ..discovery import FleetScanner
    from ..implementations import RealTmux
    from ..logging_config import setup_cli_logging
    from ..tui_render import render_status_table

    setup_cli_logging(verbose)
    config = resolve_config(prefix)
    scanner = FleetScanner(
        prefix=config.fleet_prefix,
        tmux=RealTmux(socket_name=config.tmux_socket),
        merged_limit=config.merged_limit,
    )
    instances = scanner.build_fleet()

    if as_json:
        print(json.dumps([_instance_to_dict(i) for i in instances], indent=2))
        return

    if not instances:
        rprint(f"[dim]No {config.fleet_prefix} instances found[/dim]")
        return

    console.print(render_status_table(instances))


def _instance_to_dict(instance) -> dict:
    return {
        "id": instance.id,
        "repo_name": instance.repo_name,
        "repo_path": instance.repo_path,
        "logs_dir": instance.logs_dir,
        "running_agents": instance.running_agent_count(),
        "agents": [
            {
                "name": a.name,
                "kind": a.kind.value,
                "is_running": a.is_running,
                "iterations": a.iterations,
                "last_activity": a.last_activity,
            }
            for a in instance.agents
        ],
        "open_prs": [pr.to_dict() for pr in instance.open_prs],
        "merged_prs": [pr.to_dict() for pr in instance.closed_prs],
    }


@app.command()
def doctor():
    """Check that tmux, gh and the summarization agent are installed."""
    from ..dependency_check import get_dependency_status

    config = resolve_config()
    all_required = True
    for name, info in get_dependency_status(config.summarizer_command[0]).items():
        if info["available"]:
            version = info["version"] or "unknown version"
            rprint(f"[green]✓[/green] [bold]{name}[/bold] {version} [dim]({info['path']})[/dim]")
        elif info["required"]:
            all_required = False
            rprint(f"[red]✗[/red] [bold]{name}[/bold] not found [red](required)[/red]")
        else:
            rprint(f"[yellow]-[/yellow] [bold]{name}[/bold] not found [dim](optional)[/dim]")

    if not all_required:
        raise typer.Exit(1)
