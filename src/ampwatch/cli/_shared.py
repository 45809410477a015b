"""
Shared CLI state: Typer apps, console, options, and utilities.
"""

from typing import Annotated, Optional

import typer
from rich import print as rprint
from rich.console import Console

from .. import __version__

# Main app
app = typer.Typer(
    name="ampwatch",
    help="Live dashboard for amptown agent fleets",
    no_args_is_help=False,
    invoke_without_command=True,
    rich_markup_mode="rich",
)

# Config subcommand group
config_app = typer.Typer(
    name="config",
    help="Manage configuration",
    no_args_is_help=False,
    invoke_without_command=True,
)
app.add_typer(config_app, name="config")

# Console for rich output
console = Console()

PrefixOption = Annotated[
    Optional[str],
    typer.Option(
        "--prefix",
        help="Fleet prefix of tmux sessions and log directories",
    ),
]


def resolve_config(prefix: Optional[str] = None, refresh: Optional[float] = None):
    """Load config and apply command-line overrides."""
    from ..config import get_config

    config = get_config()
    if prefix:
        config.fleet_prefix = prefix
    if refresh is not None and refresh > 0:
        config.refresh_interval = refresh
    return config


def _version_callback(value: bool):
    if value:
        print(f"ampwatch {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    prefix: PrefixOption = None,
    refresh: Annotated[
        Optional[float],
        typer.Option("--refresh", help="Seconds between refresh cycles"),
    ] = None,
    diagnostics: Annotated[
        bool,
        typer.Option("--diagnostics", hidden=True, help="Disable auto-refresh"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True,
                     help="Show version and exit"),
    ] = False,
):
    """Launch the dashboard when no command is given."""
    if ctx.invoked_subcommand is not None:
        return

    from ..dependency_check import require_tmux
    from ..exceptions import TmuxNotFoundError
    from ..logging_config import setup_tui_logging
    from ..tui import run_tui

    try:
        require_tmux()
    except TmuxNotFoundError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    config = resolve_config(prefix, refresh)
    setup_tui_logging(log_file=config.log_file)
    run_tui(config, diagnostics=diagnostics)
