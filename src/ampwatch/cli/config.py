"""
Config commands: init, show, path.
"""

from typing import Annotated

import typer
from rich import print as rprint

from ._shared import config_app


CONFIG_TEMPLATE = """\
# Ampwatch configuration
# Location: ~/.ampwatch/config.yaml

# Prefix of amptown tmux sessions (<prefix>-<id>-<agent>) and
# log directories (<prefix>-<id>/logs)
# fleet_prefix: amptown

# Seconds between refresh cycles
# refresh_interval: 5

# Seconds between UI ticks (spinner, summary delivery)
# tick_interval: 0.2

# Number of merged PRs to list per instance
# merged_limit: 10

# PR summarization agent; the prompt is appended as the last argument
# summarizer:
#   command: [amp, --dangerously-allow-all, --no-ide, -x]
#   prompt: "Summarize PR #{number} in this repository. Include: what changed, why, and any concerns. Be concise."

# Dashboard log file (default: ~/.ampwatch/ampwatch.log)
# log_file: ~/.ampwatch/ampwatch.log
"""


@config_app.callback(invoke_without_command=True)
def config_default(ctx: typer.Context):
    """Show current configuration (default when no subcommand given)."""
    if ctx.invoked_subcommand is None:
        _config_show()


@config_app.command("init")
def config_init(
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite existing config file")
    ] = False,
):
    """Create a config file with documented defaults.

    Creates ~/.ampwatch/config.yaml with all options commented out.
    Use --force to overwrite an existing config file.
    """
    from .. import config as config_module

    path = config_module.CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.exists() and not force:
        rprint(f"[yellow]Config file already exists:[/yellow] {path}")
        rprint("[dim]Use --force to overwrite[/dim]")
        raise typer.Exit(1)

    path.write_text(CONFIG_TEMPLATE)
    rprint(f"[green]✓[/green] Created config file: [bold]{path}[/bold]")
    rprint("[dim]Edit to customize your settings[/dim]")


@config_app.command("show")
def config_show():
    """Show current configuration."""
    _config_show()


def _config_show():
    """Internal function to display the effective config."""
    from .. import config as config_module

    path = config_module.CONFIG_PATH
    if path.exists():
        rprint(f"[bold]Configuration[/bold] ({path}):\n")
    else:
        rprint(f"[dim]No config file found at {path}, showing defaults[/dim]")
        rprint("[dim]Run 'ampwatch config init' to create one[/dim]\n")

    config = config_module.get_config()
    rprint(f"  fleet_prefix: {config.fleet_prefix}")
    rprint(f"  refresh_interval: {config.refresh_interval}s")
    rprint(f"  tick_interval: {config.tick_interval}s")
    rprint(f"  merged_limit: {config.merged_limit}")
    rprint(f"  tmux_socket: {config.tmux_socket or '(default)'}")
    rprint("  summarizer:")
    rprint(f"    command: {' '.join(config.summarizer_command)}")
    prompt = config.summarizer_prompt
    display = prompt[:60] + "..." if len(prompt) > 60 else prompt
    rprint(f"    prompt: \"{display}\"")
    if config.log_file:
        rprint(f"  log_file: {config.log_file}")


@config_app.command("path")
def config_path():
    """Show the config file path."""
    from .. import config as config_module
    print(config_module.CONFIG_PATH)
