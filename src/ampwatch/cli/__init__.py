"""
CLI interface for Ampwatch using Typer.
"""

# Import shared state (apps, options, utilities) first
from ._shared import app, main_callback, PrefixOption  # noqa: F401

# Import submodules to register their commands with the Typer apps
from . import monitoring  # noqa: F401
from . import config  # noqa: F401


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
