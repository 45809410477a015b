"""
Dependency checking for the external programs Ampwatch consults.

tmux is required: without it there is nothing to discover. gh and amp
are optional and only limit what the dashboard can show.
"""

import shutil
import subprocess
from typing import Dict, List, Optional, Tuple

from .exceptions import TmuxNotFoundError


def find_executable(name: str) -> Optional[str]:
    """Find the path to an executable.

    Args:
        name: Name of the executable

    Returns:
        Full path to executable, or None if not found
    """
    return shutil.which(name)


def _check_program(name: str, version_args: List[str]) -> Tuple[bool, Optional[str], Optional[str]]:
    path = find_executable(name)
    if not path:
        return False, None, None

    try:
        result = subprocess.run(
            [name, *version_args],
            capture_output=True,
            text=True,
            timeout=10,
        )
        if result.returncode == 0:
            lines = result.stdout.strip().splitlines()
            return True, path, lines[0] if lines else None
        return True, path, None
    except (subprocess.SubprocessError, OSError):
        return True, path, None


def check_tmux() -> Tuple[bool, Optional[str], Optional[str]]:
    """Check if tmux is available and get its version.

    Returns:
        Tuple of (is_available, path, version)
    """
    return _check_program("tmux", ["-V"])


def check_gh() -> Tuple[bool, Optional[str], Optional[str]]:
    """Check if the GitHub CLI is available and get its version."""
    return _check_program("gh", ["--version"])


def check_summarizer(command: str = "amp") -> Tuple[bool, Optional[str], Optional[str]]:
    """Check if the summarization agent is available and get its version."""
    return _check_program(command, ["--version"])


def require_tmux() -> str:
    """Ensure tmux is available, raise if not.

    Returns:
        Path to tmux executable

    Raises:
        TmuxNotFoundError: If tmux is not found
    """
    available, path, _ = check_tmux()
    if not available:
        raise TmuxNotFoundError(
            "tmux is required but not found. "
            "Install it with: brew install tmux (macOS) or apt install tmux (Linux)"
        )
    return path


def get_dependency_status(summarizer_command: str = "amp") -> Dict[str, Dict[str, object]]:
    """Collect availability info for every external program.

    Returns:
        Mapping of program name to {"available", "path", "version", "required"}
    """
    status = {}
    for name, check, required in (
        ("tmux", check_tmux, True),
        ("gh", check_gh, False),
        (summarizer_command, lambda: check_summarizer(summarizer_command), False),
    ):
        available, path, version = check()
        status[name] = {
            "available": available,
            "path": path,
            "version": version,
            "required": required,
        }
    return status
