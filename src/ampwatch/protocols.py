"""
Protocol definitions for external dependencies.

These interfaces allow dependency injection for testing, enabling us to
swap real implementations (tmux via libtmux, filesystem globbing, gh and
amp subprocesses) with in-memory mocks in tests.

Every method reports failure through its return value. Implementations
must never raise for a failed probe.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class TmuxInterface(Protocol):
    """Interface for the session-manager queries Ampwatch needs."""

    def has_session(self, session: str) -> bool:
        """Check if a session with exactly this name exists.

        Returns:
            True only if the query succeeded and the session exists
        """
        ...

    def list_sessions(self) -> List[str]:
        """List all session names.

        Returns:
            Session names, or an empty list if tmux is unreachable
        """
        ...

    def get_pane_current_path(self, session: str) -> Optional[str]:
        """Get the current working directory of a session's active pane.

        Returns:
            The path, or None if the session is missing or the query failed
        """
        ...


@runtime_checkable
class FileSystemInterface(Protocol):
    """Interface for file system operations"""

    def read_text(self, path: str) -> Optional[str]:
        """Read a UTF-8 text file.

        Returns:
            File content, or None if missing/unreadable/not UTF-8
        """
        ...

    def glob_dirs(self, pattern: str) -> List[str]:
        """Expand a glob pattern, keeping only directories.

        Returns:
            Matching directory paths (empty on any error)
        """
        ...


@runtime_checkable
class SubprocessInterface(Protocol):
    """Interface for subprocess operations (non-tmux)"""

    def run(self, cmd: List[str], cwd: Optional[str] = None,
            timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
        """Run a command to completion.

        Args:
            cmd: command and arguments
            cwd: working directory
            timeout: timeout in seconds (None waits forever)

        Returns:
            Dict with 'returncode', 'stdout', 'stderr', or None if the
            command could not be run at all
        """
        ...
