"""
Real implementations of protocol interfaces.

These are production implementations that use libtmux for tmux operations
and perform real file I/O and subprocess calls.
"""

import glob
import logging
import os
import subprocess
from typing import Any, Dict, List, Optional

import libtmux
from libtmux.exc import LibTmuxException

logger = logging.getLogger(__name__)


class RealTmux:
    """Production implementation of TmuxInterface using libtmux.

    No caching: every refresh cycle must see the live session set.
    """

    def __init__(self, socket_name: Optional[str] = None):
        """Initialize with optional socket name for test isolation.

        If no socket_name is provided, checks AMPWATCH_TMUX_SOCKET env var.
        """
        self._socket_name = socket_name or os.environ.get("AMPWATCH_TMUX_SOCKET")
        self._server: Optional[libtmux.Server] = None

    @property
    def server(self) -> libtmux.Server:
        """Lazy-load the tmux server connection."""
        if self._server is None:
            if self._socket_name:
                self._server = libtmux.Server(socket_name=self._socket_name)
            else:
                self._server = libtmux.Server()
        return self._server

    def has_session(self, session: str) -> bool:
        try:
            return self.server.has_session(session)
        except (LibTmuxException, OSError) as e:
            logger.debug(f"has-session {session} failed: {e}")
            return False

    def list_sessions(self) -> List[str]:
        try:
            return [s.session_name for s in self.server.sessions if s.session_name]
        except (LibTmuxException, OSError) as e:
            logger.debug(f"list-sessions failed: {e}")
            return []

    def get_pane_current_path(self, session: str) -> Optional[str]:
        try:
            result = self.server.cmd(
                "display-message", "-t", session, "-p", "#{pane_current_path}"
            )
        except (LibTmuxException, OSError) as e:
            logger.debug(f"display-message {session} failed: {e}")
            return None

        if result.returncode != 0 or result.stderr:
            return None
        path = "\n".join(result.stdout).strip()
        return path or None


class RealFileSystem:
    """Production implementation of FileSystemInterface"""

    def read_text(self, path: str) -> Optional[str]:
        try:
            with open(path, encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError):
            return None

    def glob_dirs(self, pattern: str) -> List[str]:
        try:
            return sorted(p for p in glob.glob(pattern) if os.path.isdir(p))
        except OSError as e:
            logger.debug(f"glob {pattern} failed: {e}")
            return []


class RealSubprocess:
    """Production implementation of SubprocessInterface"""

    def run(self, cmd: List[str], cwd: Optional[str] = None,
            timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
        try:
            result = subprocess.run(
                cmd, cwd=cwd, timeout=timeout, capture_output=True,
                text=True, errors="replace",
            )
        except (subprocess.SubprocessError, OSError) as e:
            logger.debug(f"{cmd[0]} could not be run: {e}")
            return None
        return {
            'returncode': result.returncode,
            'stdout': result.stdout,
            'stderr': result.stderr,
        }
