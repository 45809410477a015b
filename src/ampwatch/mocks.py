"""
In-memory implementations of the protocol interfaces.

Used by the test suite to run discovery and refresh cycles with
no tmux server, no filesystem and no subprocesses.
"""

import fnmatch
from typing import Any, Dict, List, Optional


class MockTmux:
    """In-memory TmuxInterface.

    Sessions map a name to an optional pane working directory.
    """

    def __init__(self, sessions: Optional[Dict[str, Optional[str]]] = None):
        self.sessions: Dict[str, Optional[str]] = dict(sessions or {})
        self.available = True
        self.calls: List[tuple] = []

    def add_session(self, name: str, cwd: Optional[str] = None) -> None:
        self.sessions[name] = cwd

    def remove_session(self, name: str) -> None:
        self.sessions.pop(name, None)

    def has_session(self, session: str) -> bool:
        self.calls.append(("has_session", session))
        return self.available and session in self.sessions

    def list_sessions(self) -> List[str]:
        self.calls.append(("list_sessions",))
        if not self.available:
            return []
        return list(self.sessions)

    def get_pane_current_path(self, session: str) -> Optional[str]:
        self.calls.append(("get_pane_current_path", session))
        if not self.available:
            return None
        return self.sessions.get(session)


class MockFileSystem:
    """In-memory FileSystemInterface.

    Files are path -> text; directories are a set of paths. A file mapped
    to None behaves as unreadable.
    """

    def __init__(self):
        self.files: Dict[str, Optional[str]] = {}
        self.dirs: set = set()

    def set_file(self, path: str, content: Optional[str]) -> None:
        self.files[path] = content

    def add_dir(self, path: str) -> None:
        self.dirs.add(path)

    def read_text(self, path: str) -> Optional[str]:
        return self.files.get(path)

    def glob_dirs(self, pattern: str) -> List[str]:
        return sorted(d for d in self.dirs if _glob_match(d, pattern))


def _glob_match(path: str, pattern: str) -> bool:
    """Match like glob: '*' never crosses a path separator."""
    path_parts = path.split("/")
    pattern_parts = pattern.split("/")
    if len(path_parts) != len(pattern_parts):
        return False
    return all(fnmatch.fnmatchcase(p, q) for p, q in zip(path_parts, pattern_parts))


class MockSubprocess:
    """In-memory SubprocessInterface.

    Responses are registered per program name (cmd[0]), either as a fixed
    result dict, None (program could not be started), or a callable that
    receives (cmd, cwd) and returns one of those.
    """

    def __init__(self):
        self.responses: Dict[str, Any] = {}
        self.calls: List[Dict[str, Any]] = []

    def set_response(self, program: str, response: Any) -> None:
        self.responses[program] = response

    def set_result(self, program: str, returncode: int = 0,
                   stdout: str = "", stderr: str = "") -> None:
        self.responses[program] = {
            'returncode': returncode,
            'stdout': stdout,
            'stderr': stderr,
        }

    def run(self, cmd: List[str], cwd: Optional[str] = None,
            timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
        self.calls.append({'cmd': list(cmd), 'cwd': cwd, 'timeout': timeout})
        response = self.responses.get(cmd[0])
        if callable(response):
            response = response(cmd, cwd)
        return response
