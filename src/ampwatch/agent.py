"""
One amptown worker agent.

An agent's state is derived on every refresh from two unreliable
sources: whether its tmux session exists, and the free-form text of its
log file. Neither source failing is an error; the agent just keeps its
previous derived values.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .protocols import FileSystemInterface, TmuxInterface
from .session_names import format_session_name

# Each iteration of an agent loop prints a line containing this marker.
ITERATION_MARKER = "Starting"
MAX_ACTIVITY_CHARS = 80


class AgentKind(Enum):
    REVIEWER = "reviewer"
    IMPLEMENTER = "implementer"


def count_iterations(log_text: str) -> int:
    """Count loop iterations in a log (occurrences of the marker)."""
    return log_text.count(ITERATION_MARKER)


def last_activity_line(log_text: str) -> Optional[str]:
    """Find the newest meaningful line in a log.

    Blank lines and lines starting with "[" (timestamped framing written
    by the amptown runner) are skipped.

    Returns:
        The line truncated to MAX_ACTIVITY_CHARS characters, or None
    """
    for line in reversed(log_text.splitlines()):
        if line.strip() and not line.startswith("["):
            return line[:MAX_ACTIVITY_CHARS]
    return None


@dataclass
class Agent:
    """A worker agent of one instance.

    Identity fields are fixed at construction; is_running, iterations and
    last_activity are recomputed by refresh().
    """

    name: str
    kind: AgentKind
    instance_id: str
    prefix: str
    is_running: bool = False
    iterations: int = 0
    last_activity: str = ""

    @property
    def session_name(self) -> str:
        return format_session_name(self.prefix, self.instance_id, self.name)

    def log_path(self, logs_dir: str) -> str:
        return os.path.join(logs_dir, f"{self.name}.log")

    def refresh(
        self,
        logs_dir: Optional[str],
        tmux: TmuxInterface,
        fs: FileSystemInterface,
    ) -> None:
        """Update liveness and log-derived fields in place."""
        self.is_running = tmux.has_session(self.session_name)
        if logs_dir:
            self._read_log(logs_dir, fs)

    def _read_log(self, logs_dir: str, fs: FileSystemInterface) -> None:
        content = fs.read_text(self.log_path(logs_dir))
        if content is None:
            # Transient read failures keep the previous values
            return

        self.iterations = count_iterations(content)
        line = last_activity_line(content)
        if line is not None:
            self.last_activity = line
