"""
One amptown instance: a repository worked on by a fixed roster of agents.

Each refresh cycle resolves the repository path from the agents' tmux
panes, refreshes every agent, then reloads the instance's pull requests
through the GitHub CLI. The PR lists depend on the path resolved in the
same cycle, so an instance whose agents were never reachable simply has
no PRs yet.
"""

import logging
import os
from typing import List, Optional, Tuple

from .agent import Agent, AgentKind
from .config import DEFAULT_FLEET_PREFIX, DEFAULT_MERGED_LIMIT
from .protocols import FileSystemInterface, SubprocessInterface, TmuxInterface
from .pull_request import PR_JSON_FIELDS, PullRequest, parse_pull_requests

logger = logging.getLogger(__name__)

# Roster order is stable: list-navigation indices depend on it.
AGENT_ROSTER: Tuple[Tuple[str, AgentKind], ...] = (
    ("reviewer-alpha", AgentKind.REVIEWER),
    ("reviewer-beta", AgentKind.REVIEWER),
    ("reviewer-gamma", AgentKind.REVIEWER),
    ("impl-alpha", AgentKind.IMPLEMENTER),
    ("impl-beta", AgentKind.IMPLEMENTER),
    ("impl-gamma", AgentKind.IMPLEMENTER),
)


class Instance:
    """An amptown instance and everything Ampwatch knows about it."""

    def __init__(
        self,
        instance_id: str,
        prefix: str = DEFAULT_FLEET_PREFIX,
        tmux: Optional[TmuxInterface] = None,
        fs: Optional[FileSystemInterface] = None,
        runner: Optional[SubprocessInterface] = None,
        merged_limit: int = DEFAULT_MERGED_LIMIT,
    ):
        """Initialize an instance with its fixed agent roster.

        Args:
            instance_id: Fleet-unique id token
            prefix: Fleet prefix used in session names
            tmux: TmuxInterface (defaults to RealTmux)
            fs: FileSystemInterface (defaults to RealFileSystem)
            runner: SubprocessInterface for gh (defaults to RealSubprocess)
            merged_limit: How many merged PRs to fetch
        """
        self.id = instance_id
        self.prefix = prefix
        self.merged_limit = merged_limit

        # Dependency injection for testability
        if tmux is None or fs is None or runner is None:
            from .implementations import RealFileSystem, RealSubprocess, RealTmux
            tmux = tmux or RealTmux()
            fs = fs or RealFileSystem()
            runner = runner or RealSubprocess()
        self.tmux = tmux
        self.fs = fs
        self.runner = runner

        self.repo_path: Optional[str] = None
        self.logs_dir: Optional[str] = None
        self.agents: List[Agent] = [
            Agent(name=name, kind=kind, instance_id=instance_id, prefix=prefix)
            for name, kind in AGENT_ROSTER
        ]
        self.open_prs: List[PullRequest] = []
        self.closed_prs: List[PullRequest] = []

    def __repr__(self) -> str:
        return f"Instance(id={self.id!r}, repo_path={self.repo_path!r}, logs_dir={self.logs_dir!r})"

    def refresh(self) -> None:
        """Run one refresh cycle. Order matters: PRs need the repo path."""
        self._find_repo_path()
        self._refresh_agents()
        self._refresh_prs()

    def _find_repo_path(self) -> None:
        # First agent pane that answers wins; keep the old path otherwise
        for agent in self.agents:
            path = self.tmux.get_pane_current_path(agent.session_name)
            if path:
                self.repo_path = path
                return

    def _refresh_agents(self) -> None:
        for agent in self.agents:
            agent.refresh(self.logs_dir, self.tmux, self.fs)

    def _refresh_prs(self) -> None:
        if not self.repo_path:
            return

        open_prs = self._fetch_prs([])
        if open_prs is not None:
            self.open_prs = open_prs

        merged_prs = self._fetch_prs(["--state", "merged", "--limit", str(self.merged_limit)])
        if merged_prs is not None:
            self.closed_prs = merged_prs

    def _fetch_prs(self, extra_args: List[str]) -> Optional[List[PullRequest]]:
        """Run one `gh pr list` query in the repo.

        Returns:
            Parsed PRs, or None if the call or the parse failed
        """
        cmd = ["gh", "pr", "list", *extra_args, "--json", PR_JSON_FIELDS]
        result = self.runner.run(cmd, cwd=self.repo_path)
        if result is None or result['returncode'] != 0:
            logger.debug(f"[{self.id}] {' '.join(cmd)} failed")
            return None

        try:
            return parse_pull_requests(result['stdout'])
        except ValueError as e:
            logger.debug(f"[{self.id}] unparseable gh output: {e}")
            return None

    def running_agent_count(self) -> int:
        return sum(1 for a in self.agents if a.is_running)

    def agents_of_kind(self, kind: AgentKind) -> List[Agent]:
        return [a for a in self.agents if a.kind == kind]

    @property
    def repo_name(self) -> str:
        """Display name: repo directory name, or a fallback from the id."""
        if self.repo_path:
            name = os.path.basename(self.repo_path.rstrip("/"))
            if name:
                return name
        return f"instance-{self.id}"
