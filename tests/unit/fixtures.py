"""
Test fixtures and factories for ampwatch unit tests.

Factory functions for gh-shaped PR records and mock probe setups, so
tests never need tmux, gh or amp installed.
"""

import json

from ampwatch.instance import AGENT_ROSTER
from ampwatch.mocks import MockTmux

PREFIX = "amptown"


def make_pr(number: int, title: str = "Some change", state: str = "OPEN",
            login: str = "octocat", branch: str = "feature") -> dict:
    """A PR record shaped like `gh pr list --json` output, plus extra keys."""
    return {
        "number": number,
        "title": title,
        "state": state,
        "author": {"login": login, "is_bot": False},
        "createdAt": "2024-05-01T10:00:00Z",
        "headRefName": branch,
        "url": f"https://github.com/acme/repo/pull/{number}",
    }


def gh_router(open_prs=None, merged_prs=None, fail_open=False, fail_merged=False):
    """Build a MockSubprocess response answering both gh pr list queries."""
    def respond(cmd, cwd):
        merged = "--state" in cmd and "merged" in cmd
        if (merged and fail_merged) or (not merged and fail_open):
            return {'returncode': 1, 'stdout': '', 'stderr': 'HTTP 502'}
        prs = merged_prs if merged else open_prs
        return {'returncode': 0, 'stdout': json.dumps(prs or []), 'stderr': ''}
    return respond


def add_instance_sessions(tmux: MockTmux, instance_id: str, cwd=None, agents=None):
    """Register tmux sessions for an instance's agents (all by default)."""
    for name, _ in AGENT_ROSTER:
        if agents is None or name in agents:
            tmux.add_session(f"{PREFIX}-{instance_id}-{name}", cwd)
