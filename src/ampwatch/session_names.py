"""
Naming grammar shared by amptown and Ampwatch.

amptown has no registry of its instances. Membership is recovered from two
flat namespaces that follow a fixed convention:

    tmux session:   <prefix>-<instance_id>-<agent_name>
    log directory:  <prefix>-<instance_id>/logs

Session ids are exactly 8 hex characters. Log directory ids only need to
be 6+ characters long.
"""

import string
from typing import Optional, Tuple

SESSION_ID_LENGTH = 8
LOG_DIR_MIN_ID_LENGTH = 6
LOG_DIR_LEAF = "logs"

_HEX_DIGITS = frozenset(string.hexdigits)


def format_session_name(prefix: str, instance_id: str, agent_name: str) -> str:
    """Build the tmux session name of one agent."""
    return f"{prefix}-{instance_id}-{agent_name}"


def is_instance_id(value: str) -> bool:
    """Return True if value is a valid session-derived instance id."""
    return len(value) == SESSION_ID_LENGTH and all(c in _HEX_DIGITS for c in value)


def parse_session_name(prefix: str, session_name: str) -> Optional[Tuple[str, str]]:
    """Split a tmux session name into (instance_id, agent_name).

    Args:
        prefix: Fleet prefix, e.g. "amptown"
        session_name: Name as listed by tmux

    Returns:
        (instance_id, agent_name), or None if the name does not follow
        the convention (wrong prefix, non-hex or wrong-length id, or an
        empty agent name).
    """
    head = f"{prefix}-"
    if not session_name.startswith(head):
        return None

    rest = session_name[len(head):]
    if len(rest) <= SESSION_ID_LENGTH + 1 or rest[SESSION_ID_LENGTH] != "-":
        return None

    instance_id = rest[:SESSION_ID_LENGTH]
    if not is_instance_id(instance_id):
        return None

    return instance_id, rest[SESSION_ID_LENGTH + 1:]


def format_log_dir_name(prefix: str, instance_id: str) -> str:
    """Build the name of an instance's run directory (parent of logs/)."""
    return f"{prefix}-{instance_id}"


def parse_log_dir_name(prefix: str, dir_name: str) -> Optional[str]:
    """Extract the instance id from a run directory name.

    Args:
        prefix: Fleet prefix
        dir_name: Basename of the directory holding logs/

    Returns:
        The instance id, or None if the name does not match
    """
    head = f"{prefix}-"
    if not dir_name.startswith(head):
        return None
    instance_id = dir_name[len(head):]
    if len(instance_id) < LOG_DIR_MIN_ID_LENGTH:
        return None
    return instance_id
