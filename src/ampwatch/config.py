"""
Configuration for Ampwatch.

Settings are read from ~/.ampwatch/config.yaml, with environment variable
overrides for the values that are handy to change per shell:

    AMPWATCH_DIR                directory holding config.yaml and the log file
    AMPWATCH_PREFIX             fleet prefix of tmux sessions / log dirs
    AMPWATCH_REFRESH_INTERVAL   seconds between refresh cycles
    AMPWATCH_TMUX_SOCKET        tmux socket name (used for test isolation)

A missing or broken config file is never an error: every key falls back
to its default.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)


def _config_dir() -> Path:
    return Path(os.environ.get("AMPWATCH_DIR", Path.home() / ".ampwatch"))


CONFIG_DIR = _config_dir()
CONFIG_PATH = CONFIG_DIR / "config.yaml"

DEFAULT_FLEET_PREFIX = "amptown"
DEFAULT_REFRESH_INTERVAL = 5.0
DEFAULT_TICK_INTERVAL = 0.2
DEFAULT_MERGED_LIMIT = 10
DEFAULT_SUMMARIZER_COMMAND = ["amp", "--dangerously-allow-all", "--no-ide", "-x"]
DEFAULT_SUMMARIZER_PROMPT = (
    "Summarize PR #{number} in this repository. "
    "Include: what changed, why, and any concerns. Be concise."
)


@dataclass
class AmpwatchConfig:
    """Resolved runtime settings."""

    fleet_prefix: str = DEFAULT_FLEET_PREFIX
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    tick_interval: float = DEFAULT_TICK_INTERVAL
    merged_limit: int = DEFAULT_MERGED_LIMIT
    summarizer_command: List[str] = field(
        default_factory=lambda: list(DEFAULT_SUMMARIZER_COMMAND)
    )
    summarizer_prompt: str = DEFAULT_SUMMARIZER_PROMPT
    tmux_socket: Optional[str] = None
    log_file: Optional[Path] = None


def load_config() -> Dict[str, Any]:
    """Load the YAML config file.

    Returns:
        Parsed mapping, or an empty dict if the file is missing, invalid,
        or its root is not a mapping.
    """
    if not CONFIG_PATH.exists():
        return {}

    try:
        with open(CONFIG_PATH) as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        logger.warning(f"Ignoring unreadable config {CONFIG_PATH}: {e}")
        return {}

    if not isinstance(data, dict):
        return {}
    return data


def save_config(data: Dict[str, Any]) -> None:
    """Write a mapping to the YAML config file."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(CONFIG_PATH, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def _as_float(value: Any, default: float) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if result > 0 else default


def _as_int(value: Any, default: int) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError):
        return default
    return result if result > 0 else default


def _as_command(value: Any) -> List[str]:
    if isinstance(value, str) and value.strip():
        return value.split()
    if isinstance(value, list) and value and all(isinstance(v, str) for v in value):
        return list(value)
    return list(DEFAULT_SUMMARIZER_COMMAND)


def _as_prompt(value: Any) -> str:
    if isinstance(value, str) and "{number}" in value:
        return value
    return DEFAULT_SUMMARIZER_PROMPT


def get_config(raw: Optional[Dict[str, Any]] = None) -> AmpwatchConfig:
    """Resolve settings from the config file and environment.

    Args:
        raw: Pre-loaded config mapping (defaults to load_config())

    Returns:
        AmpwatchConfig with every field populated
    """
    if raw is None:
        raw = load_config()

    summarizer = raw.get("summarizer")
    if not isinstance(summarizer, dict):
        summarizer = {}

    prefix = os.environ.get("AMPWATCH_PREFIX") or raw.get("fleet_prefix")
    if not isinstance(prefix, str) or not prefix.strip():
        prefix = DEFAULT_FLEET_PREFIX

    refresh = os.environ.get("AMPWATCH_REFRESH_INTERVAL", raw.get("refresh_interval"))

    log_file = raw.get("log_file")

    return AmpwatchConfig(
        fleet_prefix=prefix.strip(),
        refresh_interval=_as_float(refresh, DEFAULT_REFRESH_INTERVAL),
        tick_interval=_as_float(raw.get("tick_interval"), DEFAULT_TICK_INTERVAL),
        merged_limit=_as_int(raw.get("merged_limit"), DEFAULT_MERGED_LIMIT),
        summarizer_command=_as_command(summarizer.get("command")),
        summarizer_prompt=_as_prompt(summarizer.get("prompt")),
        tmux_socket=os.environ.get("AMPWATCH_TMUX_SOCKET") or None,
        log_file=Path(log_file).expanduser() if isinstance(log_file, str) and log_file else None,
    )
