"""
Fleet discovery.

amptown keeps no registry of running instances, so the fleet is rebuilt
on every refresh from two independent signals:

1. tmux session names  (<prefix>-<8 hex id>-<agent>)
2. log directories     (<tmp root>/<prefix>-<id>/logs)

Each signal is a pure merge into an id -> Instance mapping. Session names
only create instances; log directories create them too and always set
their logs_dir. Either signal may come back empty without affecting the
other.
"""

import logging
import os
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from .config import DEFAULT_FLEET_PREFIX, DEFAULT_MERGED_LIMIT
from .instance import Instance
from .protocols import FileSystemInterface, SubprocessInterface, TmuxInterface
from .session_names import (
    LOG_DIR_LEAF,
    format_log_dir_name,
    parse_log_dir_name,
    parse_session_name,
)

logger = logging.getLogger(__name__)

InstanceFactory = Callable[[str], Instance]


def log_dir_patterns(prefix: str, env: Optional[Mapping[str, str]] = None) -> List[str]:
    """Glob patterns of the temp roots amptown may write logs under.

    Order: $TMPDIR (if set), /tmp, then the macOS per-user cache root.
    """
    if env is None:
        env = os.environ
    leaf = f"{format_log_dir_name(prefix, '*')}/{LOG_DIR_LEAF}"
    patterns = [f"/tmp/{leaf}"]
    tmpdir = env.get("TMPDIR")
    if tmpdir:
        patterns.insert(0, f"{tmpdir.rstrip('/')}/{leaf}")
    patterns.append(f"/var/folders/*/*/*/*/{leaf}")
    return patterns


def merge_session_signal(
    instances: Dict[str, Instance],
    session_names: Iterable[str],
    prefix: str,
    factory: InstanceFactory,
) -> Dict[str, Instance]:
    """Create an instance for every well-formed session name.

    Existing instances are never replaced.
    """
    for session_name in session_names:
        parsed = parse_session_name(prefix, session_name)
        if parsed is None:
            continue
        instance_id, _ = parsed
        if instance_id not in instances:
            instances[instance_id] = factory(instance_id)
    return instances


def merge_log_dir_signal(
    instances: Dict[str, Instance],
    log_dirs: Iterable[str],
    prefix: str,
    factory: InstanceFactory,
) -> Dict[str, Instance]:
    """Create instances for log directories and set their logs_dir.

    This signal is authoritative for logs_dir, also for instances first
    seen through session names.
    """
    for log_dir in log_dirs:
        log_dir = log_dir.rstrip("/")
        if os.path.basename(log_dir) != LOG_DIR_LEAF:
            continue
        instance_id = parse_log_dir_name(prefix, os.path.basename(os.path.dirname(log_dir)))
        if instance_id is None:
            continue
        instance = instances.get(instance_id)
        if instance is None:
            instance = instances[instance_id] = factory(instance_id)
        instance.logs_dir = log_dir
    return instances


class FleetScanner:
    """Discovers and refreshes the fleet using injected probes."""

    def __init__(
        self,
        prefix: str = DEFAULT_FLEET_PREFIX,
        tmux: Optional[TmuxInterface] = None,
        fs: Optional[FileSystemInterface] = None,
        runner: Optional[SubprocessInterface] = None,
        merged_limit: int = DEFAULT_MERGED_LIMIT,
        env: Optional[Mapping[str, str]] = None,
    ):
        if tmux is None or fs is None or runner is None:
            from .implementations import RealFileSystem, RealSubprocess, RealTmux
            tmux = tmux or RealTmux()
            fs = fs or RealFileSystem()
            runner = runner or RealSubprocess()
        self.prefix = prefix
        self.tmux = tmux
        self.fs = fs
        self.runner = runner
        self.merged_limit = merged_limit
        self.env = env

    def new_instance(self, instance_id: str) -> Instance:
        return Instance(
            instance_id,
            prefix=self.prefix,
            tmux=self.tmux,
            fs=self.fs,
            runner=self.runner,
            merged_limit=self.merged_limit,
        )

    def find_log_dirs(self) -> List[str]:
        log_dirs: List[str] = []
        for pattern in log_dir_patterns(self.prefix, self.env):
            log_dirs.extend(self.fs.glob_dirs(pattern))
        return log_dirs

    def discover_instances(self) -> Dict[str, Instance]:
        """Build a fresh id -> Instance mapping from both signals.

        The mapping is unordered; callers impose display order.
        """
        instances: Dict[str, Instance] = {}
        merge_session_signal(instances, self.tmux.list_sessions(), self.prefix, self.new_instance)
        merge_log_dir_signal(instances, self.find_log_dirs(), self.prefix, self.new_instance)
        return instances

    def build_fleet(self) -> List[Instance]:
        """Discover, sort by display name, and refresh every instance.

        Instances are sorted before refreshing, as amptown does. Each
        cycle builds fresh instances whose repo path is not resolved yet,
        so the sort key is always the `instance-<id>` fallback name.
        """
        instances = sorted(self.discover_instances().values(), key=lambda i: i.repo_name)
        for instance in instances:
            instance.refresh()
        logger.debug(
            f"Refreshed {len(instances)} instance(s): "
            + ", ".join(f"{i.repo_name}({i.running_agent_count()}/{len(i.agents)})" for i in instances)
        )
        return instances
