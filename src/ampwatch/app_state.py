"""
Dashboard state, kept free of Textual so it can be unit tested.

AppState holds the fleet snapshot (replaced wholesale on every refresh)
and the navigation state: selected instance, selected tab, list cursors,
and the summary modal. All navigation is circular. While the modal is
open every navigation method is a no-op; only dismiss_modal() acts.

Selection is tracked by index. After a refresh the selected index may
point at a different instance if the fleet changed; that is accepted.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import List, Optional

from .instance import Instance
from .pull_request import PullRequest
from .summarizer import SummaryRequest, SummaryResult, loading_message


class Tab(IntEnum):
    AGENTS = 0
    OPEN_PRS = 1
    MERGED_PRS = 2

    @property
    def label(self) -> str:
        return {
            Tab.AGENTS: "Agents",
            Tab.OPEN_PRS: "Open PRs",
            Tab.MERGED_PRS: "Merged PRs",
        }[self]


TAB_COUNT = len(Tab)


@dataclass
class SummaryModal:
    """What the summary popup shows."""

    visible: bool = False
    loading: bool = False
    content: str = ""
    pr_number: Optional[int] = None
    request_id: Optional[int] = None


class AppState:
    """Fleet snapshot plus navigation state."""

    def __init__(self):
        self.instances: List[Instance] = []
        self.selected_instance: int = 0
        self.selected_tab: Tab = Tab.AGENTS
        self.agent_cursor: int = 0
        self.pr_cursor: int = 0
        self.modal = SummaryModal()
        self.last_refresh: Optional[datetime] = None
        self.tick: int = 0

    # -- snapshot -------------------------------------------------------

    def apply_fleet(self, instances: List[Instance], now: Optional[datetime] = None) -> None:
        """Replace the fleet and clamp the instance selection."""
        self.instances = list(instances)
        if self.selected_instance >= len(self.instances):
            self.selected_instance = max(len(self.instances) - 1, 0)
        self.last_refresh = now or datetime.now()

    def advance_tick(self) -> None:
        self.tick += 1

    @property
    def current_instance(self) -> Optional[Instance]:
        if 0 <= self.selected_instance < len(self.instances):
            return self.instances[self.selected_instance]
        return None

    def current_list_len(self) -> int:
        instance = self.current_instance
        if instance is None:
            return 0
        if self.selected_tab == Tab.AGENTS:
            return len(instance.agents)
        if self.selected_tab == Tab.OPEN_PRS:
            return len(instance.open_prs)
        return len(instance.closed_prs)

    def current_prs(self) -> List[PullRequest]:
        instance = self.current_instance
        if instance is None or self.selected_tab == Tab.AGENTS:
            return []
        if self.selected_tab == Tab.OPEN_PRS:
            return instance.open_prs
        return instance.closed_prs

    @property
    def selected_pr(self) -> Optional[PullRequest]:
        prs = self.current_prs()
        if 0 <= self.pr_cursor < len(prs):
            return prs[self.pr_cursor]
        return None

    # -- navigation -----------------------------------------------------

    def next_tab(self) -> None:
        if self.modal.visible:
            return
        self.selected_tab = Tab((self.selected_tab + 1) % TAB_COUNT)
        self.pr_cursor = 0

    def prev_tab(self) -> None:
        if self.modal.visible:
            return
        self.selected_tab = Tab((self.selected_tab - 1) % TAB_COUNT)
        self.pr_cursor = 0

    def next_instance(self) -> None:
        if self.modal.visible or not self.instances:
            return
        self.selected_instance = (self.selected_instance + 1) % len(self.instances)
        self.agent_cursor = 0
        self.pr_cursor = 0

    def prev_instance(self) -> None:
        if self.modal.visible or not self.instances:
            return
        self.selected_instance = (self.selected_instance - 1) % len(self.instances)
        self.agent_cursor = 0
        self.pr_cursor = 0

    def next_item(self) -> None:
        self._move_cursor(1)

    def prev_item(self) -> None:
        self._move_cursor(-1)

    def _move_cursor(self, step: int) -> None:
        if self.modal.visible:
            return
        length = self.current_list_len()
        if length == 0:
            return
        if self.selected_tab == Tab.AGENTS:
            self.agent_cursor = (self.agent_cursor + step) % length
        else:
            self.pr_cursor = (self.pr_cursor + step) % length

    # -- summary modal --------------------------------------------------

    def request_summary(self, command: Optional[List[str]] = None) -> Optional[SummaryRequest]:
        """Open the modal in loading state for the selected PR.

        Returns:
            The request to hand to a worker, or None if there is no PR
            selected or the instance has no known repo path.
        """
        if self.modal.visible or self.selected_tab == Tab.AGENTS:
            return None
        pr = self.selected_pr
        instance = self.current_instance
        if pr is None or instance is None or not instance.repo_path:
            return None

        request = SummaryRequest.create(pr.number, instance.repo_path, instance.id)
        self.modal = SummaryModal(
            visible=True,
            loading=True,
            content=loading_message(pr.number, command),
            pr_number=pr.number,
            request_id=request.request_id,
        )
        return request

    def apply_summary_result(self, result: SummaryResult) -> bool:
        """Store a finished summary if it answers the latest request.

        Applied whether or not the modal is still visible.

        Returns:
            True if the result was applied, False if it was superseded
        """
        if result.request_id != self.modal.request_id:
            return False
        self.modal.content = result.text
        self.modal.loading = False
        return True

    def dismiss_modal(self) -> None:
        """Hide the modal. An in-flight request keeps running."""
        self.modal.visible = False
