"""
Pure render functions for TUI components.

These functions are extracted from the TUI to enable unit testing
without requiring the full Textual framework.

All functions are pure - they take data as input and return Rich
renderables. No side effects, no external dependencies.
"""

from datetime import datetime
from typing import List, Optional

from rich.console import RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .agent import Agent, AgentKind
from .app_state import AppState, SummaryModal, Tab
from .instance import Instance
from .pull_request import PullRequest

SPINNER_FRAMES = ["⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"]

PR_STATE_STYLES = {
    "OPEN": "green",
    "MERGED": "magenta",
    "CLOSED": "red",
}

TAB_STYLES = {
    Tab.AGENTS: "yellow",
    Tab.OPEN_PRS: "green",
    Tab.MERGED_PRS: "magenta",
}


def spinner_frame(tick: int) -> str:
    return SPINNER_FRAMES[tick % len(SPINNER_FRAMES)]


def format_refresh_age(last_refresh: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Format time since the last refresh, e.g. "3s ago"."""
    if last_refresh is None:
        return "never"
    seconds = max(0, int(((now or datetime.now()) - last_refresh).total_seconds()))
    if seconds < 60:
        return f"{seconds}s ago"
    return f"{seconds // 60}m ago"


def render_header(state: AppState, now: Optional[datetime] = None) -> Text:
    """Render the header line: spinner, title, tab indicators."""
    instance = state.current_instance
    open_count = len(instance.open_prs) if instance else 0
    merged_count = len(instance.closed_prs) if instance else 0

    content = Text()
    content.append(f" {spinner_frame(state.tick)} ", style="green")
    content.append("AMPWATCH ", style="bold cyan")
    content.append("LIVE", style="bold green")
    content.append(" │ ")

    counts = {Tab.OPEN_PRS: open_count, Tab.MERGED_PRS: merged_count}
    for tab in Tab:
        selected = state.selected_tab == tab
        marker = "●" if selected else "○"
        label = f"{tab.label} ({counts[tab]})" if tab in counts else tab.label
        content.append(f" {label} {marker} ", style=TAB_STYLES[tab] if selected else "")

    content.append(f" │ refreshed {format_refresh_age(state.last_refresh, now)}", style="dim")
    return content


def render_instance_bar(state: AppState) -> Text:
    """Render the instance selector line."""
    content = Text()
    if not state.instances:
        content.append(" No instances running", style="dim")
        return content

    content.append(f" Instances ({len(state.instances)}): ", style="bold")
    for i, instance in enumerate(state.instances):
        label = f" {instance.repo_name} ({instance.running_agent_count()}/{len(instance.agents)}) "
        if i == state.selected_instance:
            content.append(label, style="bold yellow reverse")
        else:
            content.append(label, style="white")
    return content


def render_agent_line(agent: Agent, selected: bool = False) -> Text:
    line = Text()
    if agent.is_running:
        line.append("● ", style="green")
    else:
        line.append("○ ", style="red")
    line.append(agent.name, style="bold reverse" if selected else "bold")
    line.append(f" (iter: {agent.iterations})")
    if agent.last_activity:
        line.append("\n    ")
        line.append(agent.last_activity, style="dim")
    return line


def _agent_column(instance: Instance, kind: AgentKind, cursor: int, title: str, border: str) -> Panel:
    lines = Text()
    for index, agent in enumerate(instance.agents):
        if agent.kind != kind:
            continue
        if lines:
            lines.append("\n")
        lines.append_text(render_agent_line(agent, selected=index == cursor))
    return Panel(lines, title=f" {title} ", title_align="left", border_style=border)


def render_agents(instance: Instance, cursor: int = 0) -> RenderableType:
    """Render the agents view: reviewers and implementers side by side."""
    grid = Table.grid(expand=True)
    grid.add_column(ratio=1)
    grid.add_column(ratio=1)
    grid.add_row(
        _agent_column(instance, AgentKind.REVIEWER, cursor, "Reviewers", "blue"),
        _agent_column(instance, AgentKind.IMPLEMENTER, cursor, "Implementers", "magenta"),
    )
    return grid


def render_pr_line(pr: PullRequest, selected: bool = False) -> Text:
    line = Text()
    line.append(f"#{pr.number:<4} ", style="yellow")
    line.append(f"{pr.state:<8} ", style=PR_STATE_STYLES.get(pr.state, "white"))
    line.append(pr.title, style="bold" if selected else "")
    line.append(f"  {pr.author.login} · {pr.head_ref_name}", style="dim")
    if selected:
        line.stylize("reverse")
    return line


def render_prs(prs: List[PullRequest], cursor: int, title: str) -> Panel:
    """Render a PR list panel with the cursor row highlighted."""
    body = Text()
    if not prs:
        body.append("No pull requests", style="dim")
    for index, pr in enumerate(prs):
        if index:
            body.append("\n")
        body.append_text(render_pr_line(pr, selected=index == cursor))
    return Panel(body, title=f" {title} ", title_align="left")


def render_content(state: AppState) -> RenderableType:
    """Render the main area for the selected instance and tab."""
    instance = state.current_instance
    if instance is None:
        return Panel(
            Text("No amptown instances found. Start one with: amptown <repo-path>", style="dim"),
            title=" No Instances ",
            title_align="left",
        )
    if state.selected_tab == Tab.AGENTS:
        return render_agents(instance, state.agent_cursor)
    if state.selected_tab == Tab.OPEN_PRS:
        return render_prs(instance.open_prs, state.pr_cursor, "Open Pull Requests")
    return render_prs(instance.closed_prs, state.pr_cursor, "Merged Pull Requests")


def render_footer(state: AppState) -> Text:
    if len(state.instances) > 1:
        text = "q: Quit │ Tab: View │ ←→: Instance │ ↑↓: Navigate │ Enter: Summarize │ r: Refresh"
    elif state.selected_tab == Tab.AGENTS:
        text = "q: Quit │ Tab: Switch view │ ↑↓: Navigate │ r: Refresh"
    else:
        text = "q: Quit │ Tab: Switch view │ ↑↓: Navigate │ Enter: Summarize PR │ r: Refresh"
    return Text(text, style="dim")


def render_modal(modal: SummaryModal) -> Panel:
    if modal.loading:
        title = " Loading... (Press Esc to close) "
    else:
        title = " PR Summary (Press Esc to close) "
    return Panel(
        Text(modal.content),
        title=title,
        title_align="left",
        border_style="bright_cyan",
    )


def render_status_table(instances: List[Instance]) -> Table:
    """Render the fleet as one table (used by `ampwatch status`)."""
    table = Table(title="amptown fleet", title_justify="left")
    table.add_column("Instance", style="bold")
    table.add_column("Repo")
    table.add_column("Agents", justify="right")
    table.add_column("Open PRs", justify="right")
    table.add_column("Merged PRs", justify="right")
    table.add_column("Logs", style="dim")

    for instance in instances:
        running = instance.running_agent_count()
        table.add_row(
            instance.id,
            instance.repo_name,
            Text(f"{running}/{len(instance.agents)}", style="green" if running else "red"),
            str(len(instance.open_prs)),
            str(len(instance.closed_prs)),
            instance.logs_dir or "-",
        )
    return table
