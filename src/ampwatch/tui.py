"""
Textual TUI for Ampwatch.

The app owns an AppState and drives it from three sources:

- a refresh timer (and the `r` key) that rebuilds the fleet in a
  background worker and applies it on the UI thread
- a fast tick that advances the spinner and drains finished summaries
- key bindings that call AppState navigation methods
"""

from typing import Optional

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.css.query import NoMatches
from textual.widgets import Static

from . import __version__
from .app_state import AppState
from .config import AmpwatchConfig, get_config
from .discovery import FleetScanner
from .implementations import RealTmux
from .logging_config import get_logger
from .summarizer import SummaryChannel, SummaryRequest, summarize_pull_request
from .tui_render import (
    render_content,
    render_footer,
    render_header,
    render_instance_bar,
    render_modal,
)

logger = get_logger("tui")


class AmpwatchTUI(App):
    """Ampwatch live dashboard"""

    AUTO_FOCUS = None

    CSS_PATH = "tui.tcss"

    BINDINGS = [
        Binding("q", "quit_or_dismiss", "Quit"),
        Binding("escape", "dismiss_modal", "Close", show=False),
        Binding("enter", "summarize_or_dismiss", "Summarize"),
        Binding("tab", "next_tab", "Next view", priority=True),
        Binding("shift+tab", "prev_tab", "Previous view", priority=True),
        Binding("j", "next_item", "Next", show=False),
        Binding("down", "next_item", "Next", show=False),
        Binding("k", "prev_item", "Prev", show=False),
        Binding("up", "prev_item", "Prev", show=False),
        Binding("l", "next_instance", "Next instance", show=False),
        Binding("right", "next_instance", "Next instance", show=False),
        Binding("h", "prev_instance", "Prev instance", show=False),
        Binding("left", "prev_instance", "Prev instance", show=False),
        Binding("r", "manual_refresh", "Refresh"),
    ]

    def __init__(
        self,
        config: Optional[AmpwatchConfig] = None,
        scanner: Optional[FleetScanner] = None,
        diagnostics: bool = False,
    ):
        super().__init__()
        self.config = config or get_config()
        self.scanner = scanner or FleetScanner(
            prefix=self.config.fleet_prefix,
            tmux=RealTmux(socket_name=self.config.tmux_socket),
            merged_limit=self.config.merged_limit,
        )
        # Disable the auto-refresh timer; `r` still refreshes
        self.diagnostics = diagnostics
        self.state = AppState()
        self.summaries = SummaryChannel()

    def compose(self) -> ComposeResult:
        yield Static(id="header")
        yield Static(id="instances")
        with ScrollableContainer(id="content-container"):
            yield Static(id="content")
        yield Static(id="footer")
        with ScrollableContainer(id="summary-modal"):
            yield Static(id="summary-text")

    def on_mount(self) -> None:
        """Called when app starts"""
        self.title = f"Ampwatch v{__version__}"
        self.render_state()
        self.refresh_fleet()

        self.set_interval(self.config.tick_interval, self.on_tick)
        if not self.diagnostics:
            self.set_interval(self.config.refresh_interval, self.refresh_fleet)

    # -- refresh --------------------------------------------------------

    def refresh_fleet(self) -> None:
        """Rebuild the fleet (kicks off background worker).

        A trigger that arrives while a rebuild is still running is
        dropped; the running rebuild always gets applied.
        """
        if self._refresh_in_flight():
            logger.debug("Refresh still running, skipping trigger")
            return
        self._fetch_fleet_async()

    def _refresh_in_flight(self) -> bool:
        return any(w.group == "refresh" and not w.is_finished for w in self.workers)

    @work(thread=True, group="refresh")
    def _fetch_fleet_async(self) -> None:
        """Discover and refresh all instances off the main thread."""
        instances = self.scanner.build_fleet()
        self.call_from_thread(self._apply_fleet, instances)

    def _apply_fleet(self, instances: list) -> None:
        """Apply a rebuilt fleet on the main thread (no I/O)."""
        self.state.apply_fleet(instances)
        self.render_state()

    def on_tick(self) -> None:
        self.state.advance_tick()
        for result in self.summaries.drain():
            if not self.state.apply_summary_result(result):
                logger.debug(f"Dropped superseded summary #{result.request_id}")
        self.render_state()

    # -- rendering ------------------------------------------------------

    def render_state(self) -> None:
        try:
            self.query_one("#header", Static).update(render_header(self.state))
            self.query_one("#instances", Static).update(render_instance_bar(self.state))
            self.query_one("#content", Static).update(render_content(self.state))
            self.query_one("#footer", Static).update(render_footer(self.state))
            modal = self.query_one("#summary-modal", ScrollableContainer)
            modal_text = self.query_one("#summary-text", Static)
        except NoMatches:
            return

        was_visible = modal.has_class("visible")
        modal.set_class(self.state.modal.visible, "visible")
        if self.state.modal.visible:
            modal_text.update(render_modal(self.state.modal))
            if not was_visible:
                # Focus the popup so the keyboard scrolls long summaries
                modal.scroll_home(animate=False)
                modal.focus()
        elif was_visible:
            self.set_focus(None)

    # -- summaries ------------------------------------------------------

    def start_summary(self) -> None:
        request = self.state.request_summary(self.config.summarizer_command)
        if request is None:
            return
        logger.info(f"Summarizing PR #{request.pr_number} in {request.repo_path}")
        self._summarize_async(request)
        self.render_state()

    @work(thread=True, group="summarize")
    def _summarize_async(self, request: SummaryRequest) -> None:
        """Run the summarization agent; the result goes through the channel."""
        result = summarize_pull_request(
            request,
            self.scanner.runner,
            command=self.config.summarizer_command,
            prompt_template=self.config.summarizer_prompt,
        )
        self.summaries.post(result)

    # -- actions --------------------------------------------------------

    def action_quit_or_dismiss(self) -> None:
        if self.state.modal.visible:
            self.action_dismiss_modal()
        else:
            self.exit()

    def action_dismiss_modal(self) -> None:
        self.state.dismiss_modal()
        self.render_state()

    def action_summarize_or_dismiss(self) -> None:
        if self.state.modal.visible:
            self.action_dismiss_modal()
        else:
            self.start_summary()

    def action_next_tab(self) -> None:
        self.state.next_tab()
        self.render_state()

    def action_prev_tab(self) -> None:
        self.state.prev_tab()
        self.render_state()

    def action_next_item(self) -> None:
        self.state.next_item()
        self.render_state()

    def action_prev_item(self) -> None:
        self.state.prev_item()
        self.render_state()

    def action_next_instance(self) -> None:
        self.state.next_instance()
        self.render_state()

    def action_prev_instance(self) -> None:
        self.state.prev_instance()
        self.render_state()

    def action_manual_refresh(self) -> None:
        if self.state.modal.visible:
            return
        self.refresh_fleet()


def run_tui(config: Optional[AmpwatchConfig] = None, diagnostics: bool = False) -> None:
    """Run the TUI dashboard"""
    import os
    import sys

    # Ensure we're using a proper terminal
    if not sys.stdout.isatty():
        print("Error: Must run in a TTY terminal", file=sys.stderr)
        sys.exit(1)

    os.environ.setdefault('TERM', 'xterm-256color')

    app = AmpwatchTUI(config=config, diagnostics=diagnostics)
    app.run()


if __name__ == "__main__":
    run_tui()
