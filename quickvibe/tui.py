"""Interactive TUI for quickvibe using Textual."""

import asyncio
from typing import List, Optional, Tuple

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.coordinate import Coordinate
from textual.widgets import DataTable, Footer, Header, Static

from .__version__ import __version__
from .config import default_config_path
from .constants import COLUMNS, LEGEND_TEXT, TUI_COLORS
from .core import QuickVibe
from .formatters import (
    format_branch,
    format_progress,
    format_sessions,
    format_status,
    shorten_home,
    truncate_path,
)
from .models.instance import EnrichedInstance
from .models.issue import Issue
from .models.session import AttachPlan
from .ui.screens import (
    ATTACH,
    KILL,
    NEW,
    ConfirmScreen,
    InfoScreen,
    InputScreen,
    IssueScreen,
    SessionScreen,
)
from .logging_config import get_logger

logger = get_logger(__name__)


class QuickVibeApp(App[Optional[AttachPlan]]):
    """Pick a devcontainer instance and a tmux session to attach to.

    The app exits with an AttachPlan; performing the hand-off is left to
    the caller.
    """

    TITLE = "quickVibe"
    SUB_TITLE = f"v{__version__}"

    CSS = """
    Screen {
        background: $surface;
    }

    DataTable {
        height: 1fr;
    }

    #status-bar {
        dock: bottom;
        height: auto;
        background: $panel;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("enter", "select", "Attach", show=False),
        Binding("r", "refresh", "Refresh"),
        Binding("x", "stop", "Stop"),
        Binding("R", "restart", "Restart"),
        Binding("n", "new_worktree", "New Worktree"),
        Binding("g", "issue_worktree", "From Issue"),
        Binding("d", "delete_worktree", "Delete Worktree"),
        Binding("c", "show_config", "Config"),
        Binding("l", "show_legend", "Legend"),
    ]

    def __init__(self, quickvibe: QuickVibe, items: Optional[List[EnrichedInstance]] = None):
        super().__init__()
        self.quickvibe = quickvibe
        self.items: List[EnrichedInstance] = items or []
        self.selected: Optional[EnrichedInstance] = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False, icon="")
        yield DataTable(id="instance-table", cursor_type="row", zebra_stripes=True)
        yield Static(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        if not self.quickvibe.config.dark_mode:
            self.theme = "textual-light"

        table = self.query_one(DataTable)
        for col in COLUMNS:
            table.add_column(col.label, key=col.key)

        if self.items:
            self._populate_table()
        else:
            self.refresh_data()

    # Table helpers

    def _populate_table(self) -> None:
        table = self.query_one(DataTable)
        saved_row = table.cursor_row
        table.clear()

        for item in self.items:
            color = TUI_COLORS.get(item.status.value, TUI_COLORS["unknown"])
            # Match COLUMNS order: Instance, Status, Sessions, Branch, Path
            table.add_row(
                Text(item.display_name, style="bold" if item.is_running else ""),
                Text(format_status(item.status), style=color),
                Text(format_sessions(item), justify="center"),
                Text(format_branch(item)),
                Text(truncate_path(shorten_home(item.path), 60), style="dim"),
                key=item.path,
            )

        if saved_row is not None and self.items:
            table.cursor_coordinate = Coordinate(min(saved_row, len(self.items) - 1), 0)
        self._update_status()

    def _update_status(self, message: Optional[str] = None) -> None:
        status = self.query_one("#status-bar", Static)
        if message:
            status.update(message)
            return
        if not self.items:
            status.update(f"No devcontainer projects found. Add search paths to: {default_config_path()}")
            return
        running = sum(1 for item in self.items if item.is_running)
        sessions = sum(item.session_count for item in self.items)
        status.update(f"Total: {len(self.items)} | Running: {running} | Sessions: {sessions}")

    def _current_item(self) -> Optional[EnrichedInstance]:
        table = self.query_one(DataTable)
        row_index = table.cursor_row
        if row_index is None or row_index >= len(self.items):
            return None
        return self.items[row_index]

    def _show_error(self, action: str, error: Exception) -> None:
        logger.error(f"Error {action}: {error}", exc_info=True)
        self._update_status()
        self.push_screen(InfoScreen(f"Error {action}:\n\n{error}"))

    # Loading

    def action_refresh(self) -> None:
        """Trigger refresh of instance data."""
        self.refresh_data()

    @work(exclusive=True, group="load", thread=False)
    async def refresh_data(self) -> None:
        """Rediscover instances and their status (runs in background)."""
        table = self.query_one(DataTable)
        table.loading = True
        try:
            self.items = await asyncio.to_thread(self.quickvibe.load)
            self._populate_table()
        except Exception as e:
            self._show_error("loading devcontainers", e)
        finally:
            table.loading = False

    # Attach flow

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Handle Enter key press on DataTable."""
        self.action_select()

    def action_select(self) -> None:
        item = self._current_item()
        if item is None:
            return
        self.selected = item
        self.start_and_list_sessions(item)

    @work(exclusive=True, group="attach", thread=False)
    async def start_and_list_sessions(self, item: EnrichedInstance) -> None:
        """Bring the container up, then offer its tmux sessions."""
        self._update_status(f"Starting {item.display_name}... this may take a moment")
        try:
            if not item.is_running:
                await asyncio.to_thread(self.quickvibe.start_container, item.instance)
            sessions = await asyncio.to_thread(self.quickvibe.list_sessions, item.instance)
        except Exception as e:
            self._show_error(f"starting {item.display_name}", e)
            return

        self._update_status()
        self.push_screen(SessionScreen(item.display_name, sessions), self._handle_session_choice)

    def _handle_session_choice(self, result: Optional[Tuple[str, Optional[str]]]) -> None:
        if result is None or self.selected is None:
            return
        action, name = result
        if action == ATTACH:
            self._attach(name)
        elif action == NEW:
            self.push_screen(
                InputScreen(
                    "New session name",
                    placeholder="session-name",
                    value=self.quickvibe.config.default_session_name,
                ),
                self._handle_new_session_name,
            )
        elif action == KILL:
            self.kill_session(self.selected, name)

    def _handle_new_session_name(self, name: Optional[str]) -> None:
        if name is None or self.selected is None:
            return
        self.create_session(self.selected, name)

    @work(exclusive=True, group="attach", thread=False)
    async def create_session(self, item: EnrichedInstance, name: str) -> None:
        try:
            await asyncio.to_thread(self.quickvibe.create_session, item.instance, name)
        except Exception as e:
            self._show_error(f"creating session {name}", e)
            return
        self._attach(name)

    @work(exclusive=True, group="attach", thread=False)
    async def kill_session(self, item: EnrichedInstance, name: str) -> None:
        try:
            await asyncio.to_thread(self.quickvibe.kill_session, item.instance, name)
            self.notify(f"Killed session {name}")
        except Exception as e:
            self._show_error(f"killing session {name}", e)
            return
        self.start_and_list_sessions(item)

    def _attach(self, session_name: str) -> None:
        try:
            plan = self.quickvibe.attach_plan(self.selected.instance, session_name)
        except Exception as e:
            self._show_error("attaching", e)
            return
        self.exit(plan)

    # Container control

    def action_stop(self) -> None:
        item = self._current_item()
        if item is not None:
            self.container_action(item, "stop")

    def action_restart(self) -> None:
        item = self._current_item()
        if item is not None:
            self.container_action(item, "restart")

    @work(group="container", thread=False)
    async def container_action(self, item: EnrichedInstance, action: str) -> None:
        self._update_status(format_progress(action, item.display_name))
        method = self.quickvibe.stop_container if action == "stop" else self.quickvibe.restart_container
        try:
            await asyncio.to_thread(method, item.instance)
            self.notify(f"✓ {item.display_name}: {action} done")
        except Exception as e:
            self._show_error(f"during {action} of {item.display_name}", e)
        self.refresh_data()

    # Worktrees

    def action_new_worktree(self) -> None:
        item = self._current_item()
        if item is None:
            return
        if item.instance.worktree is None:
            self.notify("Not a git repository", severity="warning")
            return
        self.selected = item
        self.push_screen(
            InputScreen(f"New worktree of {item.name}: branch name", placeholder="feature/my-task"),
            self._handle_new_branch_name,
        )

    def _handle_new_branch_name(self, branch_name: Optional[str]) -> None:
        if branch_name is None or self.selected is None:
            return
        self.create_worktree(self.selected, branch_name)

    @work(group="worktree", thread=False)
    async def create_worktree(
        self, item: EnrichedInstance, branch_name: str, issue: Optional[Issue] = None
    ) -> None:
        self._update_status(f"Creating worktree for {branch_name if issue is None else issue}...")
        try:
            if issue is None:
                path = await asyncio.to_thread(
                    self.quickvibe.create_worktree, item.instance, branch_name
                )
            else:
                path = await asyncio.to_thread(
                    self.quickvibe.create_worktree_for_issue, item.instance, issue
                )
            self.notify(f"✓ Created worktree {shorten_home(path)}")
        except Exception as e:
            self._show_error("creating worktree", e)
            return
        self.refresh_data()

    def action_issue_worktree(self) -> None:
        item = self._current_item()
        if item is None:
            return
        if item.instance.worktree is None:
            self.notify("Not a git repository", severity="warning")
            return
        self.selected = item
        self.load_issues(item)

    @work(exclusive=True, group="issues", thread=False)
    async def load_issues(self, item: EnrichedInstance) -> None:
        self._update_status(f"Fetching issues for {item.name}...")
        try:
            issues = await asyncio.to_thread(self.quickvibe.list_issues, item.instance)
        except Exception as e:
            self._show_error("fetching issues", e)
            return
        self._update_status()
        if not issues:
            self.notify("No issues found", severity="warning")
            return
        self.push_screen(IssueScreen(item.name, issues), self._handle_issue_choice)

    def _handle_issue_choice(self, issue: Optional[Issue]) -> None:
        if issue is None or self.selected is None:
            return
        self.create_worktree(self.selected, "", issue)

    def action_delete_worktree(self) -> None:
        item = self._current_item()
        if item is None:
            return
        if not item.instance.is_worktree:
            self.notify("Only linked worktrees can be deleted", severity="warning")
            return
        self.selected = item
        message = (
            f"Delete worktree {item.display_name}?\n\n"
            f"  • {shorten_home(item.path)}\n\n"
            "Its container is stopped and uncommitted changes are lost."
        )
        self.push_screen(ConfirmScreen(message), self._handle_delete_confirmation)

    def _handle_delete_confirmation(self, confirmed: Optional[bool]) -> None:
        if not confirmed or self.selected is None:
            self.notify("Deletion cancelled")
            return
        self.delete_worktree(self.selected)

    @work(group="worktree", thread=False)
    async def delete_worktree(self, item: EnrichedInstance) -> None:
        self._update_status(f"Removing worktree {item.display_name}...")
        try:
            await asyncio.to_thread(self.quickvibe.remove_worktree, item.instance)
            self.notify(f"✓ Removed worktree {item.display_name}")
        except Exception as e:
            self._show_error("removing worktree", e)
            return
        self.refresh_data()

    # Info

    def action_show_config(self) -> None:
        config = self.quickvibe.config
        lines = [f"Config file: {default_config_path()}", "", "Search Paths"]
        lines.extend(f"  {path}" for path in config.search_paths)
        lines.extend(["", f"Max Depth: {config.max_depth}", "", "Excluded Dirs"])
        lines.extend(f"  {name}" for name in config.excluded_dirs)
        lines.extend([
            "",
            f"Default Session: {config.default_session_name}",
            f"Container Timeout: {config.container_timeout_seconds}s",
        ])
        self.push_screen(InfoScreen("\n".join(lines)))

    def action_show_legend(self) -> None:
        self.push_screen(InfoScreen(LEGEND_TEXT))

    async def action_quit(self) -> None:
        self.workers.cancel_all()
        self.exit(None)
