"""Display service for non-interactive output"""
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from quickvibe.config import Config, default_config_path
from quickvibe.constants import COLUMNS, CLI_COLORS
from quickvibe.formatters import format_status, format_sessions, format_branch, shorten_home
from quickvibe.models.instance import EnrichedInstance
from quickvibe.logging_config import get_logger

logger = get_logger(__name__)


class DisplayService:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_instance_table(self, items: List[EnrichedInstance]) -> None:
        """Print a table of instances with their live status."""
        if not items:
            self.console.print("[red]No devcontainer projects found.[/red]")
            self.console.print(f"[dim]Add search paths to: {default_config_path()}[/dim]")
            return

        table = Table()
        for col in COLUMNS:
            table.add_column(col.label)

        for item in items:
            row_style = CLI_COLORS.get(item.status.value)
            # Match COLUMNS order: Instance, Status, Sessions, Branch, Path
            table.add_row(
                escape(item.display_name),
                format_status(item.status),
                format_sessions(item),
                escape(format_branch(item)),
                escape(shorten_home(item.path)),
                style=row_style,
            )

        self.console.print(table)

        running = sum(1 for item in items if item.is_running)
        sessions = sum(item.session_count for item in items)
        self.console.print(
            f"\nTotal: {len(items)} | Running: {running} | Sessions: {sessions}"
        )

    def display_config(self, config: Config, config_path: Optional[str] = None) -> None:
        """Print the effective configuration."""
        self.console.print(f"[dim]Config file:[/dim] {config_path or default_config_path()}\n")
        self.console.print("[bold]Search Paths[/bold]")
        for path in config.search_paths:
            self.console.print(f"  {path}")
        self.console.print(f"\n[bold]Max Depth:[/bold] {config.max_depth}\n")
        self.console.print("[bold]Excluded Dirs[/bold]")
        for name in config.excluded_dirs:
            self.console.print(f"  [dim]{name}[/dim]")
        self.console.print(f"\n[bold]Default Session:[/bold] {config.default_session_name}")
        self.console.print(f"[bold]Container Timeout:[/bold] {config.container_timeout_seconds}s")
        if config.launch_command:
            self.console.print(f"[bold]Launch Command:[/bold] {config.launch_command}")
        self.console.print(
            f"[bold]GitHub:[/bold] {config.github.default_state} issues, "
            f"up to {config.github.max_issues}, branch prefix '{config.github.branch_prefix}'"
        )
