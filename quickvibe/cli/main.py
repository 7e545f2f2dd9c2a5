"""Command-line interface for quickvibe"""

import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from quickvibe.cli.args import parse_args
from quickvibe.config import Config, load_config
from quickvibe.core import QuickVibe
from quickvibe.exceptions import QuickVibeError
from quickvibe.logging_config import setup_logging, get_logger
from quickvibe.models.session import AttachPlan
from quickvibe.services.display_service import DisplayService

console = Console()
logger = get_logger(__name__)


def build_config(parsed_args) -> Config:
    """Load the config file and apply command-line overrides."""
    config = load_config(parsed_args.config)
    overrides = {
        "verbose": parsed_args.verbose,
        "debug": parsed_args.debug,
    }
    if parsed_args.search_paths:
        overrides["search_paths"] = parsed_args.search_paths
    if parsed_args.max_depth is not None:
        overrides["max_depth"] = parsed_args.max_depth
    if parsed_args.workers is not None:
        overrides["workers"] = parsed_args.workers

    data = {**config.to_dict(), **overrides}
    data["github_token"] = config.github_token
    return Config.from_dict(data)


def hand_off(plan: AttachPlan) -> None:
    """Replace this process with the attached tmux session."""
    logger.info(f"Attaching to {plan.session_name} in {plan.workspace_folder}")
    os.execvp(plan.executable, plan.argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        use_interactive = (
            sys.stdin.isatty()
            and sys.stdout.isatty()
            and not (parsed_args.no_interactive or parsed_args.list or parsed_args.show_config)
        )

        # The TUI owns the terminal, so logs go to file only
        setup_logging(
            verbose=parsed_args.verbose, debug=parsed_args.debug, tui_mode=use_interactive
        )

        config = build_config(parsed_args)
        display = DisplayService(console)

        if parsed_args.debug and not use_interactive:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        if parsed_args.show_config:
            display.display_config(config, parsed_args.config)
            return 0

        app = QuickVibe(config)
        try:
            if not use_interactive:
                with console.status("Discovering devcontainers..."):
                    items = app.load()
                display.display_instance_table(items)
                return 0

            from quickvibe.tui import QuickVibeApp

            plan = QuickVibeApp(app).run()
        finally:
            app.close()

        if plan is not None:
            hand_off(plan)
        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except QuickVibeError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
