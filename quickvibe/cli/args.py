"""Command-line argument parsing for quickvibe."""

import argparse
from typing import List, Optional

from quickvibe.__version__ import __version__


def parse_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Pick a devcontainer (or one of its git worktrees) and attach to a tmux session inside it",
        epilog="Configuration is read from ~/.config/quickvibe/config.yaml. "
        "Set GITHUB_TOKEN to create worktrees from private repository issues.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"quickvibe {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--config", metavar="PATH", help="Path to the config file")
    parser.add_argument(
        "--search-path",
        action="append",
        dest="search_paths",
        metavar="PATH",
        help="Directory to search for devcontainers (repeatable, overrides config)",
    )
    parser.add_argument(
        "--max-depth", type=int, metavar="N", help="How deep to search below each search path"
    )
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Maximum number of parallel status queries (default: one per instance)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print instances with their status and exit",
    )
    parser.add_argument(
        "--show-config", action="store_true", help="Print the effective configuration and exit"
    )
    parser.add_argument(
        "--no-interactive",
        action="store_true",
        help="Force non-interactive mode (same as --list)",
    )

    return parser.parse_args(argv)
