"""
quickvibe - pick a devcontainer (or one of its git worktrees) and attach to tmux inside it
"""

from .__version__ import __version__
from .core import QuickVibe
from .cli.main import main

__all__ = ["QuickVibe", "main", "__version__"]
