"""Thin wrapper around subprocess for the external tools quickvibe drives."""

import shutil
import subprocess
from typing import Optional, Sequence

from quickvibe.exceptions import CommandError
from quickvibe.logging_config import get_logger

logger = get_logger(__name__)


def which(program: str) -> Optional[str]:
    """Return the full path of an executable on PATH, or None."""
    return shutil.which(program)


def run_command(
    args: Sequence[str],
    timeout: Optional[float] = None,
    cwd: Optional[str] = None,
) -> str:
    """Run a command and return its stdout.

    A command that is missing, times out or exits non-zero raises
    CommandError; callers decide whether that is fatal.

    Args:
        args: Program and arguments
        timeout: Seconds before the process is killed
        cwd: Working directory

    Returns:
        Captured stdout as text

    Raises:
        CommandError: On any failure to run the command successfully
    """
    logger.debug(f"Running: {' '.join(args)}")
    try:
        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired as e:
        raise CommandError(args, timed_out=True) from e
    except OSError as e:
        # FileNotFoundError / PermissionError for the executable itself
        raise CommandError(args, stderr=str(e)) from e

    if result.returncode != 0:
        raise CommandError(args, returncode=result.returncode, stderr=result.stderr)
    return result.stdout
