"""Configuration handling for quickvibe"""

import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, List

import yaml

from quickvibe.constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_SESSION_NAME,
    DEFAULT_CONTAINER_TIMEOUT,
    MIN_CONTAINER_TIMEOUT,
    MAX_CONTAINER_TIMEOUT,
    DEFAULT_MAX_ISSUES,
    DEFAULT_BRANCH_PREFIX,
    ISSUE_STATES,
)
from quickvibe.exceptions import ConfigError
from quickvibe.logging_config import get_logger

logger = get_logger(__name__)


def get_home_dir() -> str:
    """Home directory, falling back to the temp dir when it cannot be determined."""
    try:
        return str(Path.home())
    except RuntimeError:
        return os.environ.get("TMPDIR", "/tmp")


def expand_path(path: str) -> str:
    """Expand a leading ~ to the user's home directory."""
    if path.startswith("~"):
        return os.path.join(get_home_dir(), path[1:].lstrip("/"))
    return path


def default_config_path() -> Path:
    """Path where the config file is looked up."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path(get_home_dir()) / ".config"
    return base / "quickvibe" / "config.yaml"


@dataclass
class GitHubConfig:
    """Settings for creating worktrees from GitHub issues."""

    max_issues: int = DEFAULT_MAX_ISSUES
    branch_prefix: str = DEFAULT_BRANCH_PREFIX
    default_state: str = "open"

    def __post_init__(self):
        # Missing or nonsensical values fall back to defaults
        if not isinstance(self.max_issues, int) or self.max_issues <= 0:
            self.max_issues = DEFAULT_MAX_ISSUES
        if not self.branch_prefix:
            self.branch_prefix = DEFAULT_BRANCH_PREFIX
        if not self.default_state:
            self.default_state = "open"
        if self.default_state not in ISSUE_STATES:
            raise ValueError(
                f"github.default_state must be one of {ISSUE_STATES}, got '{self.default_state}'"
            )


@dataclass
class Config:
    """Configuration for quickvibe with validation."""

    # Discovery
    search_paths: List[str] = field(default_factory=lambda: [get_home_dir()])
    max_depth: int = DEFAULT_MAX_DEPTH
    excluded_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_DIRS))

    # Sessions and containers
    default_session_name: str = DEFAULT_SESSION_NAME
    container_timeout_seconds: int = DEFAULT_CONTAINER_TIMEOUT
    launch_command: Optional[str] = None
    dark_mode: bool = True

    # Execution modes
    verbose: bool = False
    debug: bool = False
    workers: Optional[int] = None  # Upper bound on status queries in flight (None = one per instance)

    # GitHub integration
    github: GitHubConfig = field(default_factory=GitHubConfig)
    github_token: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.github, dict):
            self.github = GitHubConfig(**self.github)
        self._validate_search_paths()
        self._validate_max_depth()
        self._validate_excluded_dirs()
        self._validate_session_name()
        self._validate_container_timeout()
        self._validate_workers()

    def _validate_search_paths(self):
        """Expand ~ in search paths."""
        if isinstance(self.search_paths, str):
            self.search_paths = [self.search_paths]
        if not isinstance(self.search_paths, list):
            raise ValueError("search_paths must be a list")
        self.search_paths = [expand_path(str(p)) for p in self.search_paths if p]

    def _validate_max_depth(self):
        """A depth of zero or less is replaced by the default."""
        if not isinstance(self.max_depth, int) or self.max_depth <= 0:
            self.max_depth = DEFAULT_MAX_DEPTH

    def _validate_excluded_dirs(self):
        """An empty exclusion list is replaced by the defaults."""
        if not self.excluded_dirs:
            self.excluded_dirs = list(DEFAULT_EXCLUDED_DIRS)

    def _validate_session_name(self):
        if not self.default_session_name or not self.default_session_name.strip():
            self.default_session_name = DEFAULT_SESSION_NAME
        self.default_session_name = self.default_session_name.strip()

    def _validate_container_timeout(self):
        """Clamp the container start timeout to a sane range."""
        timeout = self.container_timeout_seconds
        if not isinstance(timeout, int) or timeout <= 0:
            self.container_timeout_seconds = DEFAULT_CONTAINER_TIMEOUT
        elif timeout < MIN_CONTAINER_TIMEOUT:
            self.container_timeout_seconds = MIN_CONTAINER_TIMEOUT
        elif timeout > MAX_CONTAINER_TIMEOUT:
            self.container_timeout_seconds = MAX_CONTAINER_TIMEOUT

    def _validate_workers(self):
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def to_dict(self) -> dict:
        """Convert config to a plain dictionary (token masked)."""
        data = asdict(self)
        if data.get("github_token"):
            data["github_token"] = "***"
        return data

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "search_paths",
            "max_depth",
            "excluded_dirs",
            "default_session_name",
            "container_timeout_seconds",
            "launch_command",
            "dark_mode",
            "verbose",
            "debug",
            "workers",
            "github",
            "github_token",
        }

        unknown = set(config_dict) - known_fields
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

        filtered = {k: v for k, v in config_dict.items() if k in known_fields and v is not None}
        if isinstance(filtered.get("github"), dict):
            github = filtered["github"]
            filtered["github"] = GitHubConfig(
                max_issues=github.get("max_issues") or DEFAULT_MAX_ISSUES,
                branch_prefix=github.get("branch_prefix") or DEFAULT_BRANCH_PREFIX,
                default_state=github.get("default_state") or "open",
            )
        return cls(**filtered)


def load_config(path: Optional[Path] = None) -> Config:
    """Load the YAML configuration file.

    A missing file yields the defaults.

    Args:
        path: Config file location (defaults to the XDG config path)

    Returns:
        Validated Config

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    config_path = Path(path) if path else default_config_path()
    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return Config()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(str(config_path), str(e)) from e

    if not isinstance(data, dict):
        raise ConfigError(str(config_path), "top level must be a mapping")

    try:
        config = Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(str(config_path), str(e)) from e

    logger.debug(f"Loaded config from {config_path}")
    return config
