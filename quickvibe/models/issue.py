"""GitHub issue model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Issue:
    """A GitHub issue that can seed a new worktree."""
    number: int
    title: str
    state: str
    url: str

    def __str__(self) -> str:
        return f"#{self.number} {self.title}"
