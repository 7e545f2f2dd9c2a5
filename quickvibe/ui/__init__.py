"""Textual screens used by the quickvibe TUI."""
