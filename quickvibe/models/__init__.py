"""Data models for quickvibe."""
