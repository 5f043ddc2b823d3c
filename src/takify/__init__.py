"""Takify - personal task manager with live-synchronized tasks."""

__version__ = "0.1.0"
