"""taskboard: action-driven task board with undo/redo and crash-safe persistence."""

__version__ = "0.1.0"
