"""Reading history file storage."""

from green_challenge.storage.history import load_history, save_history

__all__ = ["load_history", "save_history"]
