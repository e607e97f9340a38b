"""Todo item model and JSON persistence."""

from todos.store import (
    TodoItem,
    TodoLoadError,
    TodoSaveError,
    TodoStore,
    TodoStoreError,
)

__all__ = [
    "TodoItem",
    "TodoStore",
    "TodoStoreError",
    "TodoLoadError",
    "TodoSaveError",
]
