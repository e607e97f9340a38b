"""Ordered todo list with JSON load/save.

The persisted form is a UTF-8 JSON array of ``{"title": string}`` objects
in display order.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, Iterator

from common.logging_setup import get_logger

logger = get_logger(__name__)


class TodoStoreError(Exception):
    """Base error for todo persistence failures."""


class TodoLoadError(TodoStoreError):
    """The persisted todo file exists but cannot be parsed."""


class TodoSaveError(TodoStoreError):
    """The todo list could not be written out."""


@dataclass(frozen=True)
class TodoItem:
    """A single todo entry."""

    title: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: object) -> "TodoItem":
        if not isinstance(data, dict):
            raise TodoLoadError(f"Todo entry must be an object, got {type(data).__name__}")
        title = data.get("title")
        if not isinstance(title, str):
            raise TodoLoadError("Todo entry is missing a string 'title'")
        return cls(title=title)


class TodoStore:
    """Insertion-ordered collection of todo items.

    Items are only ever appended; index ``i`` is always in ``[0, len)``.
    """

    def __init__(self, items: Iterable[TodoItem] = ()) -> None:
        self._items: list[TodoItem] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(self._items)

    def __getitem__(self, index: int) -> TodoItem:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TodoStore):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"TodoStore({self.titles()!r})"

    def append(self, title: str) -> TodoItem:
        """Add a new item at the end of the list."""
        item = TodoItem(title=title)
        self._items.append(item)
        return item

    def titles(self) -> list[str]:
        return [item.title for item in self._items]

    @classmethod
    def load(cls, source: str | os.PathLike[str]) -> "TodoStore":
        """
        Load a store from a JSON file.

        A missing file yields an empty store. A file that exists but does
        not hold a JSON array of ``{"title": str}`` objects raises
        TodoLoadError rather than being silently replaced.

        Args:
            source: Path of the persisted todo file

        Returns:
            Store holding the persisted items in file order
        """
        path = Path(source)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"No todo file at {path}, starting with an empty list")
            return cls()
        except UnicodeDecodeError as e:
            raise TodoLoadError(f"Malformed todo file {path}: {e}") from e
        except OSError as e:
            raise TodoLoadError(f"Failed to read {path}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise TodoLoadError(f"Malformed todo file {path}: {e}") from e

        if not isinstance(data, list):
            raise TodoLoadError(f"Malformed todo file {path}: expected a JSON array")

        store = cls(TodoItem.from_dict(entry) for entry in data)
        logger.info(f"Loaded {len(store)} todos from {path}")
        return store

    def save(self, sink: str | os.PathLike[str]) -> None:
        """
        Write the store to a JSON file, replacing any existing content.

        The new content goes to a temporary file next to ``sink`` that is
        renamed over it once fully written, so a failed save leaves the
        previous file intact.

        Args:
            sink: Path of the persisted todo file

        Raises:
            TodoSaveError: If the list cannot be encoded or the file written
        """
        path = Path(sink)
        try:
            payload = json.dumps(
                [item.to_dict() for item in self._items], ensure_ascii=False
            ).encode("utf-8")
        except ValueError as e:
            raise TodoSaveError(f"Failed to encode todos for {path}: {e}") from e

        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
            ) as f:
                tmp_name = f.name
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise TodoSaveError(f"Failed to save todos to {path}: {e}") from e
        logger.debug(f"Saved {len(self._items)} todos to {path}")
