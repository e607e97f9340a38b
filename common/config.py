"""Configuration management for the todo TUI."""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_DATA_PATH = "./.data/home.json"
DEFAULT_LOG_FILE = "./.data/todo-tui.log"


@dataclass
class Config:
    """Configuration settings for the todo TUI."""
    
    # JSON file the todo list is loaded from and saved to
    data_path: str = DEFAULT_DATA_PATH
    
    # Event loop rates (per second)
    tick_rate: float = 1.0
    frame_rate: float = 60.0
    
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = DEFAULT_LOG_FILE

    @classmethod
    def from_env(cls) -> "Config":
        """Build a config whose defaults honour the TODO_TUI_* environment variables."""
        return cls(
            data_path=os.getenv("TODO_TUI_DATA", DEFAULT_DATA_PATH),
            log_level=os.getenv("TODO_TUI_LOGLEVEL", "INFO"),
            log_file=os.getenv("TODO_TUI_LOG_FILE", DEFAULT_LOG_FILE) or None,
        )

