"""Common utilities for the todo TUI."""

from common.config import Config
from common.logging_setup import setup_logging, get_logger

__version__ = "0.1.0"

__all__ = ["Config", "setup_logging", "get_logger", "__version__"]
