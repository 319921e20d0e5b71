"""Utility modules for the TS refactor agent."""

from .logger import get_logger, reset_logging, setup_logging
from .file_ops import FileManager

__all__ = ["get_logger", "reset_logging", "setup_logging", "FileManager"]
