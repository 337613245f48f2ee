"""
Logging configuration and utilities for the AutoSend scheduler.
"""
from .config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
