"""
Logging utilities for the Intent-to-JSON Playground backend.

Provides standardized logger configuration following privacy rules.

CRITICAL RULES:
- NEVER log raw image bytes or base64 payloads
- NEVER log the full user text or model reply (previews only, at DEBUG)
- NEVER log API keys or secrets

Acceptable logging:
- High-level events (e.g., "Structured invocation started", "Schema compiled")
- Non-sensitive metadata (e.g., content kind, byte sizes, model name)
- Error categories and sanitized error messages
"""

import logging
from typing import Optional

from playground.config import settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to settings.LOG_LEVEL)

    Returns:
        Configured logger instance

    Usage:
        >>> from playground.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        # Root is configured by main.py as well; avoid printing twice
        logger.propagate = False

    return logger


def preview(text: Optional[str], limit: int = 200) -> str:
    """Truncate free text before it goes into a DEBUG log line."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... ({len(text)} chars)"
