"""Logging configuration for the Interlinx bootstrap installer.

Provides centralized logging with credential redaction to ensure GitHub
tokens are never written to the console or to log files.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional


# Credential patterns to redact from logs
TOKEN_PATTERNS = [
    # GitHub token formats (classic, OAuth, user-to-server, server-to-server, refresh)
    (re.compile(r'\bgh[pousr]_[A-Za-z0-9]{20,}\b'), '[REDACTED]'),
    # Fine-grained personal access tokens
    (re.compile(r'\bgithub_pat_[A-Za-z0-9_]{20,}\b'), '[REDACTED]'),
    # Authorization header values
    (re.compile(r'(authorization["\'\s:=]+)(token|bearer)?\s*[^\s,}\]"\']+', re.IGNORECASE),
     r'\1[REDACTED]'),
    # token=... style key/value pairs
    (re.compile(r'(token["\']?\s*[:=]\s*["\']?)[^\s,}\]"\']+', re.IGNORECASE), r'\1[REDACTED]'),
]


class TokenRedactingFormatter(logging.Formatter):
    """Custom formatter that redacts credentials from log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, redacting any credential."""
        message = super().format(record)
        for pattern, replacement in TOKEN_PATTERNS:
            message = pattern.sub(replacement, message)
        return message


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure installer logging with credential redaction.

    Args:
        level: Logging level (default INFO)
        log_file: Optional file path for log output
        console: Whether to output to console (default True)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("interlinx_bootstrap")
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers.clear()

    # Console output stays short; the log file gets timestamps
    console_formatter = TokenRedactingFormatter(fmt="%(message)s")
    file_formatter = TokenRedactingFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)
        logger.setLevel(min(level, logging.DEBUG))

    return logger
