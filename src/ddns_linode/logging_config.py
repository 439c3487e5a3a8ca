"""
Logging configuration for DDNS Linode.

This module provides logging setup with support for console and file output.
Console output always goes to stderr because stdout is reserved for the
single result code read by the Synology DDNS service.
Sensitive information is automatically masked in log messages.
"""

from __future__ import annotations

import logging
import logging.handlers
import re
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Final

    from ddns_linode.config import LoggingConfig


# Pattern to match sensitive keys in log messages
# Each tuple is (pattern, replacement)
# For partial masking, capture the prefix to keep and mask the rest
SENSITIVE_PATTERNS: Final[list[tuple[re.Pattern[str], str]]] = [
    # Linode API key as sent in form bodies or logged as key=value
    # Keep first 6 characters, mask the rest
    (
        re.compile(r'(api_key=")(.{0,6})([^"]*)"', re.IGNORECASE),
        r'\1\2******"',
    ),
    (
        re.compile(r"(api_key=')(.{0,6})([^']*)'", re.IGNORECASE),
        r"\1\2******'",
    ),
    (
        re.compile(r"(api_key=)(?![\"'])([^\s,\"&']{0,6})([^\s,\"&']*)", re.IGNORECASE),
        r"\1\2******",
    ),
]


# Constants
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER: Final[str] = "ddns_linode"


class SensitiveFilter(logging.Filter):
    """
    A logging filter that masks sensitive information.

    This filter replaces API keys with asterisks to prevent credential
    leakage in log files.
    """

    @staticmethod
    def _mask_sensitive(value: str) -> str:
        """
        Apply all sensitive patterns to mask a string.

        Parameters
        ----------
        value : str
            The string to process.

        Returns
        -------
        str
            The string with sensitive data masked.
        """
        result = value
        for pattern, replacement in SENSITIVE_PATTERNS:
            result = pattern.sub(replacement, result)
        return result

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter and modify log record to mask sensitive data.

        The message is formatted with its arguments before masking, so a key
        passed as an argument next to its "api_key=" label is caught too.

        Parameters
        ----------
        record : logging.LogRecord
            The log record to process.

        Returns
        -------
        bool
            Always returns True (record is always logged).
        """
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)

        record.msg = self._mask_sensitive(message)
        record.args = None

        return True


def _configure_handler(handler: logging.Handler) -> None:
    """
    Configure a logging handler with formatter and sensitive filter.

    Parameters
    ----------
    handler : logging.Handler
        The handler to configure.
    """
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handler.setFormatter(formatter)
    handler.addFilter(SensitiveFilter())


def setup_logging(config: LoggingConfig) -> None:
    """
    Set up logging based on configuration.

    A log file that cannot be opened is reported on the console and skipped;
    diagnostic logging must never prevent the update from running.

    Parameters
    ----------
    config : LoggingConfig
        Logging configuration.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, config.level.upper(), logging.WARNING))

    # Clear any existing handlers
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    console_handler = logging.StreamHandler(sys.stderr)
    _configure_handler(console_handler)
    logger.addHandler(console_handler)

    if config.file_enabled:
        log_path = config.file_path_as_path
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.WatchedFileHandler(
                str(log_path),
                encoding="utf-8",
                delay=False,
            )
            _configure_handler(file_handler)
            logger.addHandler(file_handler)
            logger.debug('File logging enabled: "%s".', log_path)
        except OSError as e:
            logger.error("Failed to enable file logging: %s", e)  # noqa: TRY400

    # Prevent propagation to root logger
    logger.propagate = False
