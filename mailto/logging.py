# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Centralized logging configuration with address redaction.

Obfuscated mailto controls exist to keep addresses out of markup; this
module keeps them out of logs as well.  Addresses registered with
``AddressFilter.register_address()`` are replaced with ``[ADDRESS]`` in
every record passing through the configured handler.

Usage:
    # In entry points (CLI)
    from mailto.logging import configure_logging
    configure_logging(level=logging.INFO)

    # In library modules
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Building link for %d recipients", len(to))
"""

import logging
import re
from typing import ClassVar

from mailto.link import encode_component


#: Replacement text for redacted addresses.
REDACTED_ADDRESS = "[ADDRESS]"


class AddressFilter(logging.Filter):
    """Logging filter that redacts registered email addresses.

    Example:
        filter = AddressFilter()
        filter.register_address("jane@example.com")
        logger.addFilter(filter)
        logger.info("Sending to jane@example.com")
        # Output: "Sending to [ADDRESS]"
    """

    _addresses: ClassVar[set[str]] = set()
    _pattern: ClassVar[re.Pattern[str] | None] = None

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact registered addresses in the record.

        Args:
            record: The log record to filter.

        Returns:
            Always True (records are modified, never suppressed).
        """
        if self._pattern is not None:
            record.msg = self._pattern.sub(REDACTED_ADDRESS, str(record.msg))
            if record.args:
                record.args = tuple(
                    self._pattern.sub(REDACTED_ADDRESS, str(arg))
                    if isinstance(arg, str)
                    else arg
                    for arg in record.args
                )
        return True

    @classmethod
    def register_address(cls, address: str) -> None:
        """Register an address to be redacted from all log output.

        Both the raw address and its percent-encoded form (as it appears
        in a mailto query string) are redacted.

        Args:
            address: The address to redact.  Blank values are ignored.
        """
        address = address.strip()
        if address:
            cls._addresses.add(address)
            cls._addresses.add(encode_component(address))
            cls._rebuild_pattern()

    @classmethod
    def clear_addresses(cls) -> None:
        """Forget all registered addresses.  Primarily for testing."""
        cls._addresses.clear()
        cls._pattern = None

    @classmethod
    def _rebuild_pattern(cls) -> None:
        if cls._addresses:
            # Longest first so "a@x.com" does not split "aa@x.com.au".
            ordered = sorted(cls._addresses, key=len, reverse=True)
            cls._pattern = re.compile(
                "|".join(re.escape(a) for a in ordered), re.IGNORECASE
            )
        else:
            cls._pattern = None


def configure_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
    redact_addresses: bool = True,
) -> None:
    """Configure logging for the application.

    Sets up the root logger with a stderr handler, a standard format and
    optional address redaction.

    Args:
        level: The logging level (e.g., logging.INFO, logging.DEBUG).
        format_string: Custom format string. If None, uses default format.
        redact_addresses: Whether to add the AddressFilter.
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format_string))

    if redact_addresses:
        handler.addFilter(AddressFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)

    root_logger.addHandler(handler)
