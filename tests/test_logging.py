# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for mailto/logging.py."""

import logging

from mailto.logging import AddressFilter, configure_logging


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestAddressFilter:
    """Tests for AddressFilter class."""

    def setup_method(self) -> None:
        """Clear addresses before each test."""
        AddressFilter.clear_addresses()

    def teardown_method(self) -> None:
        """Clear addresses after each test."""
        AddressFilter.clear_addresses()

    def test_filter_returns_true(self) -> None:
        """Filter should always return True (never suppress records)."""
        assert AddressFilter().filter(_record("test message")) is True

    def test_no_addresses_no_redaction(self) -> None:
        """Without registered addresses, messages pass through unchanged."""
        record = _record("sending to a@x.com")
        AddressFilter().filter(record)
        assert record.msg == "sending to a@x.com"

    def test_redacts_registered_address(self) -> None:
        """Registered addresses are redacted from messages."""
        AddressFilter.register_address("a@x.com")
        record = _record("sending to a@x.com")
        AddressFilter().filter(record)
        assert record.msg == "sending to [ADDRESS]"

    def test_redacts_case_insensitively(self) -> None:
        """Address case does not defeat redaction."""
        AddressFilter.register_address("Jane@Example.com")
        record = _record("to jane@example.com")
        AddressFilter().filter(record)
        assert record.msg == "to [ADDRESS]"

    def test_redacts_args(self) -> None:
        """String arguments are redacted, others left alone."""
        AddressFilter.register_address("a@x.com")
        record = _record("to %s (%d)", "a@x.com", 3)
        AddressFilter().filter(record)
        assert record.args == ("[ADDRESS]", 3)
        assert record.getMessage() == "to [ADDRESS] (3)"

    def test_redacts_encoded_address(self) -> None:
        """Percent-encoded addresses in a mailto query are redacted."""
        AddressFilter.register_address("a@x.com")
        record = _record("link %s", "mailto:b@y.com?cc=a%40x.com")
        AddressFilter().filter(record)
        assert record.getMessage() == "link mailto:b@y.com?cc=[ADDRESS]"

    def test_longer_address_wins(self) -> None:
        """Overlapping addresses are redacted as a whole."""
        AddressFilter.register_address("a@x.com")
        AddressFilter.register_address("a@x.com.au")
        record = _record("a@x.com.au")
        AddressFilter().filter(record)
        assert record.msg == "[ADDRESS]"

    def test_blank_address_ignored(self) -> None:
        """Blank registrations do not redact anything."""
        AddressFilter.register_address("  ")
        record = _record("plain")
        AddressFilter().filter(record)
        assert record.msg == "plain"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_level_and_single_handler(self) -> None:
        """Root logger gets one handler with the address filter."""
        configure_logging(level=logging.DEBUG)
        configure_logging(level=logging.DEBUG)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert any(
            isinstance(f, AddressFilter) for f in root.handlers[0].filters
        )

    def test_without_redaction(self) -> None:
        """Redaction can be turned off."""
        configure_logging(redact_addresses=False)
        root = logging.getLogger()
        assert not root.handlers[0].filters
