"""Tests for the structured logging helpers."""

import logging

from markup_tree.shared.logging import (
    LOG_FORMAT,
    ContextFormatter,
    CorrelationLogger,
    get_logger,
)


def make_record(**extra):
    return logging.makeLogRecord(
        {"name": "markup_tree.tree.builder", "levelname": "WARNING",
         "levelno": logging.WARNING, "msg": "Tree building failed", **extra}
    )


class TestCorrelationLogger:
    """Test the correlation-aware logger wrapper."""

    def test_component_defaults_to_module_name(self):
        """Test that the component falls back to the last name part."""
        logger = get_logger("markup_tree.events.reader")

        assert isinstance(logger, CorrelationLogger)
        assert logger.component == "reader"
        assert logger.correlation_id is None

    def test_extra_is_attached(self, caplog):
        """Test that component, correlation ID and extras reach the record."""
        logger = get_logger("markup_tree.test", "req-1", "xml_tree_builder")

        with caplog.at_level(logging.INFO, logger="markup_tree.test"):
            logger.info("built", extra={"elements": 3})

        record = caplog.records[0]
        assert record.component == "xml_tree_builder"
        assert record.correlation_id == "req-1"
        assert record.elements == 3


class TestContextFormatter:
    """Test rendering of component and correlation ID."""

    def test_component_and_correlation_id(self):
        """Test a record carrying both context fields."""
        record = make_record(component="xml_tree_builder", correlation_id="req-42")

        assert ContextFormatter(LOG_FORMAT).format(record) == (
            "WARNING markup_tree.tree.builder [xml_tree_builder req-42]: "
            "Tree building failed"
        )

    def test_component_only(self):
        """Test that a missing correlation ID is left out."""
        record = make_record(component="event_reader", correlation_id=None)

        assert "[event_reader]:" in ContextFormatter(LOG_FORMAT).format(record)

    def test_plain_record(self):
        """Test records from loggers that add no context."""
        record = make_record()

        assert ContextFormatter(LOG_FORMAT).format(record) == (
            "WARNING markup_tree.tree.builder: Tree building failed"
        )
