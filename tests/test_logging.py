# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Tests - Context stacking and formatters
# PURPOSE: Verify log context fields reach formatted output
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import json
import logging

from __version__ import __version__, __version_info__
from core.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_checkpoint,
    log_context,
)


def make_record(message="hello"):
    return logging.LogRecord("test", logging.INFO, __file__, 10, message, None, None)


class TestLogContext:

    def test_nested_contexts_inherit(self):
        with log_context(schema_name="Blog"):
            with log_context(table_name="Post"):
                context = get_current_context()
                assert context.schema_name == "Blog"
                assert context.table_name == "Post"
            assert get_current_context().table_name is None
        assert get_current_context().schema_name is None

    def test_to_dict_skips_empty(self):
        with log_context(schema_name="Blog", extra={"column": "BlogId"}):
            assert get_current_context().to_dict() == {"schema_name": "Blog", "column": "BlogId"}


class TestFormatters:

    def test_structured_output(self):
        with log_context(schema_name="Blog", operation="add_table"):
            output = json.loads(StructuredFormatter().format(make_record()))
        assert output["message"] == "hello"
        assert output["level"] == "INFO"
        assert output["context"] == {"schema_name": "Blog", "operation": "add_table"}

    def test_human_output(self):
        with log_context(schema_name="Blog", table_name="Post"):
            output = HumanFormatter().format(make_record())
        assert "[schema=Blog, table=Post]: hello" in output


class TestLoggers:

    def test_component_in_extra(self, caplog):
        logger = get_logger("schema.test", ComponentType.MANAGER)
        with caplog.at_level(logging.INFO, logger="schema.test"):
            with log_context(schema_name="Blog"):
                logger.info("mutated")
        record = caplog.records[-1]
        assert record.extra["component"] == "manager"
        assert record.extra["schema_name"] == "Blog"

    def test_checkpoint(self, caplog):
        with caplog.at_level(logging.INFO, logger="checkpoint"):
            with log_context(schema_name="Blog"):
                log_checkpoint("schema_definition_written", {"tables": 2})
        record = caplog.records[-1]
        assert record.getMessage() == "CHECKPOINT: schema_definition_written"
        assert record.extra["schema_name"] == "Blog"
        assert record.extra["data"] == {"tables": 2}


def test_version():
    assert __version_info__ == tuple(int(x) for x in __version__.split("."))
